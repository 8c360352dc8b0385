from concurrent.futures import ThreadPoolExecutor
from supabase import Client
from app.modules.permissions.cache import PermissionCache
from app.modules.permissions.schemas import (
    PlanActionPermissionResponse, RoleActionPermissionResponse,
    AccessMatrixRow, AccessMatrixResponse
)
from app.modules.actions.service import ActionService
from app.modules.roles.service import RoleService
from app.modules.plans.service import PlanService
from app.modules.members.service import MemberService
from app.database.supabase_client import utc_now_iso
from app.config import settings
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class PermissionMatrixService:
    """
    The two permission relations: plan -> action (enabled) and (plan, role) -> action (allowed).

    They are configured separately and queried separately. A missing row means
    disabled / denied. Every write invalidates the cached decisions of the plan
    before returning.
    """

    def __init__(
        self,
        supabase: Client,
        cache: PermissionCache,
        plan_service: Optional[PlanService] = None,
        role_service: Optional[RoleService] = None,
        action_service: Optional[ActionService] = None
    ):
        self.supabase = supabase
        self.cache = cache
        self.plan_service = plan_service or PlanService(supabase)
        self.role_service = role_service or RoleService(supabase)
        self.action_service = action_service or ActionService(supabase)

    def is_action_enabled_for_plan(self, plan_id: str, action_id: str) -> bool:
        """True iff the plan advertises the action"""
        result = self.supabase.table("plan_action_permissions")\
            .select("enabled")\
            .eq("plan_id", plan_id)\
            .eq("action_id", action_id)\
            .limit(1)\
            .execute()
        return bool(result.data) and bool(result.data[0].get("enabled"))

    def can_role_perform_action(self, plan_id: str, role_id: str, action_id: str) -> bool:
        """True iff a row for this exact triple says allowed. Independent of the plan flag."""
        result = self.supabase.table("role_action_permissions")\
            .select("allowed")\
            .eq("plan_id", plan_id)\
            .eq("role_id", role_id)\
            .eq("action_id", action_id)\
            .limit(1)\
            .execute()
        return bool(result.data) and bool(result.data[0].get("allowed"))

    def get_plan_permissions(self, plan_id: str) -> List[PlanActionPermissionResponse]:
        """All plan -> action rows for a plan"""
        self.plan_service.get_plan_by_id(plan_id)
        result = self.supabase.table("plan_action_permissions")\
            .select("*")\
            .eq("plan_id", plan_id)\
            .execute()
        return [PlanActionPermissionResponse(**row) for row in result.data or []]

    def get_role_permissions(self, plan_id: str, role_id: Optional[str] = None) -> List[RoleActionPermissionResponse]:
        """All (plan, role) -> action rows for a plan, optionally narrowed to one role"""
        self.plan_service.get_plan_by_id(plan_id)
        query = self.supabase.table("role_action_permissions")\
            .select("*")\
            .eq("plan_id", plan_id)
        if role_id:
            query = query.eq("role_id", role_id)
        result = query.execute()
        return [RoleActionPermissionResponse(**row) for row in result.data or []]

    def get_access_matrix(self, plan_id: str) -> AccessMatrixResponse:
        """Every action with its plan flag and per-role allowed flag, for the admin matrix screen"""
        plan_rows = {p.action_id: p.enabled for p in self.get_plan_permissions(plan_id)}
        role_rows = {}
        for row in self.get_role_permissions(plan_id):
            role_rows[(row.role_id, row.action_id)] = row.allowed
        roles = self.role_service.list_roles()

        rows = []
        for action in self.action_service.list_actions():
            rows.append(AccessMatrixRow(
                action_id=action.id,
                slug=action.slug,
                name=action.name,
                category=action.category,
                enabled=plan_rows.get(action.id, False),
                roles={role.id: role_rows.get((role.id, action.id), False) for role in roles}
            ))
        return AccessMatrixResponse(plan_id=plan_id, rows=rows)

    def upsert_plan_permission(self, plan_id: str, action_id: str, enabled: bool = True) -> PlanActionPermissionResponse:
        """Create or update the plan -> action row"""
        self.plan_service.get_plan_by_id(plan_id)
        action = self.action_service.get_action_by_id(action_id)

        result = self.supabase.table("plan_action_permissions").upsert({
            "plan_id": plan_id,
            "action_id": action_id,
            "enabled": enabled,
            "updated_at": utc_now_iso()
        }, on_conflict="plan_id,action_id").execute()

        self.cache.invalidate_plan(plan_id)
        logger.info(f"Plan {plan_id}: action {action.slug} enabled={enabled}")
        return PlanActionPermissionResponse(**result.data[0])

    def upsert_role_permission(self, plan_id: str, role_id: str, action_id: str, allowed: bool = True) -> RoleActionPermissionResponse:
        """Create or update the (plan, role) -> action row"""
        self.plan_service.get_plan_by_id(plan_id)
        self.role_service.get_role_by_id(role_id)
        action = self.action_service.get_action_by_id(action_id)

        result = self.supabase.table("role_action_permissions").upsert({
            "plan_id": plan_id,
            "role_id": role_id,
            "action_id": action_id,
            "allowed": allowed,
            "updated_at": utc_now_iso()
        }, on_conflict="plan_id,role_id,action_id").execute()

        # Whole plan, not just the one key
        self.cache.invalidate_plan(plan_id)
        logger.info(f"Plan {plan_id}: role {role_id} action {action.slug} allowed={allowed}")
        return RoleActionPermissionResponse(**result.data[0])

    def delete_plan_permission(self, plan_id: str, action_id: str) -> bool:
        """Remove the plan -> action row (back to disabled). Returns False if there was no row."""
        self.plan_service.get_plan_by_id(plan_id)
        self.action_service.get_action_by_id(action_id)
        result = self.supabase.table("plan_action_permissions")\
            .delete()\
            .eq("plan_id", plan_id)\
            .eq("action_id", action_id)\
            .execute()
        self.cache.invalidate_plan(plan_id)
        return bool(result.data)

    def delete_role_permission(self, plan_id: str, role_id: str, action_id: str) -> bool:
        """Remove the (plan, role) -> action row (back to denied). Returns False if there was no row."""
        self.plan_service.get_plan_by_id(plan_id)
        self.role_service.get_role_by_id(role_id)
        self.action_service.get_action_by_id(action_id)
        result = self.supabase.table("role_action_permissions")\
            .delete()\
            .eq("plan_id", plan_id)\
            .eq("role_id", role_id)\
            .eq("action_id", action_id)\
            .execute()
        self.cache.invalidate_plan(plan_id)
        return bool(result.data)


class PermissionService:
    """
    Answers "can user U perform action A in project P".

    Checks are total: no membership, an unknown action or a storage failure all
    produce False rather than an exception.
    """

    def __init__(
        self,
        supabase: Client,
        cache: PermissionCache,
        matrix: Optional[PermissionMatrixService] = None,
        plan_service: Optional[PlanService] = None,
        member_service: Optional[MemberService] = None,
        action_service: Optional[ActionService] = None,
        max_workers: Optional[int] = None
    ):
        self.supabase = supabase
        self.cache = cache
        self.plan_service = plan_service or PlanService(supabase)
        self.member_service = member_service or MemberService(supabase)
        self.action_service = action_service or ActionService(supabase)
        self.matrix = matrix or PermissionMatrixService(
            supabase, cache, plan_service=self.plan_service, action_service=self.action_service
        )
        self.max_workers = max_workers or settings.permission_check_workers

    def can_user_perform_action(self, user_id: str, project_id: str, action_slug: str) -> bool:
        try:
            plan = self.plan_service.resolve_project_plan(project_id)
            if plan is None:
                return False

            member = self.member_service.get_member(project_id, user_id)
            if member is None:
                return False

            action = self.action_service.find_action_by_slug(action_slug)
            if action is None:
                return False

            cache_key = self.cache.make_key(plan.id, member.role_id, action_slug)
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

            # Taken before the matrix read so a write landing mid-check is not cached over
            generation = self.cache.generation(plan.id)
            # The plan enable flag is deliberately not consulted here
            allowed = self.matrix.can_role_perform_action(plan.id, member.role_id, action.id)
            self.cache.set_if_current(cache_key, allowed, generation)
            return allowed
        except Exception as e:
            logger.exception(f"Permission check failed for user {user_id} in project {project_id} ({action_slug}): {e}")
            return False

    def can_user_perform_actions(self, user_id: str, project_id: str, action_slugs: List[str]) -> Dict[str, bool]:
        """Evaluate each slug independently and concurrently"""
        slugs = list(dict.fromkeys(action_slugs))
        if not slugs:
            return {}
        workers = min(len(slugs), self.max_workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            decisions = pool.map(
                lambda slug: self.can_user_perform_action(user_id, project_id, slug),
                slugs
            )
            return dict(zip(slugs, decisions))
