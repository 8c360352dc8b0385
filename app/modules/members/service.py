from supabase import Client
from app.modules.members.schemas import MemberResponse
from app.modules.roles.schemas import RoleResponse
from app.modules.roles.service import RoleService
from app.modules.audit.service import AuditLogService
from app.config.permissions_config import ROLE_OWNER
from app.core.exceptions import NotFound, Conflict
from app.database.supabase_client import utc_now_iso
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class MemberService:
    """
    Project memberships: one role per (project, user).

    Membership changes never touch the permission cache. Cache keys are
    (plan, role, action), so a new role simply makes later checks hit a different key.
    """

    def __init__(
        self,
        supabase: Client,
        role_service: Optional[RoleService] = None,
        audit: Optional[AuditLogService] = None
    ):
        self.supabase = supabase
        self.role_service = role_service or RoleService(supabase)
        self.audit = audit or AuditLogService(supabase)

    def get_member(self, project_id: str, user_id: str) -> Optional[MemberResponse]:
        result = self.supabase.table("project_members")\
            .select("*")\
            .eq("project_id", project_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return MemberResponse(**result.data[0])

    def get_role(self, project_id: str, user_id: str) -> Optional[RoleResponse]:
        """The user's role in the project, or None if not a member"""
        member = self.get_member(project_id, user_id)
        if member is None:
            return None
        return self.role_service.find_role_by_id(member.role_id)

    def has_minimum_role(self, project_id: str, user_id: str, required_role_name: str) -> bool:
        return self.role_service.has_minimum_role(self.get_role(project_id, user_id), required_role_name)

    def count_owners(self, project_id: str) -> int:
        owner = self.role_service.get_role_by_name(ROLE_OWNER)
        result = self.supabase.table("project_members")\
            .select("id")\
            .eq("project_id", project_id)\
            .eq("role_id", owner.id)\
            .execute()
        return len(result.data or [])

    def _ensure_not_last_owner(self, member: MemberResponse) -> None:
        owner = self.role_service.get_role_by_name(ROLE_OWNER)
        if member.role_id == owner.id and self.count_owners(member.project_id) <= 1:
            raise Conflict("A project must keep at least one owner; transfer ownership first")

    def set_role(self, project_id: str, user_id: str, role_id: str, actor_id: Optional[str] = None) -> MemberResponse:
        """Add the user to the project with role_id, or change their role if already a member"""
        role = self.role_service.get_role_by_id(role_id)
        project_result = self.supabase.table("projects")\
            .select("id")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        if not project_result.data:
            raise NotFound("Project not found")

        existing = self.get_member(project_id, user_id)
        if existing is not None and existing.role_id != role_id:
            self._ensure_not_last_owner(existing)

        # created_at is left out so a role change keeps the original join time
        result = self.supabase.table("project_members").upsert({
            "project_id": project_id,
            "user_id": user_id,
            "role_id": role_id,
            "updated_at": utc_now_iso()
        }, on_conflict="project_id,user_id").execute()

        logger.info(f"User {user_id} is now {role.name} in project {project_id}")
        self.audit.record(
            project_id, actor_id, "member.role_update", "member", user_id,
            {"role": role.name, "previous_role_id": existing.role_id if existing else None}
        )
        member = MemberResponse(**result.data[0])
        member.role = role
        return member

    def remove(self, project_id: str, user_id: str, actor_id: Optional[str] = None) -> None:
        """Remove a member. The last owner cannot be removed."""
        existing = self.get_member(project_id, user_id)
        if existing is None:
            raise NotFound("Member not found")
        self._ensure_not_last_owner(existing)

        self.supabase.table("project_members")\
            .delete()\
            .eq("project_id", project_id)\
            .eq("user_id", user_id)\
            .execute()

        logger.info(f"User {user_id} removed from project {project_id}")
        self.audit.record(project_id, actor_id, "member.remove", "member", user_id)

    def list_members(self, project_id: str) -> List[MemberResponse]:
        """Members ordered by role priority (owners first), then by join time"""
        result = self.supabase.table("project_members")\
            .select("*")\
            .eq("project_id", project_id)\
            .execute()
        roles = {role.id: role for role in self.role_service.list_roles()}

        members = []
        for row in result.data or []:
            member = MemberResponse(**row)
            member.role = roles.get(member.role_id)
            members.append(member)
        members.sort(key=lambda m: (-(m.role.priority if m.role else 0), m.created_at))
        return members

    def list_user_memberships(self, user_id: str) -> List[MemberResponse]:
        """All projects a user belongs to, most recent first"""
        result = self.supabase.table("project_members")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("created_at", desc=True)\
            .execute()
        return [MemberResponse(**row) for row in result.data or []]
