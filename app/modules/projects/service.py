from supabase import Client
from app.modules.projects.schemas import ProjectCreate, ProjectResponse
from app.modules.members.service import MemberService
from app.modules.roles.service import RoleService
from app.modules.plans.service import PlanService
from app.modules.audit.service import AuditLogService
from app.config.permissions_config import ROLE_OWNER, ROLE_ADMIN
from app.core.exceptions import NotFound, Conflict
from app.database.supabase_client import utc_now_iso
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(
        self,
        supabase: Client,
        member_service: Optional[MemberService] = None,
        role_service: Optional[RoleService] = None,
        plan_service: Optional[PlanService] = None,
        audit: Optional[AuditLogService] = None
    ):
        self.supabase = supabase
        self.role_service = role_service or RoleService(supabase)
        self.audit = audit or AuditLogService(supabase)
        self.member_service = member_service or MemberService(supabase, role_service=self.role_service, audit=self.audit)
        self.plan_service = plan_service or PlanService(supabase)

    def create_project(self, project_data: ProjectCreate, owner_id: str) -> ProjectResponse:
        """Create a project and make its creator the OWNER"""
        if project_data.plan_id:
            self.plan_service.get_plan_by_id(project_data.plan_id)
        owner_role = self.role_service.get_role_by_name(ROLE_OWNER)

        result = self.supabase.table("projects").insert({
            "name": project_data.name,
            "owner_id": owner_id,
            "plan_id": project_data.plan_id
        }).execute()
        project = ProjectResponse(**result.data[0])

        # Add creator as owner
        self.member_service.set_role(project.id, owner_id, owner_role.id, actor_id=owner_id)
        logger.info(f"Project {project.id} created by {owner_id}")
        return project

    def get_project(self, project_id: str) -> ProjectResponse:
        """Get project by ID"""
        result = self.supabase.table("projects")\
            .select("*")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFound("Project not found")
        return ProjectResponse(**result.data[0])

    def delete_project(self, project_id: str) -> None:
        """Delete project with its invitations and memberships"""
        self.get_project(project_id)

        # Delete invitations first
        self.supabase.table("project_invitations")\
            .delete()\
            .eq("project_id", project_id)\
            .execute()

        # Delete project members
        self.supabase.table("project_members")\
            .delete()\
            .eq("project_id", project_id)\
            .execute()

        # Delete project
        self.supabase.table("projects")\
            .delete()\
            .eq("id", project_id)\
            .execute()
        logger.info(f"Project {project_id} deleted")

    def transfer_ownership(self, project_id: str, from_user_id: str, to_user_id: str) -> ProjectResponse:
        """
        Hand the OWNER role to another member. The new owner is promoted before the
        current one is demoted to ADMIN, so the project never lacks an owner.
        """
        self.get_project(project_id)
        if from_user_id == to_user_id:
            raise Conflict("User already owns the project")
        if self.member_service.get_member(project_id, to_user_id) is None:
            raise NotFound("New owner must already be a project member")

        owner_role = self.role_service.get_role_by_name(ROLE_OWNER)
        admin_role = self.role_service.get_role_by_name(ROLE_ADMIN)
        current = self.member_service.get_member(project_id, from_user_id)
        if current is None or current.role_id != owner_role.id:
            raise Conflict("Only an owner can transfer ownership")

        self.member_service.set_role(project_id, to_user_id, owner_role.id, actor_id=from_user_id)
        self.member_service.set_role(project_id, from_user_id, admin_role.id, actor_id=from_user_id)

        result = self.supabase.table("projects")\
            .update({"owner_id": to_user_id, "updated_at": utc_now_iso()})\
            .eq("id", project_id)\
            .execute()
        self.audit.record(project_id, from_user_id, "project.transfer_ownership", "project", project_id,
                          {"new_owner_id": to_user_id})
        return ProjectResponse(**result.data[0])
