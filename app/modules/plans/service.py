from supabase import Client
from app.modules.plans.schemas import PlanResponse
from app.core.exceptions import NotFound
from app.config import settings
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_plans(self) -> List[PlanResponse]:
        result = self.supabase.table("subscription_plans")\
            .select("*")\
            .order("name")\
            .execute()
        return [PlanResponse(**plan) for plan in result.data or []]

    def list_active_plans(self) -> List[PlanResponse]:
        """List plans that can currently be assigned"""
        result = self.supabase.table("subscription_plans")\
            .select("*")\
            .eq("is_active", True)\
            .order("name")\
            .execute()
        return [PlanResponse(**plan) for plan in result.data or []]

    def find_plan_by_id(self, plan_id: str) -> Optional[PlanResponse]:
        result = self.supabase.table("subscription_plans")\
            .select("*")\
            .eq("id", plan_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return PlanResponse(**result.data[0])

    def get_plan_by_id(self, plan_id: str) -> PlanResponse:
        """Get plan by ID"""
        plan = self.find_plan_by_id(plan_id)
        if plan is None:
            raise NotFound("Plan not found")
        return plan

    def find_plan_by_name(self, name: str) -> Optional[PlanResponse]:
        result = self.supabase.table("subscription_plans")\
            .select("*")\
            .eq("name", name)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return PlanResponse(**result.data[0])

    def get_plan_by_name(self, name: str) -> PlanResponse:
        plan = self.find_plan_by_name(name)
        if plan is None:
            raise NotFound(f"Plan '{name}' not found")
        return plan

    def get_default_plan(self) -> Optional[PlanResponse]:
        return self.find_plan_by_name(settings.default_plan_name)

    def resolve_project_plan(self, project_id: str) -> Optional[PlanResponse]:
        """
        Return the plan a project runs under.

        A project without a plan, or whose plan was deleted, runs under the default
        ("free") plan. Returns None only when the project does not exist or the
        default plan itself is missing.
        """
        project_result = self.supabase.table("projects")\
            .select("id, plan_id")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        if not project_result.data:
            return None

        plan_id = project_result.data[0].get("plan_id")
        if plan_id:
            plan = self.find_plan_by_id(plan_id)
            if plan is not None:
                return plan
            logger.warning(f"Project {project_id} references missing plan {plan_id}; using default plan")
        return self.get_default_plan()

    def assign_plan_to_project(self, project_id: str, plan_id: str) -> PlanResponse:
        """Attach a plan to a project"""
        plan = self.get_plan_by_id(plan_id)
        result = self.supabase.table("projects")\
            .update({"plan_id": plan_id})\
            .eq("id", project_id)\
            .execute()
        if not result.data:
            raise NotFound("Project not found")
        logger.info(f"Project {project_id} moved to plan {plan.name}")
        return plan
