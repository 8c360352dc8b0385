from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import ProjectCreate, ProjectResponse, OwnershipTransfer
from app.modules.projects.service import ProjectService
from app.modules.plans.schemas import PlanResponse, ProjectPlanAssign
from app.modules.plans.service import PlanService
from app.core.dependencies import get_current_user_id, require_platform_admin, require_project_action
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


def get_plan_service(supabase: Client = Depends(get_supabase)) -> PlanService:
    return PlanService(supabase)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """Create a new project owned by the caller"""
    return service.create_project(project_data, user_data["id"])


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user_data: Dict = Depends(require_project_action("project.view")),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_project(project_id)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    user_data: Dict = Depends(require_project_action("project.delete")),
    service: ProjectService = Depends(get_project_service)
):
    """Delete project, its members and its invitations"""
    service.delete_project(project_id)
    return None


@router.post("/{project_id}/transfer-ownership", response_model=ProjectResponse)
async def transfer_ownership(
    project_id: str,
    transfer_data: OwnershipTransfer,
    user_data: Dict = Depends(require_project_action("project.delete")),
    service: ProjectService = Depends(get_project_service)
):
    return service.transfer_ownership(project_id, user_data["id"], transfer_data.new_owner_id)


@router.get("/{project_id}/plan", response_model=PlanResponse)
async def get_project_plan(
    project_id: str,
    user_data: Dict = Depends(require_project_action("billing.view")),
    service: PlanService = Depends(get_plan_service)
):
    """The plan the project runs under (free when none is assigned)"""
    return service.resolve_project_plan(project_id)


@router.put("/{project_id}/plan", response_model=PlanResponse)
async def assign_project_plan(
    project_id: str,
    plan_data: ProjectPlanAssign,
    user_data: Dict = Depends(require_platform_admin),
    service: PlanService = Depends(get_plan_service)
):
    """Move a project to another plan (billing integrations call this after checkout)"""
    return service.assign_plan_to_project(project_id, plan_data.plan_id)
