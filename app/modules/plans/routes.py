from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.plans.schemas import PlanResponse
from app.modules.plans.service import PlanService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/plans", tags=["plans"])


def get_plan_service(supabase: Client = Depends(get_supabase)) -> PlanService:
    return PlanService(supabase)


@router.get("", response_model=List[PlanResponse])
async def list_plans(
    include_inactive: bool = False,
    user_data: Dict = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service)
):
    """List subscription plans (active only unless include_inactive=true)"""
    if include_inactive:
        return service.list_plans()
    return service.list_active_plans()


@router.get("/{plan_id}", response_model=PlanResponse)
async def get_plan(
    plan_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service)
):
    """Get plan by ID"""
    return service.get_plan_by_id(plan_id)
