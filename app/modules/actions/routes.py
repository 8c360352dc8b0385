from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.actions.schemas import ActionResponse
from app.modules.actions.service import ActionService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/actions", tags=["actions"])


def get_action_service(supabase: Client = Depends(get_supabase)) -> ActionService:
    return ActionService(supabase)


@router.get("", response_model=List[ActionResponse])
async def list_actions(
    category: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: ActionService = Depends(get_action_service)
):
    """List the action catalog, optionally filtered by category"""
    if category:
        return service.list_actions_by_category(category)
    return service.list_actions()


@router.get("/{slug}", response_model=ActionResponse)
async def get_action(
    slug: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ActionService = Depends(get_action_service)
):
    """Get a single action by slug"""
    return service.get_action_by_slug(slug)
