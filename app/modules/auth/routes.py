from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import CurrentUserResponse
from app.modules.members.service import MemberService
from app.core.dependencies import get_current_user_id, is_super_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Get current user info and the projects they belong to"""
    memberships = MemberService(supabase).list_user_memberships(user_data["id"])
    return CurrentUserResponse(
        id=user_data["id"],
        email=user_data.get("email"),
        is_super_user=is_super_user(user_data),
        memberships=memberships
    )
