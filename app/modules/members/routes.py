from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.members.schemas import MemberResponse, MemberRoleUpdate
from app.modules.members.service import MemberService
from app.core.dependencies import require_project_action
from app.core.exceptions import Denied
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/projects/{project_id}/members", tags=["members"])


def get_member_service(supabase: Client = Depends(get_supabase)) -> MemberService:
    return MemberService(supabase)


def check_not_outranked(service: MemberService, project_id: str, actor_id: str, target_user_id: str) -> None:
    """Actors may not act on members who hold a higher role than their own"""
    actor_role = service.get_role(project_id, actor_id)
    target_role = service.get_role(project_id, target_user_id)
    if actor_role is None or (target_role is not None and target_role.outranks(actor_role)):
        raise Denied("Cannot manage a member with a higher role than your own")


@router.get("", response_model=List[MemberResponse])
async def list_members(
    project_id: str,
    user_data: Dict = Depends(require_project_action("members.view")),
    service: MemberService = Depends(get_member_service)
):
    """List members, owners first"""
    return service.list_members(project_id)


@router.put("/{user_id}", response_model=MemberResponse)
async def update_member_role(
    project_id: str,
    user_id: str,
    role_data: MemberRoleUpdate,
    user_data: Dict = Depends(require_project_action("members.update_role")),
    service: MemberService = Depends(get_member_service)
):
    """Change a member's role. Nobody can grant a role above their own."""
    actor_id = user_data["id"]
    check_not_outranked(service, project_id, actor_id, user_id)
    new_role = service.role_service.get_role_by_id(role_data.role_id)
    if new_role.outranks(service.get_role(project_id, actor_id)):
        raise Denied("Cannot grant a role higher than your own")
    return service.set_role(project_id, user_id, role_data.role_id, actor_id=actor_id)


@router.delete("/{user_id}", status_code=204)
async def remove_member(
    project_id: str,
    user_id: str,
    user_data: Dict = Depends(require_project_action("members.remove")),
    service: MemberService = Depends(get_member_service)
):
    """Remove a member (the last owner cannot be removed)"""
    check_not_outranked(service, project_id, user_data["id"], user_id)
    service.remove(project_id, user_id, actor_id=user_data["id"])
    return None
