from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.invitations.schemas import InvitationCreate, InvitationResponse, AcceptInvitationResponse
from app.modules.invitations.service import InvitationService
from app.modules.roles.service import RoleService
from app.core.dependencies import get_current_user_id, require_project_action
from app.core.exceptions import Denied
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["invitations"])


def get_invitation_service(supabase: Client = Depends(get_supabase)) -> InvitationService:
    return InvitationService(supabase)


@router.post("/projects/{project_id}/invitations", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    project_id: str,
    invitation_data: InvitationCreate,
    user_data: Dict = Depends(require_project_action("members.invite")),
    service: InvitationService = Depends(get_invitation_service)
):
    """Invite someone by email. The invited role cannot be above the inviter's own."""
    inviter_role = service.member_service.get_role(project_id, user_data["id"])
    invited_role = service.role_service.get_role_by_id(invitation_data.role_id)
    if inviter_role is None or invited_role.outranks(inviter_role):
        raise Denied("Cannot invite with a role higher than your own")
    return service.create(project_id, invitation_data.email, invitation_data.role_id, user_data["id"])


@router.get("/projects/{project_id}/invitations", response_model=List[InvitationResponse])
async def list_project_invitations(
    project_id: str,
    user_data: Dict = Depends(require_project_action("invitations.view")),
    service: InvitationService = Depends(get_invitation_service)
):
    return service.list_for_project(project_id)


@router.delete("/projects/{project_id}/invitations/{invitation_id}", status_code=204)
async def cancel_invitation(
    project_id: str,
    invitation_id: str,
    user_data: Dict = Depends(require_project_action("invitations.cancel")),
    service: InvitationService = Depends(get_invitation_service)
):
    service.cancel(project_id, invitation_id, actor_id=user_data["id"])
    return None


@router.get("/invitations/pending", response_model=List[InvitationResponse])
async def list_my_invitations(
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service)
):
    """Pending invitations addressed to the caller's email"""
    if not user_data.get("email"):
        return []
    return service.list_pending_for_email(user_data["email"])


@router.post("/invitations/{token}/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    token: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service)
):
    """Accept an invitation addressed to the caller's email"""
    return service.accept(token, user_data["id"], email=user_data.get("email") or "")


@router.post("/invitations/{token}/decline", status_code=204)
async def decline_invitation(
    token: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service)
):
    service.decline(token)
    return None
