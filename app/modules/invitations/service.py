from supabase import Client
from app.modules.invitations.schemas import InvitationResponse, AcceptInvitationResponse
from app.modules.members.service import MemberService
from app.modules.roles.service import RoleService
from app.modules.audit.service import AuditLogService
from app.core.exceptions import NotFound, Expired, Denied
from app.core.tokens import TokenGenerator, generate_token
from app.database.supabase_client import utc_now
from app.config import settings
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InvitationService:
    """
    Time-bounded, single-use invitation tokens.

    Pending -> Accepted (membership created, row deleted)
            -> Declined (row deleted)
            -> Expired (now >= expires_at; row is inert)
    """

    def __init__(
        self,
        supabase: Client,
        member_service: Optional[MemberService] = None,
        role_service: Optional[RoleService] = None,
        audit: Optional[AuditLogService] = None,
        token_generator: Optional[TokenGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.supabase = supabase
        self.role_service = role_service or RoleService(supabase)
        self.audit = audit or AuditLogService(supabase)
        self.member_service = member_service or MemberService(supabase, role_service=self.role_service, audit=self.audit)
        self.token_generator = token_generator or generate_token
        self.clock = clock or utc_now

    def _now(self) -> datetime:
        return _as_utc(self.clock())

    def _is_pending(self, invitation: InvitationResponse, now: datetime) -> bool:
        return _as_utc(invitation.expires_at) > now

    def create(self, project_id: str, email: str, role_id: str, invited_by_id: str) -> InvitationResponse:
        """
        Issue a new invitation. Re-inviting the same email creates another token;
        earlier pending invitations stay valid.
        """
        project_result = self.supabase.table("projects")\
            .select("id")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        if not project_result.data:
            raise NotFound("Project not found")
        role = self.role_service.get_role_by_id(role_id)

        now = self._now()
        result = self.supabase.table("project_invitations").insert({
            "project_id": project_id,
            "email": email.strip().lower(),
            "role_id": role_id,
            "invited_by_id": invited_by_id,
            "token": self.token_generator(),
            "created_at": now.isoformat(),
            "expires_at": (now + timedelta(days=settings.invitation_ttl_days)).isoformat()
        }).execute()
        invitation = InvitationResponse(**result.data[0])

        logger.info(f"Invitation {invitation.id} issued for project {project_id} as {role.name}")
        self.audit.record(
            project_id, invited_by_id, "member.invite", "invitation", invitation.id,
            {"email": invitation.email, "role": role.name}
        )
        return invitation

    def get_by_token(self, token: str) -> Optional[InvitationResponse]:
        result = self.supabase.table("project_invitations")\
            .select("*")\
            .eq("token", token)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return InvitationResponse(**result.data[0])

    def accept(self, token: str, user_id: str, email: Optional[str] = None) -> AcceptInvitationResponse:
        """
        Turn a pending invitation into a membership.

        When email is given it must match the invited address; a mismatch raises
        Denied and leaves the invitation pending.

        The token row is claimed with a delete; only the caller whose delete returns
        the row goes on to write the membership, so two concurrent accepts yield one
        membership and one NotFound. If the membership write fails the row is put
        back before the error propagates.
        """
        invitation = self.get_by_token(token)
        if invitation is None:
            raise NotFound("Invitation not found")

        if not self._is_pending(invitation, self._now()):
            self.supabase.table("project_invitations")\
                .delete()\
                .eq("token", token)\
                .execute()
            logger.info(f"Invitation {invitation.id} expired at {invitation.expires_at}")
            raise Expired()

        if email is not None and email.strip().lower() != invitation.email.lower():
            logger.info(f"Invitation {invitation.id} rejected for user {user_id}: email mismatch")
            raise Denied("Email does not match invitation")

        claimed = self.supabase.table("project_invitations")\
            .delete()\
            .eq("token", token)\
            .execute()
        if not claimed.data:
            # Lost the race to another accept/decline
            raise NotFound("Invitation not found")

        try:
            self.member_service.set_role(invitation.project_id, user_id, invitation.role_id, actor_id=user_id)
        except Exception as e:
            logger.error(f"Membership write failed for invitation {invitation.id}, restoring it: {e}")
            self.supabase.table("project_invitations").insert(claimed.data[0]).execute()
            raise

        logger.info(f"Invitation {invitation.id} accepted by user {user_id}")
        self.audit.record(
            invitation.project_id, user_id, "invitation.accept", "invitation", invitation.id,
            {"email": invitation.email, "role_id": invitation.role_id}
        )
        return AcceptInvitationResponse(project_id=invitation.project_id)

    def decline(self, token: str) -> None:
        """Delete the invitation without creating a membership. Unknown tokens are ignored."""
        result = self.supabase.table("project_invitations")\
            .delete()\
            .eq("token", token)\
            .execute()
        if result.data:
            row = result.data[0]
            logger.info(f"Invitation {row['id']} declined")
            self.audit.record(row["project_id"], None, "invitation.decline", "invitation", row["id"])

    def cancel(self, project_id: str, invitation_id: str, actor_id: Optional[str] = None) -> None:
        """Withdraw an invitation from the project side"""
        result = self.supabase.table("project_invitations")\
            .delete()\
            .eq("project_id", project_id)\
            .eq("id", invitation_id)\
            .execute()
        if not result.data:
            raise NotFound("Invitation not found")
        self.audit.record(project_id, actor_id, "invitation.cancel", "invitation", invitation_id)

    def list_pending_for_email(self, email: str) -> List[InvitationResponse]:
        """Unexpired invitations addressed to email, newest first"""
        result = self.supabase.table("project_invitations")\
            .select("*")\
            .eq("email", email.strip().lower())\
            .order("created_at", desc=True)\
            .execute()
        now = self._now()
        invitations = [InvitationResponse(**row) for row in result.data or []]
        return [i for i in invitations if self._is_pending(i, now)]

    def list_for_project(self, project_id: str) -> List[InvitationResponse]:
        """Unexpired invitations for a project, newest first"""
        result = self.supabase.table("project_invitations")\
            .select("*")\
            .eq("project_id", project_id)\
            .order("created_at", desc=True)\
            .execute()
        now = self._now()
        invitations = [InvitationResponse(**row) for row in result.data or []]
        return [i for i in invitations if self._is_pending(i, now)]
