"""
Tests for the invitation lifecycle.

Verifies:
- Issuing (token, expiry, normalisation)
- Single-use acceptance, including under concurrency
- Expiry
- Decline, cancel and pending listings
- Restoring the invitation when the membership write fails
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import Denied, Expired, NotFound


class TestCreate:
    """Test issuing invitations."""

    def test_create(self, invitation_service, project, catalog):
        invitation = invitation_service.create(project.id, " New.User@Example.com ", catalog.roles["MEMBER"], "owner-1")

        assert invitation.email == "new.user@example.com"
        assert len(invitation.token) >= 22
        assert invitation.expires_at - invitation.created_at == timedelta(days=7)

    def test_tokens_are_unique(self, invitation_service, project, catalog):
        tokens = {
            invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1").token
            for _ in range(20)
        }

        assert len(tokens) == 20

    def test_reinvite_creates_another_token(self, invitation_service, project, catalog):
        first = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        second = invitation_service.create(project.id, "a@example.com", catalog.roles["ADMIN"], "owner-1")

        assert first.token != second.token
        assert len(invitation_service.list_pending_for_email("a@example.com")) == 2

    def test_unknown_project(self, invitation_service, catalog):
        with pytest.raises(NotFound):
            invitation_service.create("no-such-project", "a@example.com", catalog.roles["MEMBER"], "owner-1")

    def test_unknown_role(self, invitation_service, project):
        with pytest.raises(NotFound):
            invitation_service.create(project.id, "a@example.com", "no-such-role", "owner-1")

    def test_create_is_audited(self, invitation_service, project, catalog, supabase):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        entry = supabase.rows("audit_logs")[-1]
        assert entry["action"] == "member.invite"
        assert entry["entity_id"] == invitation.id


class TestAccept:
    """Test single-use acceptance."""

    def test_accept_creates_membership_and_consumes_token(
        self, invitations_at, member_service, project, catalog
    ):
        service = invitations_at(datetime.now(timezone.utc), token="tok-123")
        service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        result = service.accept("tok-123", "user-a")

        assert result.project_id == project.id
        assert member_service.get_role(project.id, "user-a").name == "MEMBER"
        with pytest.raises(NotFound):
            service.accept("tok-123", "user-b")
        assert member_service.get_member(project.id, "user-b") is None

    def test_unknown_token(self, invitation_service):
        with pytest.raises(NotFound):
            invitation_service.accept("never-issued", "user-a")

    def test_existing_member_gets_invited_role(self, invitation_service, member_service, project, add_member, catalog):
        add_member(project.id, "user-a", "MEMBER")
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["ADMIN"], "owner-1")

        invitation_service.accept(invitation.token, "user-a")

        assert member_service.get_role(project.id, "user-a").name == "ADMIN"
        assert len(member_service.list_members(project.id)) == 2

    def test_concurrent_accepts_yield_one_membership(
        self, invitation_service, member_service, project, catalog, supabase
    ):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        barrier = threading.Barrier(2)
        outcomes = {}

        def accept(user_id):
            barrier.wait()
            try:
                invitation_service.accept(invitation.token, user_id)
                outcomes[user_id] = "accepted"
            except NotFound:
                outcomes[user_id] = "not_found"

        threads = [threading.Thread(target=accept, args=(u,)) for u in ("user-a", "user-b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes.values()) == ["accepted", "not_found"]
        joined = [m.user_id for m in member_service.list_members(project.id) if m.user_id != "owner-1"]
        assert len(joined) == 1
        assert supabase.rows("project_invitations") == []

    def test_failed_membership_write_restores_invitation(self, invitation_service, project, catalog, supabase):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        supabase.fail_table("project_members")

        with pytest.raises(Exception):
            invitation_service.accept(invitation.token, "user-a")

        restored = invitation_service.get_by_token(invitation.token)
        assert restored is not None
        assert restored.id == invitation.id

    def test_accept_is_audited(self, invitation_service, project, catalog, supabase):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        invitation_service.accept(invitation.token, "user-a")

        assert "invitation.accept" in [e["action"] for e in supabase.rows("audit_logs")]

    def test_matching_email_is_accepted(self, invitation_service, member_service, project, catalog):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        invitation_service.accept(invitation.token, "user-a", email="A@Example.com")

        assert member_service.get_role(project.id, "user-a").name == "MEMBER"

    def test_other_email_is_denied_and_invitation_kept(self, invitation_service, member_service, project, catalog):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        with pytest.raises(Denied):
            invitation_service.accept(invitation.token, "user-b", email="b@example.com")

        assert member_service.get_member(project.id, "user-b") is None
        assert invitation_service.get_by_token(invitation.token) is not None


class TestExpiry:
    """Expired tokens are inert."""

    def test_expired_token(self, invitations_at, member_service, project, catalog):
        past = datetime.now(timezone.utc) - timedelta(days=7, seconds=1)
        issuer = invitations_at(past)
        invitation = issuer.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        now = invitations_at(datetime.now(timezone.utc))

        with pytest.raises(Expired):
            now.accept(invitation.token, "user-a")

        assert member_service.get_member(project.id, "user-a") is None
        assert now.get_by_token(invitation.token) is None

    def test_exact_deadline_is_expired(self, invitations_at, project, catalog):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        issuer = invitations_at(start)
        invitation = issuer.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        at_deadline = invitations_at(start + timedelta(days=7))

        with pytest.raises(Expired):
            at_deadline.accept(invitation.token, "user-a")

    def test_pending_listing_hides_expired(self, invitations_at, project, catalog, supabase):
        old = invitations_at(datetime.now(timezone.utc) - timedelta(days=8))
        old.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        current = invitations_at(datetime.now(timezone.utc))
        fresh = current.create(project.id, "a@example.com", catalog.roles["ADMIN"], "owner-1")

        pending = current.list_pending_for_email("A@Example.com")

        assert [i.id for i in pending] == [fresh.id]
        # Read-time filter only; the expired row is still stored
        assert len(supabase.rows("project_invitations")) == 2


class TestDeclineAndCancel:
    """Test removing invitations without a membership."""

    def test_decline(self, invitation_service, member_service, project, catalog):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        invitation_service.decline(invitation.token)

        assert invitation_service.get_by_token(invitation.token) is None
        with pytest.raises(NotFound):
            invitation_service.accept(invitation.token, "user-a")
        assert member_service.get_member(project.id, "user-a") is None

    def test_decline_is_idempotent(self, invitation_service):
        invitation_service.decline("never-issued")
        invitation_service.decline("never-issued")

    def test_cancel(self, invitation_service, project, catalog):
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        invitation_service.cancel(project.id, invitation.id, actor_id="owner-1")

        assert invitation_service.list_for_project(project.id) == []

    def test_cancel_scoped_to_project(self, invitation_service, make_project, project, catalog):
        other = make_project(owner_id="owner-2", name="Other")
        invitation = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        with pytest.raises(NotFound):
            invitation_service.cancel(other.id, invitation.id)

    def test_list_for_project_newest_first(self, invitation_service, project, catalog):
        first = invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")
        second = invitation_service.create(project.id, "b@example.com", catalog.roles["MEMBER"], "owner-1")

        assert [i.id for i in invitation_service.list_for_project(project.id)] == [second.id, first.id]
