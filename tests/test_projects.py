"""
Tests for project lifecycle: creation, deletion cascade and ownership transfer.
"""

import pytest

from app.core.exceptions import Conflict, NotFound
from app.modules.projects.schemas import ProjectCreate


class TestCreateProject:
    def test_creator_becomes_owner(self, project, member_service):
        assert project.owner_id == "owner-1"
        assert member_service.get_role(project.id, "owner-1").name == "OWNER"
        assert member_service.count_owners(project.id) == 1

    def test_explicit_plan(self, make_project, plan_service, catalog):
        project = make_project(plan="business")

        assert plan_service.resolve_project_plan(project.id).id == catalog.plans["business"]

    def test_unknown_plan(self, project_service, catalog):
        with pytest.raises(NotFound):
            project_service.create_project(ProjectCreate(name="Acme", plan_id="no-such-plan"), "owner-1")

    def test_get_unknown_project(self, project_service):
        with pytest.raises(NotFound):
            project_service.get_project("missing")


class TestDeleteProject:
    def test_cascade(self, project_service, invitation_service, project, add_member, catalog, supabase):
        add_member(project.id, "member-1", "MEMBER")
        invitation_service.create(project.id, "a@example.com", catalog.roles["MEMBER"], "owner-1")

        project_service.delete_project(project.id)

        assert [r for r in supabase.rows("project_members") if r["project_id"] == project.id] == []
        assert [r for r in supabase.rows("project_invitations") if r["project_id"] == project.id] == []
        with pytest.raises(NotFound):
            project_service.get_project(project.id)

    def test_delete_leaves_other_projects(self, project_service, make_project, member_service):
        doomed = make_project(owner_id="owner-1", name="Doomed")
        kept = make_project(owner_id="owner-1", name="Kept")

        project_service.delete_project(doomed.id)

        assert member_service.get_role(kept.id, "owner-1").name == "OWNER"


class TestTransferOwnership:
    def test_transfer(self, project_service, member_service, project, add_member):
        add_member(project.id, "admin-1", "ADMIN")

        updated = project_service.transfer_ownership(project.id, "owner-1", "admin-1")

        assert updated.owner_id == "admin-1"
        assert member_service.get_role(project.id, "admin-1").name == "OWNER"
        assert member_service.get_role(project.id, "owner-1").name == "ADMIN"
        assert member_service.count_owners(project.id) == 1

    def test_old_owner_can_leave_after_transfer(self, project_service, member_service, project, add_member):
        add_member(project.id, "admin-1", "ADMIN")
        project_service.transfer_ownership(project.id, "owner-1", "admin-1")

        member_service.remove(project.id, "owner-1")

        assert member_service.get_member(project.id, "owner-1") is None

    def test_target_must_be_member(self, project_service, project):
        with pytest.raises(NotFound):
            project_service.transfer_ownership(project.id, "owner-1", "stranger")

    def test_same_user(self, project_service, project):
        with pytest.raises(Conflict):
            project_service.transfer_ownership(project.id, "owner-1", "owner-1")

    def test_only_owner_can_transfer(self, project_service, project, add_member):
        add_member(project.id, "admin-1", "ADMIN")
        add_member(project.id, "member-1", "MEMBER")

        with pytest.raises(Conflict):
            project_service.transfer_ownership(project.id, "admin-1", "member-1")

    def test_transfer_is_audited(self, project_service, project, add_member, supabase):
        add_member(project.id, "admin-1", "ADMIN")

        project_service.transfer_ownership(project.id, "owner-1", "admin-1")

        entry = supabase.rows("audit_logs")[-1]
        assert entry["action"] == "project.transfer_ownership"
        assert entry["metadata"] == {"new_owner_id": "admin-1"}
