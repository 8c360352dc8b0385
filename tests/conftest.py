"""
Pytest configuration and fixtures.

Provides shared fixtures for all tests including:
- In-memory Supabase client seeded with the permissions catalog
- A fresh PermissionCache per test
- Service instances wired to the fake client
- Test client with dependency overrides
"""

import pytest
from types import SimpleNamespace

from app.scripts.seed_permissions_roles import seed_all
from app.modules.permissions.cache import PermissionCache
from app.modules.permissions.service import PermissionService, PermissionMatrixService
from app.modules.members.service import MemberService
from app.modules.invitations.service import InvitationService
from app.modules.projects.service import ProjectService
from app.modules.projects.schemas import ProjectCreate
from app.modules.roles.service import RoleService
from app.modules.plans.service import PlanService
from app.modules.actions.service import ActionService
from app.modules.audit.service import AuditLogService
from tests.fakes import FakeSupabase


@pytest.fixture
def supabase():
    """Empty in-memory database."""
    return FakeSupabase()


@pytest.fixture
def catalog(supabase):
    """Seed actions, roles, plans and both permission relations; expose ids by name."""
    seed_all(supabase)
    return SimpleNamespace(
        roles={r["name"]: r["id"] for r in supabase.rows("app_roles")},
        plans={p["name"]: p["id"] for p in supabase.rows("subscription_plans")},
        actions={a["slug"]: a["id"] for a in supabase.rows("actions")},
    )


@pytest.fixture
def cache():
    return PermissionCache()


@pytest.fixture
def role_service(supabase):
    return RoleService(supabase)


@pytest.fixture
def plan_service(supabase):
    return PlanService(supabase)


@pytest.fixture
def action_service(supabase):
    return ActionService(supabase)


@pytest.fixture
def audit(supabase):
    return AuditLogService(supabase)


@pytest.fixture
def member_service(supabase, role_service, audit):
    return MemberService(supabase, role_service=role_service, audit=audit)


@pytest.fixture
def matrix(supabase, cache, plan_service, role_service, action_service):
    return PermissionMatrixService(
        supabase, cache, plan_service=plan_service, role_service=role_service, action_service=action_service
    )


@pytest.fixture
def permission_service(supabase, cache, matrix, plan_service, member_service, action_service):
    return PermissionService(
        supabase, cache,
        matrix=matrix,
        plan_service=plan_service,
        member_service=member_service,
        action_service=action_service,
        max_workers=4
    )


@pytest.fixture
def project_service(supabase, member_service, role_service, plan_service, audit):
    return ProjectService(
        supabase, member_service=member_service, role_service=role_service, plan_service=plan_service, audit=audit
    )


@pytest.fixture
def invitation_service(supabase, member_service, role_service, audit):
    return InvitationService(supabase, member_service=member_service, role_service=role_service, audit=audit)


@pytest.fixture
def make_project(catalog, project_service):
    """Factory: create a project owned by owner_id, optionally on a named plan."""
    def _make(owner_id="owner-1", name="Acme", plan=None):
        plan_id = catalog.plans[plan] if plan else None
        return project_service.create_project(ProjectCreate(name=name, plan_id=plan_id), owner_id)
    return _make


@pytest.fixture
def project(make_project):
    """A project on no explicit plan (resolves to free), owned by owner-1."""
    return make_project()


@pytest.fixture
def add_member(member_service, catalog):
    def _add(project_id, user_id, role_name):
        return member_service.set_role(project_id, user_id, catalog.roles[role_name])
    return _add


@pytest.fixture
def invitations_at(supabase, member_service, role_service, audit):
    """Factory: an InvitationService whose clock is frozen at `moment`, optionally with a fixed token."""
    def _at(moment, token=None):
        return InvitationService(
            supabase,
            member_service=member_service,
            role_service=role_service,
            audit=audit,
            token_generator=(lambda: token) if token else None,
            clock=lambda: moment
        )
    return _at
