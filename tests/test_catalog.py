"""
Tests for the seeded catalog: actions, roles and plans, and re-running the seed.
"""

import pytest

from app.config.permissions_config import PERMISSION_MATRIX, all_action_slugs
from app.core.exceptions import NotFound
from app.scripts.seed_permissions_roles import seed_all


class TestActions:
    def test_lookup_by_slug(self, action_service, catalog):
        action = action_service.get_action_by_slug("members.remove")

        assert action.category == "members"
        assert action_service.find_action_by_slug("rockets.launch") is None
        with pytest.raises(NotFound):
            action_service.get_action_by_slug("rockets.launch")

    def test_list_by_category(self, action_service, catalog):
        slugs = [a.slug for a in action_service.list_actions_by_category("invitations")]

        assert sorted(slugs) == ["invitations.cancel", "invitations.view"]

    def test_list_all(self, action_service, catalog):
        assert {a.slug for a in action_service.list_actions()} == set(all_action_slugs())


class TestRoles:
    def test_priorities(self, role_service, catalog):
        assert [(r.name, r.priority) for r in role_service.list_roles()] == [("OWNER", 3), ("ADMIN", 2), ("MEMBER", 1)]

    def test_outranks(self, role_service, catalog):
        owner = role_service.get_role_by_name("OWNER")
        member = role_service.get_role_by_name("MEMBER")

        assert owner.outranks(member)
        assert not member.outranks(owner)
        assert not owner.outranks(owner)

    def test_unknown_role(self, role_service, catalog):
        assert role_service.find_role_by_id("missing") is None
        with pytest.raises(NotFound):
            role_service.get_role_by_name("GUEST")


class TestPlans:
    def test_default_plan(self, plan_service, catalog):
        assert plan_service.get_default_plan().id == catalog.plans["free"]

    def test_inactive_plans_hidden(self, plan_service, catalog, supabase):
        supabase.table("subscription_plans").update({"is_active": False}).eq("name", "business").execute()

        assert {p.name for p in plan_service.list_active_plans()} == {"free", "pro"}
        assert len(plan_service.list_plans()) == 3

    def test_resolve_unknown_project(self, plan_service, catalog):
        assert plan_service.resolve_project_plan("missing") is None

    def test_assign_unknown_project(self, plan_service, catalog):
        with pytest.raises(NotFound):
            plan_service.assign_plan_to_project("missing", catalog.plans["pro"])


class TestSeed:
    def test_free_plan_seeds_role_rows_only_for_enabled_actions(self, supabase, catalog):
        advanced = catalog.actions["dashboard.view_advanced"]
        rows = [
            r for r in supabase.rows("role_action_permissions")
            if r["plan_id"] == catalog.plans["free"] and r["action_id"] == advanced
        ]

        assert rows == []

    def test_reseed_is_idempotent(self, supabase, catalog):
        before = {t: len(supabase.rows(t)) for t in (
            "actions", "app_roles", "subscription_plans", "plan_action_permissions", "role_action_permissions"
        )}

        counts = seed_all(supabase)

        after = {t: len(supabase.rows(t)) for t in before}
        assert after == before
        assert counts["actions"] == len(PERMISSION_MATRIX["actions"])

    def test_reseed_revokes_extra_grants(self, supabase, catalog, matrix):
        free, member, invite = catalog.plans["free"], catalog.roles["MEMBER"], catalog.actions["members.invite"]
        matrix.upsert_role_permission(free, member, invite, True)

        seed_all(supabase)

        assert matrix.can_role_perform_action(free, member, invite) is False
