"""
Seed Permissions Catalog Script
This script populates the actions, roles, plans and the two permission tables
using the config. Can be run manually or as part of a deployment job.

Usage: python -m app.scripts.seed_permissions_roles
"""

import sys

from app.config.permissions_config import PERMISSION_MATRIX
from app.database.supabase_client import SupabaseClient
from supabase import Client
from typing import Dict, List
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _upsert_by_key(supabase: Client, table: str, key: str, records: List[Dict]) -> Dict[str, str]:
    """Insert or update each record matched on `key`. Returns key value -> row id."""
    ids = {}
    created_count = 0
    updated_count = 0

    for record in records:
        existing = supabase.table(table)\
            .select("id")\
            .eq(key, record[key])\
            .execute()

        if existing.data:
            supabase.table(table)\
                .update(record)\
                .eq(key, record[key])\
                .execute()
            ids[record[key]] = existing.data[0]["id"]
            updated_count += 1
            logger.debug(f"Updated {table}: {record[key]}")
        else:
            result = supabase.table(table).insert(record).execute()
            ids[record[key]] = result.data[0]["id"]
            created_count += 1
            logger.debug(f"Created {table}: {record[key]}")

    logger.info(f"{table} seeded: {created_count} created, {updated_count} updated")
    return ids


def seed_actions(supabase: Client) -> Dict[str, str]:
    """Seed the action catalog from config"""
    logger.info("Seeding actions...")
    return _upsert_by_key(supabase, "actions", "slug", PERMISSION_MATRIX["actions"])


def seed_roles(supabase: Client) -> Dict[str, str]:
    """Seed roles from config"""
    logger.info("Seeding roles...")
    return _upsert_by_key(supabase, "app_roles", "name", PERMISSION_MATRIX["roles"])


def seed_plans(supabase: Client) -> Dict[str, str]:
    logger.info("Seeding plans...")
    return _upsert_by_key(supabase, "subscription_plans", "name", PERMISSION_MATRIX["plans"])


def seed_plan_actions(supabase: Client, plan_ids: Dict[str, str], action_ids: Dict[str, str]) -> int:
    """Write the plan -> action enabled flags"""
    rows = []
    for plan_name, flags in PERMISSION_MATRIX["plan_actions"].items():
        for slug, enabled in flags.items():
            rows.append({
                "plan_id": plan_ids[plan_name],
                "action_id": action_ids[slug],
                "enabled": enabled
            })
    if rows:
        supabase.table("plan_action_permissions")\
            .upsert(rows, on_conflict="plan_id,action_id")\
            .execute()
    logger.info(f"Plan action permissions seeded: {len(rows)} rows")
    return len(rows)


def seed_role_actions(
    supabase: Client,
    plan_ids: Dict[str, str],
    role_ids: Dict[str, str],
    action_ids: Dict[str, str]
) -> int:
    """
    Sync the (plan, role) -> action rows with config.
    Rows for actions no longer granted to a role are removed, so a re-seed
    revokes as well as grants.
    """
    total = 0
    for plan_name, role_actions in PERMISSION_MATRIX["role_actions"].items():
        plan_id = plan_ids[plan_name]
        for role_name, slugs in role_actions.items():
            role_id = role_ids[role_name]
            wanted = {action_ids[slug] for slug in slugs}

            existing_result = supabase.table("role_action_permissions")\
                .select("action_id")\
                .eq("plan_id", plan_id)\
                .eq("role_id", role_id)\
                .execute()
            existing = {r["action_id"] for r in existing_result.data} if existing_result.data else set()

            if wanted:
                supabase.table("role_action_permissions").upsert([
                    {"plan_id": plan_id, "role_id": role_id, "action_id": action_id, "allowed": True}
                    for action_id in wanted
                ], on_conflict="plan_id,role_id,action_id").execute()

            to_remove = existing - wanted
            if to_remove:
                supabase.table("role_action_permissions")\
                    .delete()\
                    .eq("plan_id", plan_id)\
                    .eq("role_id", role_id)\
                    .in_("action_id", list(to_remove))\
                    .execute()
                logger.debug(f"Removed {len(to_remove)} actions from {role_name} on plan {plan_name}")
            total += len(wanted)

    logger.info(f"Role action permissions seeded: {total} rows")
    return total


def seed_all(supabase: Client) -> Dict[str, int]:
    """Seed the whole catalog. Safe to run repeatedly."""
    action_ids = seed_actions(supabase)
    role_ids = seed_roles(supabase)
    plan_ids = seed_plans(supabase)
    plan_rows = seed_plan_actions(supabase, plan_ids, action_ids)
    role_rows = seed_role_actions(supabase, plan_ids, role_ids, action_ids)
    return {
        "actions": len(action_ids),
        "roles": len(role_ids),
        "plans": len(plan_ids),
        "plan_actions": plan_rows,
        "role_actions": role_rows
    }


def main():
    """Main function to seed the permissions catalog"""
    try:
        supabase = SupabaseClient.get_service_client()

        logger.info("Starting permissions catalog seeding...")
        counts = seed_all(supabase)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {counts}")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
