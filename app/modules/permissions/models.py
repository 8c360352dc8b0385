# Supabase tables: plan_action_permissions, role_action_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

plan_action_permissions:
- id: uuid (primary key)
- plan_id: uuid (foreign key to subscription_plans.id, not null, ON DELETE CASCADE)
- action_id: uuid (foreign key to actions.id, not null)
- enabled: boolean (not null, default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (plan_id, action_id)

role_action_permissions:
- id: uuid (primary key)
- plan_id: uuid (foreign key to subscription_plans.id, not null, ON DELETE CASCADE)
- role_id: uuid (foreign key to app_roles.id, not null)
- action_id: uuid (foreign key to actions.id, not null)
- allowed: boolean (not null, default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (plan_id, role_id, action_id)

A missing row means disabled / denied.
"""
