# Supabase table: subscription_plans
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

subscription_plans:
- id: uuid (primary key)
- name: text (not null, unique) - e.g. "free", "pro", "business"
- display_name: text (not null)
- description: text (nullable)
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

projects.plan_id references subscription_plans.id (nullable, ON DELETE SET NULL).
A null plan_id resolves to the "free" plan.
"""
