# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- name: text (not null)
- owner_id: uuid (foreign key to auth.users.id, not null)
- plan_id: uuid (foreign key to subscription_plans.id, nullable, ON DELETE SET NULL)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Deleting a project removes its project_members and project_invitations rows.
"""
