# Supabase table: project_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

project_members:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null, ON DELETE CASCADE)
- user_id: uuid (foreign key to auth.users.id, not null)
- role_id: uuid (foreign key to app_roles.id, not null)
- created_at: timestamp (default: now()) - join time, kept on role changes
- updated_at: timestamp (nullable)
- unique constraint on (project_id, user_id)

Every project keeps at least one member holding the OWNER role.
"""
