# Supabase table: project_invitations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

project_invitations:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null, ON DELETE CASCADE)
- email: text (not null) - stored lowercased
- role_id: uuid (foreign key to app_roles.id, not null) - role granted on acceptance
- invited_by_id: uuid (not null)
- token: text (not null, unique) - single-use, unguessable
- created_at: timestamp (default: now())
- expires_at: timestamp (not null) - created_at + 7 days

Rows are deleted on accept or decline. Expired rows stay until declined or
hit by an accept attempt, and are filtered out of every pending listing.
"""
