# Supabase table: app_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

app_roles:
- id: uuid (primary key)
- name: text (not null, unique) - "OWNER", "ADMIN", "MEMBER"
- priority: integer (not null, unique) - strictly increasing with privilege (OWNER=3, ADMIN=2, MEMBER=1)
- description: text (nullable)
- created_at: timestamp (default: now())
"""
