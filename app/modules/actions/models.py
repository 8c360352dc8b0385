# Supabase table: actions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

actions:
- id: uuid (primary key)
- slug: text (not null, unique) - stable identifier, e.g. "members.remove"
- name: text (not null) - display name, e.g. "Remove Member"
- description: text (nullable)
- category: text (not null) - e.g. "members", "billing"
- created_at: timestamp (default: now())
"""
