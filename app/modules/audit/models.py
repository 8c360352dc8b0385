# Supabase table: audit_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

audit_logs:
- id: uuid (primary key)
- project_id: uuid (not null)
- user_id: uuid (nullable) - who performed the action
- action: text (not null) - e.g. "member.invite", "member.remove", "invitation.accept"
- entity_type: text (not null) - e.g. "member", "invitation", "project"
- entity_id: text (nullable)
- metadata: jsonb (default: '{}')
- created_at: timestamp (default: now())
"""
