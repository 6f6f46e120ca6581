# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

notifications:
- id: uuid (primary key)
- user_id: text (not null, indexed) - recipient
- team_id: uuid (foreign key to teams.id, nullable)
- type: text (not null) - values: invite, team, project, share
- title: text (not null)
- message: text (not null)
- read: boolean (not null, default: false)
- metadata: jsonb (nullable)
- created_at: timestamp (default: now())

Rows are only written here; delivery (push, email, UI) is done by readers.
"""
