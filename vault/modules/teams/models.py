# Supabase tables: teams, team_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

teams:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- created_by: text (not null, indexed) - user id of the creator
- is_personal: boolean (not null, default: false) - one personal team per user
- invite_code: text (nullable, unique) - generated on first request, never rotated
- cover_storage_id: text (nullable) - blob store object id
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

team_members:
- id: uuid (primary key)
- team_id: uuid (foreign key to teams.id, not null)
- user_id: text (not null)
- role: text (not null) - values: admin, member, viewer
- joined_at: timestamp (not null)
- created_at: timestamp (default: now())
- unique constraint on (team_id, user_id)
"""
