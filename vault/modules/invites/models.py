# Supabase table: team_invites (team-level invite codes live on teams.invite_code)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

team_invites:
- id: uuid (primary key)
- team_id: uuid (foreign key to teams.id, not null)
- email: text (not null, indexed) - lower-cased target address
- code: text (not null, indexed) - short human-shareable code, collisions tolerated
- token: text (not null, unique) - single-use bearer credential
- role: text (not null) - values: admin, member, viewer
- status: text (not null, default: 'pending') - values: pending, accepted, revoked
- invited_by: text (not null)
- expires_at: timestamp (nullable) - no value means the invite never expires
- accepted_by: text (nullable)
- accepted_at: timestamp (nullable)
- created_at: timestamp (default: now())
"""
