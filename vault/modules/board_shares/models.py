# Supabase table: board_shares
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

board_shares:
- id: uuid (primary key)
- team_id: uuid (nullable, indexed) - null for a user's personal board
- user_id: text (not null, indexed) - creator; owner of a personal board
- token: text (not null, unique)
- enabled: boolean (not null)
- expires_at: timestamp (nullable)
- created_at: timestamp (default: now())
"""
