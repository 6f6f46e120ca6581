# Supabase tables: public_shares, access_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

public_shares:
- id: uuid (primary key)
- project_id: uuid (not null, unique) - at most one share per project
- team_id: uuid (nullable) - copied from the project so team deletion can cascade
- token: text (not null, unique) - 32 hex chars, never rotated
- enabled: boolean (not null)
- expires_at: timestamp (nullable)
- created_by: text (not null)
- created_at: timestamp (default: now())

access_logs:
- id: uuid (primary key)
- share_id: uuid (not null, foreign key to public_shares.id, indexed)
- accessed_at: timestamp (not null)
- viewer_label: text (nullable)
- referrer: text (nullable)
- created_at: timestamp (default: now())
"""
