# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key)
- user_id: text (unique, not null) - identity provider user id
- username: text (nullable)
- full_name: text (nullable)
- avatar_url: text (nullable)
- email: text (nullable, indexed)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Email is private: anonymous share views only ever expose user_id, name and
avatar_url (see PublicProfile).
"""
