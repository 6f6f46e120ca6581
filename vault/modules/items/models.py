# Supabase table: items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

items:
- id: uuid (primary key)
- user_id: text (not null) - creator; provenance only once team_id is set
- team_id: uuid (nullable, foreign key to teams.id) - null means a legacy personal item
- type: text (not null) - values: code, prompt, file
- title: text (not null)
- description: text (nullable)
- content: text (nullable)
- language: text (nullable)
- category: text (nullable)
- file_url: text (nullable)
- storage_id: text (nullable) - object key in the storage bucket
- file_type: text (nullable)
- file_size: bigint (nullable)
- metadata: jsonb (nullable)
- is_favorite: boolean (default: false)
- created_at: timestamp (default: now(), indexed)
- updated_at: timestamp (nullable)
"""
