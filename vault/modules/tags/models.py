# Supabase tables: tags, item_tags
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

tags:
- id: uuid (primary key)
- user_id: text (not null) - creator
- team_id: uuid (nullable, foreign key to teams.id) - null means a personal tag
- name: text (not null)
- color: text (not null)
- created_at: timestamp (default: now())

item_tags:
- id: uuid (primary key)
- item_id: uuid (foreign key to items.id, not null, indexed)
- tag_id: uuid (foreign key to tags.id, not null, indexed)
- created_at: timestamp (default: now())
- unique constraint on (item_id, tag_id)
"""
