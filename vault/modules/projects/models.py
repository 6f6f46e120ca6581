# Supabase tables: projects, project_updates
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- user_id: text (not null) - creator; provenance only once team_id is set
- team_id: uuid (nullable, foreign key to teams.id)
- title: text (not null)
- description: text (nullable)
- status: text (not null) - values: ideation, planning, in_progress, completed
- progress: integer (default: 0) - 0..100
- due_date: text (nullable)
- priority: text (not null) - values: low, medium, high
- color: text (not null)
- is_archived: boolean (default: false)
- notes: text (nullable)
- note_updated_at: timestamp (nullable)
- created_at: timestamp (default: now(), indexed)
- updated_at: timestamp (nullable)

project_updates:
- id: uuid (primary key)
- team_id: uuid (nullable) - team of the project at the time of the update
- project_id: uuid (not null, indexed) - not a foreign key, history survives deletes
- author_id: text (not null)
- type: text (not null) - values: created, updated, deleted, note
- summary: text (not null)
- changes: jsonb (nullable) - {field: {from, to}} for updates
- created_at: timestamp (default: now(), indexed)
"""
