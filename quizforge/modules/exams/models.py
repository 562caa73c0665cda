# Supabase table: exams
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- class_id: uuid (foreign key to classes.id, not null, on delete cascade)
- creator_id: uuid (foreign key to auth.users.id, not null) - owner
- duration_minutes: integer (not null, 1..300, default 60)
- start_time: timestamptz (not null)
- end_time: timestamptz (not null, > start_time)
- is_published: boolean (default false)
- shuffle_questions: boolean (default false)
- max_attempts: integer (default 1)
- access_code: text (nullable) - set on publish
- published_at: timestamptz (nullable)
- created_at: timestamp (default: now())
"""
