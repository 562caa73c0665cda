# Supabase tables: classes, enrollments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

classes:
- id: uuid (primary key)
- institution_id: uuid (nullable)
- tutor_id: uuid (foreign key to auth.users.id, not null) - owner
- name: text (not null)
- description: text (nullable)
- created_at: timestamp (default: now())

enrollments:
- id: uuid (primary key)
- class_id: uuid (foreign key to classes.id, not null, on delete cascade)
- student_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (class_id, student_id)
"""
