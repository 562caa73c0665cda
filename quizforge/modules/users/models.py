# Supabase table: profiles (plus user_metadata on auth.users)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- full_name: text (nullable)
- avatar_url: text (nullable)
- matric_number: text (unique, nullable) - set for student accounts
- institution: text (nullable)
- department: text (nullable)
- updated_at: timestamp (nullable)

Storage bucket: avatars
- object key: {user_id}/{uuid}.{ext}

Notification and appearance settings live in auth.users.user_metadata
under the "notifications" and "appearance" keys.
"""
