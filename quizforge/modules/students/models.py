# Supabase tables: profiles, enrollments, invitations
# Students have no table of their own: a student is an auth user with
# user_metadata.role = "student" plus a profiles row.

"""
invitations:
- id: uuid (primary key)
- email: text (not null)
- inviter_id: uuid (foreign key to auth.users.id)
- class_id: uuid (nullable, foreign key to classes.id)
- message: text (nullable)
- created_at: timestamp (default: now())

Accounts created in bulk get the login {matric_number}@{STUDENT_EMAIL_DOMAIN}
unless an email is given, with the matric number as initial password.
"""
