# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - Login, refresh and session management
# - JWT token generation and validation
# - Password reset emails and OAuth redirects

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (role stored in user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.refresh_session() - Exchange a refresh token for a new session
- auth.reset_password_for_email() - Send a password reset link
- auth.sign_in_with_oauth() - Build a provider authorization URL
- auth.admin.* - Service-role operations (update password, list/create/delete users)

user_metadata keys used by QuizForge:
- full_name: text
- role: teacher | admin | student (missing means teacher)
- institution, department: text
- avatar: public URL in the avatars bucket
- notifications: {email_notifications, exam_submissions, new_students, system_updates}
- appearance: {theme, font_size, high_contrast}
"""
