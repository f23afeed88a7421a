# Supabase Auth + users profile table
# Sign-in is handled by Supabase Auth (auth.users). Application roles live in
# the public users table, matched to the auth user by email.

"""
Expected Supabase table structure:

users:
- id: uuid (primary key)
- email: text (unique, not null)
- full_name: text (not null)
- role: user_role enum (GLOBAL_ADMIN, WOLTHERS_STAFF, COMPANY_ADMIN,
  CLIENT_ADMIN, FINANCE_DEPARTMENT, CLIENT, DRIVER)
- company_id: uuid (nullable, references companies.id)
- auth_method: text (microsoft | email_otp | trip_code)
- reports_to: uuid (nullable, references users.id)
- preferences: jsonb (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp

Supabase Auth provides:
- auth.sign_in_with_password() - Email/password sign-in
- auth.sign_in_with_otp() - Email one-time code / magic link
- auth.verify_otp() - Exchange the emailed code for a session
- auth.get_user() - Resolve a JWT to its user
- auth.sign_out() - Logout
"""
