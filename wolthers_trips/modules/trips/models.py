# Supabase tables: trips, trip_participants
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

trips:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- start_date: date (not null)
- end_date: date (not null, >= start_date)
- type: text (e.g. coffee_buying, convention, client_visit)
- status: text (draft, proposal, confirmed, scheduled, in_progress,
  completed, cancelled, to_be_confirmed)
- regions: text[] (nullable)
- main_clients: text[] (nullable) - client company names
- estimated_cost: numeric (nullable)
- created_by: uuid (nullable, references users.id)
- created_at: timestamp (default: now())
- updated_at: timestamp

trip_participants:
- id: uuid (primary key)
- trip_id: uuid (references trips.id)
- user_id: uuid (references users.id)
- company_id: uuid (nullable, references companies.id)
- role: text (e.g. staff, client, driver)
"""
