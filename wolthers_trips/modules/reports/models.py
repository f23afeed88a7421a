# Supabase views and tables read by the finance reports
# Aggregation by card / trip happens in Postgres; reports.aggregation only
# regroups the rows returned here.

"""
finance_reimbursement_summary (view):
- card_due_date: int (day of month the card statement is due)
- expense_currency: text
- employee_name, employee_email: text
- last_four_digits: text
- trip_title: text
- total_amount, total_usd_amount: numeric
- expense_count: int

trip_cost_summary (view):
- trip_id, title, status, start_date, end_date
- total_cost_usd, client_billable_total: numeric
- expense_count: int

finance_client_billing_summary (view):
- trip_id, trip_title, client company, start_date, billable totals

meetings:
- id, title, description, meeting_date, start_time, end_time, status
- confirmation_status: pending | confirmed | cancelled | needs_reschedule
- confirmation_method, notes, follow_up_required, follow_up_date
- trip_id -> trips, company_location_id -> company_locations,
  company_contact_id -> company_contacts

expenses:
- id, amount, currency, usd_amount, category, description, transaction_date
- approval_status, billing_status, reimbursement_status (pending | paid ...)
- client_billable: bool
- user_id -> users, trip_id -> trips
"""
