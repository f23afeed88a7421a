from supabase import Client
from wolthers_trips.config.roles_config import (
    EXPENSE_GROUP_KEYS, MEETING_CONFIRMATION_STATUSES, TRIP_STATUSES
)
from wolthers_trips.modules.reports import aggregation
from typing import Any, Dict, List, Optional
from datetime import date
import logging

logger = logging.getLogger(__name__)

MEETING_COLUMNS = """
    id,
    title,
    description,
    meeting_date,
    start_time,
    end_time,
    status,
    confirmation_status,
    confirmation_method,
    notes,
    follow_up_required,
    follow_up_date,
    trip_id,
    trips!inner(title, start_date, end_date),
    company_locations!inner(name, city, country),
    company_contacts!inner(full_name, email, phone)
"""

EXPENSE_COLUMNS = """
    id,
    amount,
    currency,
    usd_amount,
    category,
    description,
    transaction_date,
    approval_status,
    billing_status,
    client_billable,
    reimbursement_status,
    user_id,
    trip_id,
    users!inner(full_name, email),
    trips!inner(title, start_date, end_date)
"""


def _check_choice(name: str, value: Optional[str], choices: List[str]):
    if value is not None and value not in choices:
        raise ValueError(f"Invalid {name} '{value}'. Expected one of: {', '.join(choices)}")


class ReportService:
    """Finance and itinerary reports over the Supabase views.

    Shared by the REST routes and the MCP server; errors from Supabase
    propagate to the caller, invalid filters raise ValueError.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def pending_reimbursements(
        self,
        due_date_start: Optional[date] = None,
        due_date_end: Optional[date] = None,
        currency: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Pending reimbursements grouped by card due date and currency.

        card_due_date is a day of the month, so a date range filters on the
        day-of-month of both bounds and only applies when both are given.
        """
        query = self.supabase.table("finance_reimbursement_summary").select("*")
        if due_date_start and due_date_end:
            query = query.gte("card_due_date", due_date_start.day)\
                .lte("card_due_date", due_date_end.day)
        if currency:
            query = query.eq("expense_currency", currency)
        result = query.order("card_due_date").execute()
        rows = result.data or []
        logger.debug("Reimbursement summary returned %d rows", len(rows))
        return aggregation.group_reimbursements(rows)

    def trip_cost_summaries(
        self,
        trip_status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_billable_only: bool = False,
    ) -> Dict[str, Any]:
        """Trip cost rows for client billing, plus the billing summary when billable only."""
        _check_choice("trip_status", trip_status, TRIP_STATUSES)
        query = self.supabase.table("trip_cost_summary").select("*")
        if trip_status:
            query = query.eq("status", trip_status)
        if start_date:
            query = query.gte("start_date", start_date.isoformat())
        if end_date:
            query = query.lte("end_date", end_date.isoformat())
        if client_billable_only:
            query = query.gt("client_billable_total", 0)
        trip_costs = query.order("start_date", desc=True).execute().data or []

        client_billing = None
        if client_billable_only:
            client_billing = self.supabase.table("finance_client_billing_summary")\
                .select("*")\
                .order("start_date", desc=True)\
                .execute().data or []
        return {"trip_costs": trip_costs, "client_billing": client_billing}

    def meeting_confirmation_status(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        confirmation_status: Optional[str] = None,
        trip_id: Optional[str] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """Meetings grouped by confirmation status"""
        _check_choice("confirmation_status", confirmation_status, MEETING_CONFIRMATION_STATUSES)
        query = self.supabase.table("meetings").select(MEETING_COLUMNS)
        if date_from:
            query = query.gte("meeting_date", date_from.isoformat())
        if date_to:
            query = query.lte("meeting_date", date_to.isoformat())
        if confirmation_status:
            query = query.eq("confirmation_status", confirmation_status)
        if trip_id:
            query = query.eq("trip_id", trip_id)
        rows = query.order("meeting_date").execute().data or []
        return aggregation.group_meetings_by_confirmation(rows)

    def expense_analysis(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        trip_id: Optional[str] = None,
        user_id: Optional[str] = None,
        group_by: str = "category",
    ) -> Dict[str, Dict[str, Any]]:
        """Expenses grouped by category, currency, user or trip"""
        _check_choice("group_by", group_by, EXPENSE_GROUP_KEYS)
        query = self.supabase.table("expenses").select(EXPENSE_COLUMNS)
        if start_date:
            query = query.gte("transaction_date", start_date.isoformat())
        if end_date:
            query = query.lte("transaction_date", end_date.isoformat())
        if trip_id:
            query = query.eq("trip_id", trip_id)
        if user_id:
            query = query.eq("user_id", user_id)
        rows = query.order("transaction_date", desc=True).execute().data or []
        return aggregation.analyze_expenses(rows, group_by)
