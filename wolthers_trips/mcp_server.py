"""
MCP server exposing the finance and itinerary reports to agents over stdio.

Run with ``wolthers-mcp`` (or ``python -m wolthers_trips.mcp_server``).
Requires SUPABASE_URL (or NEXT_PUBLIC_SUPABASE_URL) and SUPABASE_SERVICE_ROLE_KEY.
"""

import json
import logging
import sys
from datetime import date
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from wolthers_trips.config import settings
from wolthers_trips.database.supabase_client import SupabaseClient
from wolthers_trips.modules.reports.service import ReportService

logger = logging.getLogger(__name__)

mcp = FastMCP("supabase-wolthers-trips")

_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    """Service-role report service, created on first tool call"""
    global _report_service
    if _report_service is None:
        missing = []
        if not settings.supabase_url:
            missing.append("SUPABASE_URL")
        if not settings.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if missing:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
        _report_service = ReportService(SupabaseClient.get_service_client())
    return _report_service


def _parse_date(name: str, value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{name} must be a date in YYYY-MM-DD format, got '{value}'")


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


@mcp.tool()
def get_pending_reimbursements_by_due_date(
    due_date_start: Optional[str] = None,
    due_date_end: Optional[str] = None,
    currency: Optional[str] = None,
) -> str:
    """Query pending reimbursements by credit card due date to prioritize payments.

    Dates are YYYY-MM-DD; currency filters e.g. USD, BRL, EUR.
    """
    try:
        groups = get_report_service().pending_reimbursements(
            _parse_date("due_date_start", due_date_start),
            _parse_date("due_date_end", due_date_end),
            currency,
        )
    except Exception as e:
        logger.error(f"get_pending_reimbursements_by_due_date failed: {e}")
        return f"Error: {e}"
    return f"Pending Reimbursements by Due Date:\n\n{_dump(groups)}"


@mcp.tool()
def get_trip_cost_summaries(
    trip_status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    client_billable_only: bool = False,
) -> str:
    """Get trip cost summaries for client billing preparation.

    trip_status is one of draft, proposal, confirmed, scheduled, in_progress,
    completed, cancelled, to_be_confirmed.
    """
    try:
        report = get_report_service().trip_cost_summaries(
            trip_status,
            _parse_date("start_date", start_date),
            _parse_date("end_date", end_date),
            client_billable_only,
        )
    except Exception as e:
        logger.error(f"get_trip_cost_summaries failed: {e}")
        return f"Error: {e}"
    text = f"Trip Cost Summaries:\n\n{_dump(report['trip_costs'])}"
    if report["client_billing"] is not None:
        text += f"\n\nClient Billing Summary:\n{_dump(report['client_billing'])}"
    return text


@mcp.tool()
def check_meeting_confirmation_status(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    confirmation_status: Optional[str] = None,
    trip_id: Optional[str] = None,
) -> str:
    """Check meeting confirmation status for upcoming meetings.

    confirmation_status is one of pending, confirmed, cancelled, needs_reschedule.
    """
    try:
        summary = get_report_service().meeting_confirmation_status(
            _parse_date("date_from", date_from),
            _parse_date("date_to", date_to),
            confirmation_status,
            trip_id,
        )
    except Exception as e:
        logger.error(f"check_meeting_confirmation_status failed: {e}")
        return f"Error: {e}"
    return f"Meeting Confirmation Status:\n\n{_dump(summary)}"


@mcp.tool()
def analyze_expenses_by_category_currency(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    trip_id: Optional[str] = None,
    user_id: Optional[str] = None,
    group_by: str = "category",
) -> str:
    """Analyze expenses by category and currency for reporting.

    group_by is one of category, currency, user, trip.
    """
    try:
        analysis = get_report_service().expense_analysis(
            _parse_date("start_date", start_date),
            _parse_date("end_date", end_date),
            trip_id,
            user_id,
            group_by,
        )
    except Exception as e:
        logger.error(f"analyze_expenses_by_category_currency failed: {e}")
        return f"Error: {e}"
    return f"Expense Analysis (grouped by {group_by}):\n\n{_dump(analysis)}"


def main():
    # stdout carries the protocol; log to stderr
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        get_report_service()
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info("Starting supabase-wolthers-trips MCP server on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
