from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from wolthers_trips.database.supabase_client import get_service_supabase
from wolthers_trips.modules.reports.schemas import ConfirmationStatus, ReportTripStatus, ExpenseGroupBy
from wolthers_trips.modules.reports.service import ReportService
from wolthers_trips.core.dependencies import require_admin
from supabase import Client
from typing import Any, Callable, Dict, Optional
from datetime import date, datetime, timezone
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(supabase: Client = Depends(get_service_supabase)) -> ReportService:
    return ReportService(supabase)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _run_report(name: str, report: Callable[[], Any]):
    """Wrap a report in the {success, data|error, timestamp} envelope"""
    try:
        data = report()
    except Exception as e:
        logger.error(f"{name} report failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e) or "Unknown error", "timestamp": _timestamp()},
        )
    return {"success": True, "data": data, "timestamp": _timestamp()}


@router.get("/reimbursements")
async def pending_reimbursements(
    due_date_start: Optional[date] = None,
    due_date_end: Optional[date] = None,
    currency: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Pending reimbursements grouped by credit card due date and currency"""
    return _run_report(
        "Reimbursements",
        lambda: service.pending_reimbursements(due_date_start, due_date_end, currency),
    )


@router.get("/trip-costs")
async def trip_costs(
    trip_status: Optional[ReportTripStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client_billable_only: bool = False,
    user_data: Dict = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Trip cost summaries for client billing preparation"""
    return _run_report(
        "Trip costs",
        lambda: service.trip_cost_summaries(trip_status, start_date, end_date, client_billable_only),
    )


@router.get("/meetings")
async def meeting_confirmations(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    confirmation_status: Optional[ConfirmationStatus] = None,
    trip_id: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Meeting confirmation status for upcoming meetings"""
    return _run_report(
        "Meeting confirmation",
        lambda: service.meeting_confirmation_status(date_from, date_to, confirmation_status, trip_id),
    )


@router.get("/expenses")
async def expense_analysis(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    trip_id: Optional[str] = None,
    user_id: Optional[str] = None,
    group_by: ExpenseGroupBy = "category",
    user_data: Dict = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Expenses by category, currency, user or trip"""
    return _run_report(
        "Expense analysis",
        lambda: service.expense_analysis(start_date, end_date, trip_id, user_id, group_by),
    )
