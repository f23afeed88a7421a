"""Tests for the MCP report tools."""

import json

import pytest

from wolthers_trips import mcp_server
from wolthers_trips.modules.reports.service import ReportService
from tests.conftest import FakeSupabase
from tests.test_reports import EXPENSE_ROWS, MEETING_ROWS, REIMBURSEMENT_ROWS, TRIP_COST_ROWS


@pytest.fixture
def report_db(monkeypatch):
    supabase = FakeSupabase({
        "finance_reimbursement_summary": REIMBURSEMENT_ROWS,
        "meetings": MEETING_ROWS,
        "expenses": EXPENSE_ROWS,
        "trip_cost_summary": TRIP_COST_ROWS,
        "finance_client_billing_summary": [{"trip_id": "t-1", "billable_usd": 1500}],
    })
    monkeypatch.setattr(mcp_server, "_report_service", ReportService(supabase))
    return supabase


def _payload(text, prefix):
    assert text.startswith(prefix)
    return json.loads(text[len(prefix):])


def test_pending_reimbursements(report_db):
    text = mcp_server.get_pending_reimbursements_by_due_date(currency="USD")
    groups = _payload(text, "Pending Reimbursements by Due Date:\n\n")
    assert [g["due_date"] for g in groups] == [5, 20]


def test_trip_costs_with_billing(report_db):
    text = mcp_server.get_trip_cost_summaries(client_billable_only=True)
    costs, billing = text.split("\n\nClient Billing Summary:\n")
    assert [t["trip_id"] for t in _payload(costs, "Trip Cost Summaries:\n\n")] == ["t-1"]
    assert json.loads(billing) == [{"trip_id": "t-1", "billable_usd": 1500}]


def test_trip_costs_without_billing(report_db):
    text = mcp_server.get_trip_cost_summaries()
    assert "Client Billing Summary" not in text
    assert len(_payload(text, "Trip Cost Summaries:\n\n")) == 2


def test_meeting_status(report_db):
    text = mcp_server.check_meeting_confirmation_status(trip_id=None, date_to="2025-06-12")
    summary = _payload(text, "Meeting Confirmation Status:\n\n")
    assert summary["confirmed"]["count"] == 1
    assert summary["pending"]["count"] == 1


def test_expense_analysis(report_db):
    text = mcp_server.analyze_expenses_by_category_currency(group_by="currency")
    analysis = _payload(text, "Expense Analysis (grouped by currency):\n\n")
    assert analysis["USD"]["total_amount"] == 160.0


def test_errors_are_returned_as_text(report_db):
    assert mcp_server.analyze_expenses_by_category_currency(group_by="month").startswith("Error: Invalid group_by")
    assert mcp_server.check_meeting_confirmation_status(date_from="June 1").startswith(
        "Error: date_from must be a date in YYYY-MM-DD format"
    )
    report_db.errors["trip_cost_summary"] = Exception("permission denied for view")
    assert mcp_server.get_trip_cost_summaries() == "Error: permission denied for view"


def test_missing_environment(monkeypatch):
    monkeypatch.setattr(mcp_server, "_report_service", None)
    monkeypatch.setattr(mcp_server.settings, "supabase_service_role_key", None)
    with pytest.raises(RuntimeError) as exc:
        mcp_server.get_report_service()
    assert str(exc.value) == "Missing required environment variables: SUPABASE_SERVICE_ROLE_KEY"
    assert mcp_server.get_trip_cost_summaries().startswith("Error: Missing required environment variables")


def test_invalid_trip_status(report_db):
    text = mcp_server.get_trip_cost_summaries(trip_status="archived")
    assert text.startswith("Error: Invalid trip_status 'archived'")
    assert report_db.queries_for("trip_cost_summary") == []
    assert mcp_server.get_trip_cost_summaries(trip_status="to_be_confirmed").startswith("Trip Cost Summaries:")
