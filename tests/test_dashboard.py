"""Tests for the role-based dashboard."""

import pytest

from wolthers_trips.config.roles_config import get_quick_actions
from wolthers_trips.modules.dashboard.service import DashboardService
from tests.conftest import USERS


@pytest.fixture(autouse=True)
def expenses(fake_supabase):
    fake_supabase.tables["expenses"] = [
        {"id": "e-1", "user_id": "user-client", "approval_status": "pending", "reimbursement_status": "pending"},
        {"id": "e-2", "user_id": "user-client", "approval_status": "approved", "reimbursement_status": "paid"},
        {"id": "e-3", "user_id": "user-staff", "approval_status": "pending", "reimbursement_status": "pending"},
    ]
    fake_supabase.tables["vehicles"] = [{"id": "v-1"}, {"id": "v-2"}]


def test_quick_actions_fall_back_to_client():
    assert [a["title"] for a in get_quick_actions("DRIVER")] == ["Vehicle Log", "Trips"]
    assert get_quick_actions("UNKNOWN") == get_quick_actions("CLIENT")


def test_admin_dashboard(client):
    response = client.get("/api/v1/dashboard")
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "GLOBAL_ADMIN"
    stats = body["stats"]
    assert stats["total_trips"] == 3
    assert stats["active_trips"] == 1
    assert stats["completed_trips"] == 1
    assert stats["total_expenses"] == 3
    assert stats["pending_expenses"] == 2
    assert stats["total_companies"] == 1
    assert stats["vehicle_count"] == 2
    assert [t["id"] for t in body["trips"]["current_and_upcoming"]] == ["trip-upcoming", "trip-current"]
    assert [t["id"] for t in body["trips"]["past"]] == ["trip-past"]
    assert body["quick_actions"][0]["title"] == "New Trip"


def test_client_dashboard_is_scoped(client, login_as):
    login_as("CLIENT")
    body = client.get("/api/v1/dashboard").json()
    stats = body["stats"]
    assert stats["total_trips"] == 1
    assert stats["total_expenses"] == 2
    assert stats["pending_reimbursements"] == 1
    assert stats["total_users"] is None
    assert stats["vehicle_count"] is None
    assert body["trips"]["past"] == []
    assert [a["href"] for a in body["quick_actions"]] == ["/trips"]


def test_stats_failure(client, fake_supabase):
    fake_supabase.errors["expenses"] = Exception("permission denied for table expenses")
    response = client.get("/api/v1/dashboard")
    assert response.status_code == 500
    assert response.json()["detail"] == "permission denied for table expenses"


def test_trip_counts_are_not_capped_by_the_trip_list(fake_supabase):
    fake_supabase.tables["trips"] = [
        {"id": f"trip-{i}", "status": "completed" if i % 5 else "in_progress",
         "trip_participants": [{"user_id": "user-client"}] if i < 3 else []}
        for i in range(1005)
    ]
    service = DashboardService(fake_supabase)
    stats = service.get_stats(USERS["GLOBAL_ADMIN"])
    assert stats.total_trips == 1005
    assert stats.active_trips == 201
    assert stats.completed_trips == 804

    stats = service.get_stats(USERS["CLIENT"])
    assert stats.total_trips == 3
    assert stats.active_trips == 1
    query = fake_supabase.queries_for("trips")[-1]
    assert query.count_mode == "exact"
    assert ("trip_participants.user_id", "eq", "user-client") in query.filters
