from supabase import Client
from wolthers_trips.config.roles_config import ADMIN_ROLES, get_quick_actions
from wolthers_trips.modules.dashboard.schemas import (
    DashboardStats, DashboardTrips, DashboardResponse, QuickAction
)
from wolthers_trips.modules.trips.service import TripService
from typing import List, Optional, Tuple
from datetime import date
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.trip_service = TripService(supabase)

    def _count(
        self,
        table: str,
        filters: Optional[List[Tuple[str, object]]] = None,
        columns: str = "id",
    ) -> int:
        query = self.supabase.table(table).select(columns, count="exact")
        for column, value in filters or []:
            query = query.eq(column, value)
        result = query.limit(1).execute()
        return result.count or 0

    def _count_trips(self, participant_id: Optional[str], status: Optional[str] = None) -> int:
        columns = "id"
        filters = []
        if participant_id:
            columns = "id, trip_participants!inner(user_id)"
            filters.append(("trip_participants.user_id", participant_id))
        if status:
            filters.append(("status", status))
        return self._count("trips", filters, columns)

    def get_stats(self, user_data: dict) -> DashboardStats:
        """Trip counts cover the trips the user takes part in, expense counts their own expenses; admins see all"""
        admin = user_data.get("role") in ADMIN_ROLES
        participant_id = None if admin else user_data["profile_id"]
        expense_scope = [] if admin else [("user_id", user_data["profile_id"])]
        stats = DashboardStats(
            total_trips=self._count_trips(participant_id),
            active_trips=self._count_trips(participant_id, "in_progress"),
            completed_trips=self._count_trips(participant_id, "completed"),
            total_expenses=self._count("expenses", expense_scope),
            pending_expenses=self._count("expenses", expense_scope + [("approval_status", "pending")]),
            pending_reimbursements=self._count(
                "expenses", expense_scope + [("reimbursement_status", "pending")]
            ),
        )
        if admin:
            stats.total_users = self._count("users")
            stats.total_companies = self._count("companies")
            stats.vehicle_count = self._count("vehicles")
        return stats

    def get_dashboard(self, user_data: dict, today: Optional[date] = None) -> DashboardResponse:
        """Role-based dashboard: stats, trips split by time category and quick actions"""
        role = user_data.get("role")
        participant_id = None if role in ADMIN_ROLES else user_data["profile_id"]
        trips = self.trip_service.list_trips(participant_id=participant_id, limit=1000, today=today)
        try:
            stats = self.get_stats(user_data)
        except Exception as e:
            logger.error(f"Error computing dashboard stats: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return DashboardResponse(
            role=role,
            stats=stats,
            trips=DashboardTrips(
                current_and_upcoming=[t for t in trips if t.time_category != "past"],
                past=[t for t in trips if t.time_category == "past"],
            ),
            quick_actions=[QuickAction(**a) for a in get_quick_actions(role)],
        )
