from supabase import Client
from wolthers_trips.config.roles_config import status_config
from wolthers_trips.modules.trips.schemas import (
    TripCreate, TripUpdate, TripResponse, TripParticipantResponse, TripCompanyResponse
)
from typing import List, Optional, Union
from datetime import date, datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

TRIP_COLUMNS = (
    "id, title, description, start_date, end_date, type, status, regions, "
    "main_clients, estimated_cost, created_by, created_at, updated_at"
)


def _as_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def trip_duration(start_date, end_date) -> int:
    """Whole days between start and end (a same-day trip is 0)."""
    return (_as_date(end_date) - _as_date(start_date)).days


def format_start_date(start_date) -> str:
    """e.g. 'Jan 5, 2025'"""
    d = _as_date(start_date)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def trip_time_category(start_date, end_date, today: Optional[date] = None) -> str:
    """'current' while today is within the trip (inclusive), 'upcoming' before it, 'past' after."""
    today = today or date.today()
    start = _as_date(start_date)
    end = _as_date(end_date)
    if start <= today <= end:
        return "current"
    if today < start:
        return "upcoming"
    return "past"


def to_trip_response(trip: dict, today: Optional[date] = None) -> TripResponse:
    return TripResponse(
        **{k: v for k, v in trip.items() if k in TripResponse.model_fields},
        duration=trip_duration(trip["start_date"], trip["end_date"]),
        formatted_start_date=format_start_date(trip["start_date"]),
        time_category=trip_time_category(trip["start_date"], trip["end_date"], today),
        status_label=status_config(trip["status"])["label"],
    )


class TripService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_trips(
        self,
        participant_id: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
        today: Optional[date] = None,
    ) -> List[TripResponse]:
        """List trips newest first. participant_id restricts to trips that user takes part in."""
        try:
            columns = TRIP_COLUMNS
            if participant_id:
                columns = f"{TRIP_COLUMNS}, trip_participants!inner(user_id)"
            query = self.supabase.table("trips").select(columns)
            if participant_id:
                query = query.eq("trip_participants.user_id", participant_id)
            if status:
                query = query.eq("status", status)
            result = query.order("start_date", desc=True).execute()
            trips = [to_trip_response(t, today) for t in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching trips: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if category:
            trips = [t for t in trips if t.time_category == category]
        return trips[offset:offset + limit]

    def get_trip_row(self, trip_id: str) -> dict:
        try:
            result = self.supabase.table("trips")\
                .select(TRIP_COLUMNS)\
                .eq("id", trip_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Trip not found")
        return result.data[0]

    def get_trip(self, trip_id: str) -> TripResponse:
        return to_trip_response(self.get_trip_row(trip_id))

    def create_trip(self, trip_data: TripCreate, created_by: str) -> TripResponse:
        """Create a trip owned by created_by"""
        try:
            payload = trip_data.model_dump(mode="json")
            payload["created_by"] = created_by
            result = self.supabase.table("trips").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create trip")
            logger.info("Created trip %s (%s)", result.data[0]["id"], trip_data.title)
            return to_trip_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_trip(self, trip_id: str, trip_data: TripUpdate) -> TripResponse:
        existing = self.get_trip_row(trip_id)
        update_data = trip_data.model_dump(mode="json", exclude_unset=True)
        start = update_data.get("start_date", existing["start_date"])
        end = update_data.get("end_date", existing["end_date"])
        if _as_date(end) < _as_date(start):
            raise HTTPException(status_code=400, detail="end_date must be on or after start_date")
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("trips")\
                .update(update_data)\
                .eq("id", trip_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Trip not found")
        return to_trip_response(result.data[0])

    def delete_trip(self, trip_id: str) -> bool:
        """Delete a trip, then its participant rows.

        trip_participants.trip_id cascades on delete; the second delete only
        clears rows left behind where the cascade is missing.
        """
        self.get_trip_row(trip_id)
        try:
            result = self.supabase.table("trips")\
                .delete()\
                .eq("id", trip_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Trip not found")
        try:
            self.supabase.table("trip_participants")\
                .delete()\
                .eq("trip_id", trip_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Trip {trip_id} deleted but participant cleanup failed: {e}")
        logger.info("Deleted trip %s", trip_id)
        return True

    def get_participants(self, trip_id: str) -> List[TripParticipantResponse]:
        try:
            result = self.supabase.table("trip_participants")\
                .select("id, trip_id, user_id, company_id, role, users!inner(full_name, email)")\
                .eq("trip_id", trip_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching trip participants: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        participants = []
        for row in result.data or []:
            user = row.get("users")
            # Embedded resources come back as a list for some relationship shapes
            if isinstance(user, list):
                user = user[0] if user else None
            participants.append(TripParticipantResponse(**{**row, "users": user}))
        return participants

    def get_companies(self, trip_id: str) -> List[TripCompanyResponse]:
        """Client companies of a trip, taken from its main_clients names"""
        trip = self.get_trip_row(trip_id)
        return [
            TripCompanyResponse(id=f"company-{index}", name=name)
            for index, name in enumerate(trip.get("main_clients") or [])
        ]
