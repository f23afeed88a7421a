from fastapi import APIRouter, Depends
from wolthers_trips.config.roles_config import ADMIN_ROLES
from wolthers_trips.database.supabase_client import get_supabase
from wolthers_trips.modules.trips.schemas import (
    TripCreate, TripUpdate, TripResponse, TripParticipantResponse,
    TripCompanyResponse, TripStatus, TimeCategory
)
from wolthers_trips.modules.trips.service import TripService
from wolthers_trips.core.dependencies import (
    get_current_user, require_role, is_admin, check_trip_access
)
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/trips", tags=["trips"])


def get_trip_service(supabase: Client = Depends(get_supabase)) -> TripService:
    return TripService(supabase)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    status: Optional[TripStatus] = None,
    category: Optional[TimeCategory] = None,
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
):
    """List trips newest first. Admin roles see every trip, others their own."""
    participant_id = None if is_admin(user_data) else user_data["profile_id"]
    return service.list_trips(
        participant_id=participant_id, status=status, category=category, limit=limit, offset=offset
    )


@router.post("", response_model=TripResponse, status_code=201)
async def create_trip(
    trip_data: TripCreate,
    user_data: Dict = Depends(require_role(*ADMIN_ROLES)),
    service: TripService = Depends(get_trip_service)
):
    """Create a new trip"""
    return service.create_trip(trip_data, user_data["profile_id"])


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Get trip by ID (admin roles, creator or participant)"""
    trip = service.get_trip_row(trip_id)
    check_trip_access(trip, user_data, supabase)
    return service.get_trip(trip_id)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: str,
    trip_data: TripUpdate,
    user_data: Dict = Depends(require_role(*ADMIN_ROLES)),
    service: TripService = Depends(get_trip_service)
):
    """Update a trip"""
    return service.update_trip(trip_id, trip_data)


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(
    trip_id: str,
    user_data: Dict = Depends(require_role(*ADMIN_ROLES)),
    service: TripService = Depends(get_trip_service)
):
    """Delete a trip and its participant rows"""
    service.delete_trip(trip_id)
    return None


@router.get("/{trip_id}/participants", response_model=List[TripParticipantResponse])
async def get_trip_participants(
    trip_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Participants of a trip with their name and email"""
    check_trip_access(service.get_trip_row(trip_id), user_data, supabase)
    return service.get_participants(trip_id)


@router.get("/{trip_id}/companies", response_model=List[TripCompanyResponse])
async def get_trip_companies(
    trip_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Client companies visited on a trip"""
    check_trip_access(service.get_trip_row(trip_id), user_data, supabase)
    return service.get_companies(trip_id)
