"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from wolthers_trips.config.roles_config import ADMIN_ROLES
from wolthers_trips.database.supabase_client import get_supabase
from wolthers_trips.modules.auth.service import AuthService
from supabase import Client
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to the auth user merged with its users profile"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def has_role(user_role: Optional[str], required_roles: Iterable[str]) -> bool:
    return user_role in set(required_roles)


def is_admin(user_data: dict) -> bool:
    return has_role(user_data.get("role"), ADMIN_ROLES)


def can_access_trip(user_role: Optional[str], user_id: str, trip_owner_id: Optional[str]) -> bool:
    """Admin roles see every trip; everyone else only the trips they own."""
    return has_role(user_role, ADMIN_ROLES) or (trip_owner_id is not None and user_id == trip_owner_id)


def require_role(*roles: str):
    """Factory function to create role check dependency"""
    def check_role(user_data: dict = Depends(get_current_user)) -> dict:
        if not has_role(user_data.get("role"), roles):
            logger.info("Denied %s (role %s); requires %s", user_data.get("email"), user_data.get("role"), roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient role. Required one of: {', '.join(roles)}"
            )
        return user_data
    return check_role


def require_admin(user_data: dict = Depends(get_current_user)) -> dict:
    """Dependency for company-wide views (trips of others, reports, health details)"""
    return require_role(*ADMIN_ROLES)(user_data)


def is_trip_participant(trip_id: str, profile_id: str, supabase: Client) -> bool:
    result = supabase.table("trip_participants")\
        .select("id")\
        .eq("trip_id", trip_id)\
        .eq("user_id", profile_id)\
        .limit(1)\
        .execute()
    return bool(result.data)


def check_trip_access(trip: dict, user_data: dict, supabase: Client) -> dict:
    """Allow admin roles, the trip creator, or a participant of the trip"""
    if can_access_trip(user_data.get("role"), user_data["profile_id"], trip.get("created_by")):
        return user_data
    if is_trip_participant(trip["id"], user_data["profile_id"], supabase):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a participant of this trip to access it"
    )
