from fastapi import APIRouter, Depends
from wolthers_trips.database.supabase_client import get_supabase
from wolthers_trips.modules.dashboard.schemas import DashboardResponse
from wolthers_trips.modules.dashboard.service import DashboardService
from wolthers_trips.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user_data: Dict = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Dashboard for the current user's role"""
    return service.get_dashboard(user_data)
