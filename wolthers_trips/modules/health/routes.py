from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from wolthers_trips.config import settings
from wolthers_trips.database.supabase_client import get_service_supabase
from wolthers_trips.modules.health.service import HealthService, check_environment_config
from wolthers_trips.core.dependencies import require_admin
from typing import Dict

router = APIRouter(prefix="/health", tags=["health"])


def get_health_service() -> HealthService:
    return HealthService(settings, get_service_supabase)


@router.get("/tables")
async def table_health(
    user_data: Dict = Depends(require_admin),
    service: HealthService = Depends(get_health_service),
):
    """One-row probe of every application table"""
    results = service.tables()
    return {
        "tables": results,
        "failed": [r["table"] for r in results if r["status"] == "error"],
    }


@router.get("/config")
async def config_health(user_data: Dict = Depends(require_admin)):
    """Which required settings are present (values are never returned)"""
    return check_environment_config(settings)


def health_response(service: HealthService) -> JSONResponse:
    status_code, payload = service.check()
    return JSONResponse(status_code=status_code, content=payload)
