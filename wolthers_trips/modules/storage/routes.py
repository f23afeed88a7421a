from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from wolthers_trips.config import settings
from wolthers_trips.database.supabase_client import get_supabase, get_service_supabase
from wolthers_trips.modules.storage.schemas import (
    StorageStatusResponse, EnsureBucketsRequest, EnsureBucketsResponse,
    UploadResponse, SignedUrlResponse
)
from wolthers_trips.modules.storage.service import StorageService
from wolthers_trips.modules.trips.service import TripService
from wolthers_trips.core.dependencies import (
    get_current_user, require_admin, require_role, is_admin, check_trip_access
)
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/storage", tags=["storage"])


def get_storage_service(supabase: Client = Depends(get_service_supabase)) -> StorageService:
    return StorageService(supabase)


def _check_path_owner(path: str, user_data: Dict):
    """Non-admin users may only touch files stored under their own folder"""
    if ".." in path.split("/"):
        raise HTTPException(status_code=400, detail="Invalid file path")
    if not is_admin(user_data) and not path.startswith(f"{user_data['profile_id']}/"):
        raise HTTPException(status_code=403, detail="File not accessible")


@router.get("/status", response_model=StorageStatusResponse)
async def storage_status(
    user_data: Dict = Depends(require_admin),
    service: StorageService = Depends(get_storage_service),
):
    """Storage connectivity and missing buckets"""
    return service.status()


@router.post("/buckets/ensure", response_model=EnsureBucketsResponse)
async def ensure_buckets(
    request: Optional[EnsureBucketsRequest] = None,
    user_data: Dict = Depends(require_role("GLOBAL_ADMIN")),
    service: StorageService = Depends(get_storage_service),
):
    """Create any missing application buckets"""
    try:
        outcome = service.ensure_buckets(request.buckets if request else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"buckets": outcome}


@router.post("/receipts", response_model=UploadResponse, status_code=201)
async def upload_receipt(
    trip_id: str = Form(...),
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: StorageService = Depends(get_storage_service),
    supabase: Client = Depends(get_supabase),
):
    """Upload an expense receipt for a trip the user can access"""
    check_trip_access(TripService(supabase).get_trip_row(trip_id), user_data, supabase)
    content = await file.read()
    path = service.upload_receipt(
        user_data["profile_id"], trip_id, file.filename, content, file.content_type
    )
    return {"bucket": "receipts", "path": path}


@router.post("/dashboard-photos", response_model=UploadResponse, status_code=201)
async def upload_dashboard_photo(
    vehicle_log_id: str = Form(...),
    kind: str = Form(...),
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: StorageService = Depends(get_storage_service),
):
    """Upload the start or end odometer photo of a vehicle log"""
    content = await file.read()
    path = service.upload_dashboard_photo(
        user_data["profile_id"], vehicle_log_id, kind, file.filename, content, file.content_type
    )
    return {"bucket": "dashboard-photos", "path": path}


@router.get("/{bucket}/signed-url", response_model=SignedUrlResponse)
async def signed_url(
    bucket: str,
    path: str,
    expires_in: Optional[int] = None,
    user_data: Dict = Depends(get_current_user),
    service: StorageService = Depends(get_storage_service),
):
    """Temporary URL for viewing a private file"""
    _check_path_owner(path, user_data)
    expires_in = expires_in or settings.signed_url_expiry
    return {"url": service.signed_url(bucket, path, expires_in), "expires_in": expires_in}


@router.delete("/{bucket}", status_code=204)
async def delete_file(
    bucket: str,
    path: str,
    user_data: Dict = Depends(get_current_user),
    service: StorageService = Depends(get_storage_service),
):
    """Delete a stored file"""
    _check_path_owner(path, user_data)
    service.delete_file(bucket, path)
    return None
