"""Supabase Storage buckets for receipts, vehicle dashboard photos and documents."""
import logging
import time
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException
from supabase import Client

from wolthers_trips.config import settings
from wolthers_trips.config.roles_config import REQUIRED_BUCKETS, STORAGE_BUCKETS

logger = logging.getLogger(__name__)


def file_extension(filename: Optional[str]) -> str:
    """Lower-cased extension of an upload; files without one are stored as .bin"""
    if not filename or "." not in filename:
        return "bin"
    return filename.rsplit(".", 1)[-1].lower() or "bin"


def _millis() -> int:
    return int(time.time() * 1000)


class StorageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_buckets(self) -> List[Dict[str, object]]:
        buckets = self.supabase.storage.list_buckets() or []
        return [
            {"name": getattr(b, "name", None), "public": bool(getattr(b, "public", False))}
            for b in buckets
        ]

    def status(self) -> Dict[str, object]:
        """Storage connectivity and which required buckets are missing"""
        try:
            existing = [b["name"] for b in self.list_buckets()]
        except Exception as e:
            logger.error(f"Storage connection failed: {e}")
            return {
                "connected": False,
                "buckets": [],
                "missing": list(REQUIRED_BUCKETS),
                "required": list(REQUIRED_BUCKETS),
                "error": f"Storage connection failed: {e}",
            }
        missing = [name for name in REQUIRED_BUCKETS if name not in existing]
        if missing:
            logger.warning("Missing buckets: %s", ", ".join(missing))
        return {
            "connected": True,
            "buckets": existing,
            "missing": missing,
            "required": list(REQUIRED_BUCKETS),
            "error": f"Missing required buckets: {', '.join(missing)}" if missing else None,
        }

    def ensure_buckets(self, names: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """Create the configured buckets that do not exist yet.

        Returns bucket name -> created | exists | error.
        """
        names = list(names) if names else list(REQUIRED_BUCKETS)
        unknown = [n for n in names if n not in STORAGE_BUCKETS]
        if unknown:
            raise ValueError(f"Unknown bucket(s): {', '.join(unknown)}")

        existing = {b["name"] for b in self.list_buckets()}
        outcome = {}
        for name in names:
            if name in existing:
                logger.info(f"Bucket '{name}' already exists")
                outcome[name] = "exists"
                continue
            try:
                self.supabase.storage.create_bucket(name, options=dict(STORAGE_BUCKETS[name]))
                logger.info(f"Created bucket '{name}'")
                outcome[name] = "created"
            except Exception as e:
                if "already exists" in str(e).lower():
                    logger.info(f"Bucket '{name}' already exists")
                    outcome[name] = "exists"
                else:
                    logger.error(f"Error creating bucket '{name}': {e}")
                    outcome[name] = "error"
        return outcome

    def _check_upload(self, bucket: str, content: bytes, content_type: Optional[str]):
        config = STORAGE_BUCKETS.get(bucket)
        if config is None:
            raise HTTPException(status_code=400, detail=f"Unknown bucket: {bucket}")
        if content_type not in config["allowed_mime_types"]:
            raise HTTPException(
                status_code=400,
                detail=f"File type {content_type} not allowed in {bucket}"
            )
        if len(content) > config["file_size_limit"]:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds the {config['file_size_limit'] // (1024 * 1024)}MB limit for {bucket}"
            )

    def _upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        self._check_upload(bucket, content, content_type)
        try:
            self.supabase.storage.from_(bucket).upload(
                path,
                content,
                file_options={"content-type": content_type}
            )
        except Exception as e:
            logger.error(f"Upload to {bucket} failed: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to upload to storage: {str(e)}")
        logger.info(f"Uploaded {bucket}/{path}")
        return path

    def upload_receipt(self, user_id: str, trip_id: str, filename: str, content: bytes, content_type: str) -> str:
        """Store a receipt under <user>/<trip>/<millis>.<ext>"""
        path = f"{user_id}/{trip_id}/{_millis()}.{file_extension(filename)}"
        return self._upload("receipts", path, content, content_type)

    def upload_dashboard_photo(
        self,
        user_id: str,
        vehicle_log_id: str,
        kind: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """Store an odometer photo taken at the start or end of a vehicle log"""
        if kind not in ("start", "end"):
            raise HTTPException(status_code=400, detail="kind must be 'start' or 'end'")
        path = f"{user_id}/{vehicle_log_id}/dashboard_{kind}_{_millis()}.{file_extension(filename)}"
        return self._upload("dashboard-photos", path, content, content_type)

    def signed_url(self, bucket: str, path: str, expires_in: Optional[int] = None) -> str:
        if bucket not in STORAGE_BUCKETS:
            raise HTTPException(status_code=400, detail=f"Unknown bucket: {bucket}")
        try:
            result = self.supabase.storage.from_(bucket).create_signed_url(
                path, expires_in or settings.signed_url_expiry
            )
        except Exception as e:
            logger.error(f"Failed to get file URL: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create signed URL: {str(e)}")
        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise HTTPException(status_code=404, detail="File not found")
        return url

    def delete_file(self, bucket: str, path: str) -> bool:
        if bucket not in STORAGE_BUCKETS:
            raise HTTPException(status_code=400, detail=f"Unknown bucket: {bucket}")
        try:
            self.supabase.storage.from_(bucket).remove([path])
        except Exception as e:
            logger.error(f"File deletion failed: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete file: {str(e)}")
        logger.info(f"Deleted {bucket}/{path}")
        return True
