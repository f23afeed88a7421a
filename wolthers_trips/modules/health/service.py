import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Tuple

from supabase import Client

from wolthers_trips.config import Settings
from wolthers_trips.config.roles_config import APPLICATION_TABLES, REQUIRED_BUCKETS

logger = logging.getLogger(__name__)


def truncate_url(url: str, length: int = 30) -> str:
    return f"{(url or '')[:length]}..."


def check_environment_config(settings: Settings) -> Dict[str, Any]:
    """Which settings the service needs are present"""
    config = {
        "supabase_url": {"value": bool(settings.supabase_url), "name": "SUPABASE_URL"},
        "supabase_key": {"value": bool(settings.supabase_key), "name": "SUPABASE_KEY"},
        "supabase_service_role_key": {
            "value": bool(settings.supabase_service_role_key),
            "name": "SUPABASE_SERVICE_ROLE_KEY",
            "optional": True,
        },
    }
    missing = [key for key, item in config.items() if not item["value"] and not item.get("optional")]
    return {"config": config, "is_valid": not missing, "missing": missing}


def check_tables(supabase: Client, tables: List[str] = None) -> List[Dict[str, Any]]:
    """Probe each application table with a one-row select"""
    results = []
    for table in tables or APPLICATION_TABLES:
        try:
            supabase.table(table).select("*").limit(1).execute()
            results.append({"table": table, "status": "success", "error": None})
        except Exception as e:
            logger.warning("Table check failed for %s: %s", table, e)
            results.append({"table": table, "status": "error", "error": str(e)})
    return results


class HealthService:
    def __init__(self, settings: Settings, client_factory: Callable[[], Client]):
        self.settings = settings
        self.client_factory = client_factory

    def _base(self, status: str) -> Dict[str, Any]:
        return {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": self.settings.environment,
            "supabase_url": truncate_url(self.settings.supabase_url),
        }

    def check(self) -> Tuple[int, Dict[str, Any]]:
        """Database and storage health; returns (http status, payload)"""
        if not self.settings.supabase_url or not self.settings.supabase_service_role_key:
            payload = self._base("unhealthy")
            payload.update({"database": "disconnected", "error": "Missing required environment variables"})
            return 500, payload

        try:
            supabase = self.client_factory()
            supabase.table("companies").select("id").limit(1).execute()
        except Exception as e:
            logger.error(f"Database query failed: {e}")
            payload = self._base("unhealthy")
            payload.update({"database": "error", "error": f"Database error: {e}"})
            return 500, payload

        storage_error = None
        existing: List[str] = []
        try:
            existing = [b.name for b in supabase.storage.list_buckets() or []]
        except Exception as e:
            logger.warning(f"Storage check failed: {e}")
            storage_error = str(e)

        payload = self._base("healthy")
        payload.update({
            "database": "connected",
            "storage": "error" if storage_error else "connected",
            "buckets": {
                "existing": existing,
                "missing": [b for b in REQUIRED_BUCKETS if b not in existing],
                "required": list(REQUIRED_BUCKETS),
            },
            "storage_error": storage_error,
        })
        return 200, payload

    def tables(self) -> List[Dict[str, Any]]:
        return check_tables(self.client_factory())
