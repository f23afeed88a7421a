"""
Health Check Script
Runs the configuration, database, storage and per-table checks against the
configured Supabase project. Exits non-zero when anything is unhealthy.
"""

import logging
import sys

from wolthers_trips.config import settings
from wolthers_trips.database.supabase_client import get_service_supabase
from wolthers_trips.modules.health.service import HealthService, check_environment_config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run(service: HealthService) -> int:
    env = check_environment_config(service.settings)
    if not env["is_valid"]:
        logger.error(f"Missing configuration: {', '.join(env['missing'])}")
        return 1

    status_code, payload = service.check()
    logger.info(f"Status: {payload['status']} (database {payload['database']})")
    if status_code != 200:
        logger.error(payload.get("error"))
        return 1

    logger.info(f"Storage: {payload['storage']}")
    if payload["buckets"]["missing"]:
        logger.warning(f"Missing buckets: {', '.join(payload['buckets']['missing'])}")

    failed = 0
    for result in service.tables():
        if result["status"] == "success":
            logger.info(f"  {result['table']}: ok")
        else:
            failed += 1
            logger.error(f"  {result['table']}: {result['error']}")
    if failed or payload["storage"] != "connected" or payload["buckets"]["missing"]:
        return 1
    logger.info("All checks passed")
    return 0


def main():
    sys.exit(run(HealthService(settings, get_service_supabase)))


if __name__ == "__main__":
    main()
