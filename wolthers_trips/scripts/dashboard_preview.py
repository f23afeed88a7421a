"""
Dashboard Preview Script
Logs every trip as the dashboard would show it, followed by the
current-and-upcoming and past counts.
"""

import logging
import sys
from datetime import date
from typing import List, Optional

from wolthers_trips.database.supabase_client import get_service_supabase
from wolthers_trips.modules.trips.schemas import TripResponse
from wolthers_trips.modules.trips.service import TripService

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def describe_trip(index: int, trip: TripResponse) -> List[str]:
    cost = f"${trip.estimated_cost:,.0f}" if trip.estimated_cost else "Not specified"
    return [
        f"Trip {index}: {trip.title}",
        f"   Dates: {trip.start_date} -> {trip.end_date} ({trip.duration} days)",
        f"   Type: {trip.type.replace('_', ' ').title()}",
        f"   Status: {trip.status} ({trip.time_category.upper()})",
        f"   Regions: {', '.join(trip.regions) if trip.regions else 'None specified'}",
        f"   Main Clients: {', '.join(trip.main_clients) if trip.main_clients else 'None specified'}",
        f"   Estimated Cost: {cost}",
        f"   Description: {trip.description or 'No description'}",
    ]


def summarize(trips: List[TripResponse]) -> dict:
    upcoming = sum(1 for t in trips if t.time_category != "past")
    return {"current_and_upcoming": upcoming, "past": len(trips) - upcoming, "total": len(trips)}


def preview(service: TripService, today: Optional[date] = None) -> dict:
    trips = service.list_trips(limit=10000, today=today)
    logger.info(f"Found {len(trips)} trips in database")
    for index, trip in enumerate(trips, start=1):
        for line in describe_trip(index, trip):
            logger.info(line)
    summary = summarize(trips)
    logger.info("Dashboard summary:")
    logger.info(f"   Current & Upcoming Trips: {summary['current_and_upcoming']}")
    logger.info(f"   Past Trips: {summary['past']}")
    logger.info(f"   Total Trips: {summary['total']}")
    return summary


def main():
    try:
        preview(TripService(get_service_supabase()))
    except Exception as e:
        logger.error(f"Script failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
