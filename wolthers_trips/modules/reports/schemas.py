from typing import Literal

from wolthers_trips.modules.trips.schemas import TripStatus

ConfirmationStatus = Literal["pending", "confirmed", "cancelled", "needs_reschedule"]
# Same vocabulary as the trips module and TRIP_STATUSES
ReportTripStatus = TripStatus
ExpenseGroupBy = Literal["category", "currency", "user", "trip"]
