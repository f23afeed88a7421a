from pydantic import BaseModel
from typing import List, Optional
from wolthers_trips.modules.trips.schemas import TripResponse


class DashboardStats(BaseModel):
    total_trips: int = 0
    active_trips: int = 0
    completed_trips: int = 0
    total_expenses: int = 0
    pending_expenses: int = 0
    pending_reimbursements: int = 0
    # Company-wide counts, only filled for admin roles
    total_users: Optional[int] = None
    total_companies: Optional[int] = None
    vehicle_count: Optional[int] = None


class QuickAction(BaseModel):
    title: str
    description: str
    href: str
    icon: str
    color: Optional[str] = "default"


class DashboardTrips(BaseModel):
    current_and_upcoming: List[TripResponse]
    past: List[TripResponse]


class DashboardResponse(BaseModel):
    role: str
    stats: DashboardStats
    trips: DashboardTrips
    quick_actions: List[QuickAction]
