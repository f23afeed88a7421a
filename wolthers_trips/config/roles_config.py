"""
Roles and Domain Configuration
Defines user roles, trip/meeting vocabularies, storage buckets and the
dashboard quick actions available to each role.
Used by route guards, the dashboard, storage management and admin scripts.
"""

from typing import Dict, List

# User roles stored in users.role (user_role enum)
USER_ROLES = [
    "GLOBAL_ADMIN",
    "WOLTHERS_STAFF",
    "COMPANY_ADMIN",
    "CLIENT_ADMIN",
    "FINANCE_DEPARTMENT",
    "CLIENT",
    "DRIVER",
]

DEFAULT_ROLE = "CLIENT"

# Roles that see every trip and the company-wide reports
ADMIN_ROLES = ["GLOBAL_ADMIN", "WOLTHERS_STAFF", "FINANCE_DEPARTMENT"]

FINANCE_ROLES = ["GLOBAL_ADMIN", "FINANCE_DEPARTMENT"]

AUTH_METHODS = ["microsoft", "email_otp", "trip_code"]

COMPANY_TYPES = ["client", "exporter", "farm", "cooperative", "broker"]

TRIP_STATUSES = [
    "draft",
    "proposal",
    "confirmed",
    "scheduled",
    "in_progress",
    "completed",
    "cancelled",
    "to_be_confirmed",
]

MEETING_CONFIRMATION_STATUSES = ["pending", "confirmed", "cancelled", "needs_reschedule"]

EXPENSE_GROUP_KEYS = ["category", "currency", "user", "trip"]

# Display labels and badge classes for trip statuses
STATUS_CONFIG = {
    "scheduled": {"label": "Scheduled", "class_name": "bg-info text-white"},
    "in_progress": {"label": "Trip in progress", "class_name": "bg-success text-white"},
    "completed": {"label": "Completed", "class_name": "bg-muted text-muted-foreground"},
    "cancelled": {"label": "Cancelled", "class_name": "bg-destructive text-white"},
    "to_be_confirmed": {"label": "To be confirmed", "class_name": "bg-warning text-white"},
}

_DEFAULT_STATUS_CLASS = "bg-muted text-muted-foreground"


def status_config(status: str) -> Dict[str, str]:
    """Label and badge class for a trip status; unknown statuses are shown as-is."""
    return STATUS_CONFIG.get(status, {"label": status, "class_name": _DEFAULT_STATUS_CLASS})


# Storage buckets used by the application
_MB = 1024 * 1024

STORAGE_BUCKETS = {
    "receipts": {
        "public": False,
        "allowed_mime_types": ["image/jpeg", "image/png", "image/webp", "application/pdf"],
        "file_size_limit": 50 * _MB,
    },
    "dashboard-photos": {
        "public": False,
        "allowed_mime_types": ["image/jpeg", "image/png", "image/webp"],
        "file_size_limit": 10 * _MB,
    },
    "documents": {
        "public": False,
        "allowed_mime_types": [
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ],
        "file_size_limit": 100 * _MB,
    },
}

REQUIRED_BUCKETS: List[str] = list(STORAGE_BUCKETS)

# Tables probed by the table health check
APPLICATION_TABLES = [
    "companies",
    "company_locations",
    "company_contacts",
    "users",
    "trips",
    "trip_participants",
    "meetings",
    "expenses",
    "payment_cards",
    "vehicles",
    "vehicle_logs",
    "flight_bookings",
    "finance_tasks",
    "out_of_office_messages",
]

# Dashboard quick actions
QUICK_ACTIONS = {
    "new_trip": {
        "title": "New Trip",
        "description": "Plan a new itinerary",
        "href": "/trips/new",
        "icon": "plane",
        "color": "primary",
    },
    "trips": {
        "title": "Trips",
        "description": "Browse current and past trips",
        "href": "/trips",
        "icon": "map",
        "color": "default",
    },
    "add_expense": {
        "title": "Add Expense",
        "description": "Upload a receipt for a trip",
        "href": "/expenses/new",
        "icon": "receipt",
        "color": "secondary",
    },
    "reimbursements": {
        "title": "Reimbursements",
        "description": "Review pending reimbursements by card due date",
        "href": "/finance/reimbursements",
        "icon": "credit-card",
        "color": "primary",
    },
    "users": {
        "title": "Users",
        "description": "Manage staff and client accounts",
        "href": "/admin/users",
        "icon": "users",
        "color": "default",
    },
    "companies": {
        "title": "Companies",
        "description": "Manage clients, exporters and farms",
        "href": "/companies",
        "icon": "building",
        "color": "default",
    },
    "vehicle_log": {
        "title": "Vehicle Log",
        "description": "Record start and end dashboard photos",
        "href": "/vehicles/logs/new",
        "icon": "car",
        "color": "primary",
    },
}

ROLE_QUICK_ACTIONS = {
    "GLOBAL_ADMIN": ["new_trip", "reimbursements", "users", "companies"],
    "WOLTHERS_STAFF": ["new_trip", "trips", "add_expense", "companies"],
    "FINANCE_DEPARTMENT": ["reimbursements", "trips", "add_expense"],
    "COMPANY_ADMIN": ["trips", "companies"],
    "CLIENT_ADMIN": ["trips", "companies"],
    "CLIENT": ["trips"],
    "DRIVER": ["vehicle_log", "trips"],
}


def get_quick_actions(role: str) -> List[Dict[str, str]]:
    """Quick actions shown on the dashboard for a role."""
    keys = ROLE_QUICK_ACTIONS.get(role, ROLE_QUICK_ACTIONS[DEFAULT_ROLE])
    return [QUICK_ACTIONS[k] for k in keys]
