from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import date, datetime

TripStatus = Literal[
    "draft", "proposal", "confirmed", "scheduled",
    "in_progress", "completed", "cancelled", "to_be_confirmed",
]
TimeCategory = Literal["current", "upcoming", "past"]


class TripCreate(BaseModel):
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    type: str = "business"
    status: TripStatus = "draft"
    regions: Optional[List[str]] = None
    main_clients: Optional[List[str]] = None
    estimated_cost: Optional[float] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class TripUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[str] = None
    status: Optional[TripStatus] = None
    regions: Optional[List[str]] = None
    main_clients: Optional[List[str]] = None
    estimated_cost: Optional[float] = None

    # Omit a field to leave it unchanged; these columns are NOT NULL
    @field_validator("title", "start_date", "end_date", "type", "status", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class TripResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    type: str
    status: str
    regions: Optional[List[str]] = None
    main_clients: Optional[List[str]] = None
    estimated_cost: Optional[float] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Derived
    duration: int
    formatted_start_date: str
    time_category: TimeCategory
    status_label: str


class ParticipantUser(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None


class TripParticipantResponse(BaseModel):
    id: str
    trip_id: str
    user_id: str
    company_id: Optional[str] = None
    role: Optional[str] = None
    users: Optional[ParticipantUser] = None


class TripCompanyResponse(BaseModel):
    id: str
    name: str
    fantasy_name: Optional[str] = None
