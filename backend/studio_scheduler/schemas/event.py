from typing import Literal

from pydantic import BaseModel, Field

Stage = Literal["pre-production", "production", "post-production", "completed"]
AssignmentRole = Literal["photographer", "videographer", "editor", "production"]
AssignmentStatus = Literal["pending", "accepted", "declined", "reassigned"]
DeliverableType = Literal["photos", "videos", "album"]
DeliverableStatus = Literal["pending", "in-progress", "delivered", "revision-requested", "completed"]
DisplayStatus = Literal["Upcoming", "In Progress", "Pending Completion", "Completed"]
FulfillmentStatus = Literal["Fully Assigned", "Pending Responses", "Needs Assignment"]

STAGES: tuple[str, ...] = ("pre-production", "production", "post-production", "completed")


class Deliverable(BaseModel):
    id: str
    type: DeliverableType
    status: DeliverableStatus = "pending"
    description: str | None = None
    assigned_to: str | None = None
    delivery_date: str | None = None


class EventAssignment(BaseModel):
    event_id: str
    team_member_id: str
    role: AssignmentRole
    status: AssignmentStatus = "pending"
    notes: str | None = None
    reporting_time: str | None = None


class ScheduledEvent(BaseModel):
    id: str
    estimate_id: str
    name: str
    date: str
    start_time: str
    end_time: str
    location: str
    client_name: str = ""
    client_phone: str = ""
    client_email: str | None = None
    guest_count: str = "0"
    photographers_count: int = Field(default=1, ge=0)
    videographers_count: int = Field(default=0, ge=0)
    assignments: list[EventAssignment] = []
    stage: Stage = "pre-production"
    deliverables: list[Deliverable] = []
    notes: str | None = None
    client_requirements: str | None = None
    estimate_package: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class AssignmentCounts(BaseModel):
    accepted_photographers: int = 0
    accepted_videographers: int = 0
    pending_photographers: int = 0
    pending_videographers: int = 0
    total_photographers: int = 0
    total_videographers: int = 0


class StageUpdate(BaseModel):
    stage: Stage


class EventResponse(ScheduledEvent):
    display_status: DisplayStatus
    fulfillment_status: FulfillmentStatus


class ConversionResponse(BaseModel):
    created: list[ScheduledEvent]
    total_created: int
