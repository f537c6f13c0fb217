from typing import Literal

from pydantic import BaseModel

from studio_scheduler.schemas.event import (
    AssignmentCounts,
    EventAssignment,
    FulfillmentStatus,
)
from studio_scheduler.schemas.notification import NotificationCommand
from studio_scheduler.schemas.team import TeamMember


class AssignRequest(BaseModel):
    team_member_id: str | None = None
    role: str | None = None
    notes: str | None = None
    reporting_time: str | None = None


class StatusUpdateRequest(BaseModel):
    status: Literal["pending", "accepted", "declined"]


class AssignmentResult(BaseModel):
    assignment: EventAssignment
    notifications: list[NotificationCommand] = []


class StaffingResponse(BaseModel):
    event_id: str
    photographers_required: int
    videographers_required: int
    counts: AssignmentCounts
    status: FulfillmentStatus
    photographers_short: int
    videographers_short: int
    over_assigned: bool


class CandidateResponse(BaseModel):
    event_id: str
    role: str
    date: str
    candidates: list[TeamMember]
