import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.dependencies import admin_caller, get_dispatcher
from studio_scheduler.exceptions import NotFoundError, SelectionRequired
from studio_scheduler.schemas.assignment import (
    AssignmentResult,
    AssignRequest,
    CandidateResponse,
    StatusUpdateRequest,
)
from studio_scheduler.schemas.event import EventAssignment
from studio_scheduler.services import assignment_service
from studio_scheduler.services.event_store import EventStore
from studio_scheduler.services.notification_service import (
    NotificationDispatcher,
    dispatch_pending,
    list_notifications,
)
from studio_scheduler.services.team_service import list_members

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/{event_id}", tags=["assignments"])


@router.get("/candidates", response_model=CandidateResponse)
async def eligible_candidates(
    event_id: str,
    role: str | None = None,
    date: str | None = None,
    db: Session = Depends(get_db),
):
    if not role:
        raise SelectionRequired("Select a role to list candidates for")
    event = EventStore(db).get(event_id)
    if not event:
        raise NotFoundError("Event", event_id)
    day = date or event.date
    candidates = assignment_service.list_eligible_candidates(event, role, day, list_members(db, role))
    return CandidateResponse(event_id=event_id, role=role, date=day, candidates=candidates)


@router.post("/assignments", response_model=AssignmentResult, status_code=201)
async def assign_member(
    event_id: str,
    req: AssignRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    result = assignment_service.assign(
        db, event_id, req.team_member_id, req.role,
        notes=req.notes, reporting_time=req.reporting_time,
    )

    # The assignment is committed; delivery only updates the outbox rows.
    ids = [n.id for n in result.notifications]
    sent, failed = dispatch_pending(db, dispatcher, ids)
    if failed:
        logger.warning("Assignment notice for %s on %s was not delivered", req.team_member_id, event_id)
    result.notifications = list_notifications(db, ids=ids)
    return result


@router.put("/assignments/{team_member_id}", response_model=EventAssignment)
async def update_assignment_status(
    event_id: str,
    team_member_id: str,
    req: StatusUpdateRequest,
    is_admin: bool = Depends(admin_caller),
    db: Session = Depends(get_db),
):
    return assignment_service.update_status(db, event_id, team_member_id, req.status, is_admin=is_admin)
