"""
Crew assignment workflow.

An assignment moves through a small state machine:

    pending --accept/decline--> accepted | declined
    accepted | declined --admin revert--> pending

Nothing else is allowed. ``reassigned`` exists in the data model but no
transition produces or leaves it.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio_scheduler.exceptions import (
    InvalidTransition,
    NotFoundError,
    SelectionRequired,
    StoreError,
)
from studio_scheduler.models.assignment import AssignmentRecord
from studio_scheduler.models.team_member import TeamMemberRecord
from studio_scheduler.schemas.assignment import AssignmentResult
from studio_scheduler.schemas.event import EventAssignment, ScheduledEvent
from studio_scheduler.schemas.team import TeamMember
from studio_scheduler.services.event_store import EventStore, record_to_event
from studio_scheduler.services.notification_service import (
    queue_notification,
    record_to_command,
)
from studio_scheduler.services.team_service import record_to_member

logger = logging.getLogger(__name__)

ASSIGNABLE_ROLES = {"photographer", "videographer", "editor", "production"}

# (from, to) -> whether only an admin may make the move
TRANSITIONS: dict[tuple[str, str], bool] = {
    ("pending", "accepted"): False,
    ("pending", "declined"): False,
    ("accepted", "pending"): True,
    ("declined", "pending"): True,
}


def check_transition(current: str, requested: str, is_admin: bool = False) -> None:
    admin_only = TRANSITIONS.get((current, requested))
    if admin_only is None:
        raise InvalidTransition(current, requested)
    if admin_only and not is_admin:
        raise InvalidTransition(current, requested, "reverting a response requires an admin")


def list_eligible_candidates(
    event: ScheduledEvent,
    role: str,
    date: str | None,
    members: list[TeamMember],
) -> list[TeamMember]:
    """
    Members who could take ``role`` on ``event``.

    A member qualifies when their primary role matches, they are not busy or
    tentative on the date, and they hold no assignment on the event at all,
    declined ones included.
    """
    day = date or event.date
    already_on_event = {a.team_member_id for a in event.assignments}
    return [
        member
        for member in members
        if member.role == role
        and member.availability.get(day, "available") == "available"
        and member.id not in already_on_event
    ]


def _to_schema(record: AssignmentRecord) -> EventAssignment:
    return EventAssignment(
        event_id=record.event_id,
        team_member_id=record.team_member_id,
        role=record.role,
        status=record.status,
        notes=record.notes,
        reporting_time=record.reporting_time,
    )


def assign(
    db: Session,
    event_id: str,
    team_member_id: str | None,
    role: str | None,
    notes: str | None = None,
    reporting_time: str | None = None,
) -> AssignmentResult:
    """Add a pending assignment and queue the crew notification in the same commit."""
    if not team_member_id:
        raise SelectionRequired("Select a team member to assign")
    if role not in ASSIGNABLE_ROLES:
        raise SelectionRequired(f"Select a role: one of {sorted(ASSIGNABLE_ROLES)}")

    store = EventStore(db)
    event_record = store.get_record(event_id)
    if event_record is None:
        raise NotFoundError("Event", event_id)
    member_record = db.query(TeamMemberRecord).filter(TeamMemberRecord.id == team_member_id).first()
    if member_record is None:
        raise NotFoundError("Team member", team_member_id)
    if any(a.team_member_id == team_member_id for a in event_record.assignments):
        raise SelectionRequired(f"{member_record.name} is already on this event; select someone else")

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    record = AssignmentRecord(
        id=str(uuid.uuid4()),
        event_id=event_id,
        team_member_id=team_member_id,
        role=role,
        status="pending",
        position=len(event_record.assignments),
        notes=notes or f"Assigned as {role}",
        reporting_time=reporting_time,
        assigned_at=now,
    )
    event_record.assignments.append(record)
    event_record.updated_at = now

    assignment = _to_schema(record)
    notification = queue_notification(
        db, "assignment", record_to_event(event_record), assignment, record_to_member(member_record)
    )
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError(f"Could not assign {team_member_id} to {event_id}: {exc}") from exc

    logger.info("Assigned %s as %s on event %s", team_member_id, role, event_id)
    return AssignmentResult(assignment=assignment, notifications=[record_to_command(notification)])


def update_status(
    db: Session,
    event_id: str,
    team_member_id: str,
    new_status: str,
    is_admin: bool = False,
) -> EventAssignment:
    store = EventStore(db)
    event_record = store.get_record(event_id)
    if event_record is None:
        raise NotFoundError("Event", event_id)
    record = next(
        (a for a in event_record.assignments if a.team_member_id == team_member_id),
        None,
    )
    if record is None:
        raise NotFoundError("Assignment", f"{event_id}/{team_member_id}")

    check_transition(record.status, new_status, is_admin)

    previous = record.status
    record.status = new_status
    event_record.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError(f"Could not update assignment {event_id}/{team_member_id}: {exc}") from exc

    logger.info(
        "Assignment %s/%s moved from %s to %s", event_id, team_member_id, previous, new_status
    )
    return _to_schema(record)


def revert_to_pending(db: Session, event_id: str, team_member_id: str) -> EventAssignment:
    """Admin correction of an accepted or declined response."""
    return update_status(db, event_id, team_member_id, "pending", is_admin=True)
