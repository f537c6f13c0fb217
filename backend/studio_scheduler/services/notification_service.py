"""
Crew notifications: message formatting, the outbox, and delivery.

Workflow operations only queue NotificationRecord rows in the same
transaction as their change. Delivery is a separate step
(``dispatch_pending``) whose outcome is recorded on the outbox row and never
feeds back into assignment state.
"""
import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy.orm import Session

from studio_scheduler.config import settings
from studio_scheduler.models.assignment import AssignmentRecord
from studio_scheduler.models.notification import NotificationRecord
from studio_scheduler.models.scheduled_event import ScheduledEventRecord
from studio_scheduler.models.team_member import TeamMemberRecord
from studio_scheduler.schemas.event import EventAssignment, ScheduledEvent
from studio_scheduler.schemas.notification import NotificationCommand
from studio_scheduler.schemas.team import TeamMember
from studio_scheduler.services.event_store import record_to_event
from studio_scheduler.services.team_service import record_to_member

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _display_date(value: str) -> str:
    try:
        return date.fromisoformat(value).strftime("%A, %d %B %Y")
    except ValueError:
        return value


def _requirements_block(event: ScheduledEvent) -> str:
    if not event.client_requirements:
        return ""
    return f"\nClient Requirements:\n{event.client_requirements}\n"


def build_assignment_message(event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> str:
    reporting_time = assignment.reporting_time or event.start_time
    return (
        f"Hello {member.name},\n\n"
        f"You have been assigned as {assignment.role} for the following event:\n\n"
        f"Event: {event.name}\n"
        f"Date: {_display_date(event.date)}\n"
        f"Time: {reporting_time} - {event.end_time}\n"
        f"Location: {event.location}\n"
        f"Client: {event.client_name}\n"
        f"{_requirements_block(event)}\n"
        "Please confirm your availability by accepting or declining this assignment.\n\n"
        f"Thank you,\n{settings.studio_name}\n"
    )


def build_reminder_message(event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> str:
    reporting_time = assignment.reporting_time or event.start_time
    return (
        f"REMINDER: {event.name} on {_display_date(event.date)}\n\n"
        f"Hello {member.name},\n\n"
        "This is a reminder for your upcoming assignment:\n\n"
        f"Event: {event.name}\n"
        f"Date: {_display_date(event.date)}\n"
        f"Reporting Time: {reporting_time}\n"
        f"Location: {event.location}\n"
        f"Client: {event.client_name}\n"
        f"Approximate Guest Count: {event.guest_count or 'Not specified'}\n"
        f"{_requirements_block(event)}\n"
        "Please ensure you arrive on time with all necessary equipment.\n\n"
        f"Thank you,\n{settings.studio_name}\n"
    )


def recipient_for(member: TeamMember) -> str:
    return member.whatsapp or member.phone


class NotificationDispatcher(Protocol):
    def deliver(self, recipient: str, message: str) -> bool:
        ...

    def send_assignment(self, event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> bool:
        ...

    def send_reminder(self, event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> bool:
        ...


class LoggingDispatcher:
    """Stands in for the messaging provider: writes each message to the log."""

    def deliver(self, recipient: str, message: str) -> bool:
        if not recipient:
            logger.warning("No phone number to deliver notification to")
            return False
        logger.info("Notification to %s:\n%s", recipient, message)
        return True

    def send_assignment(self, event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> bool:
        return self.deliver(recipient_for(member), build_assignment_message(event, assignment, member))

    def send_reminder(self, event: ScheduledEvent, assignment: EventAssignment, member: TeamMember) -> bool:
        return self.deliver(recipient_for(member), build_reminder_message(event, assignment, member))


def record_to_command(record: NotificationRecord) -> NotificationCommand:
    return NotificationCommand(
        id=record.id,
        kind=record.kind,
        event_id=record.event_id,
        team_member_id=record.team_member_id,
        recipient=record.recipient,
        message=record.message,
        status=record.status,
        attempts=record.attempts,
        last_error=record.last_error,
        created_at=record.created_at,
        sent_at=record.sent_at,
    )


def queue_notification(
    db: Session,
    kind: str,
    event: ScheduledEvent,
    assignment: EventAssignment,
    member: TeamMember,
) -> NotificationRecord:
    """Add an outbox row to the session; committing is the caller's job."""
    builder = build_assignment_message if kind == "assignment" else build_reminder_message
    record = NotificationRecord(
        id=str(uuid.uuid4()),
        kind=kind,
        event_id=event.id,
        team_member_id=member.id,
        recipient=recipient_for(member),
        message=builder(event, assignment, member),
        status="pending",
        attempts=0,
        created_at=_now(),
    )
    db.add(record)
    return record


def queue_reminders(db: Session, as_of: date | None = None) -> list[NotificationCommand]:
    """Queue one reminder per accepted assignment on events happening after the lead time."""
    as_of = as_of or date.today()
    target = (as_of + timedelta(days=settings.reminder_lead_days)).isoformat()

    rows = (
        db.query(AssignmentRecord, ScheduledEventRecord, TeamMemberRecord)
        .join(ScheduledEventRecord, AssignmentRecord.event_id == ScheduledEventRecord.id)
        .join(TeamMemberRecord, AssignmentRecord.team_member_id == TeamMemberRecord.id)
        .filter(ScheduledEventRecord.date == target)
        .filter(AssignmentRecord.status == "accepted")
        .all()
    )

    queued = []
    seen: set[tuple[str, str]] = set()
    for _, event_row, member_row in rows:
        key = (event_row.id, member_row.id)
        if key in seen:
            continue
        seen.add(key)
        already = (
            db.query(NotificationRecord.id)
            .filter(
                NotificationRecord.kind == "reminder",
                NotificationRecord.event_id == event_row.id,
                NotificationRecord.team_member_id == member_row.id,
            )
            .first()
        )
        if already:
            continue
        event = record_to_event(event_row)
        assignment = next(
            a for a in event.assignments
            if a.team_member_id == member_row.id and a.status == "accepted"
        )
        queued.append(queue_notification(db, "reminder", event, assignment, record_to_member(member_row)))
    db.commit()
    logger.info("Queued %d reminders for events on %s", len(queued), target)
    return [record_to_command(r) for r in queued]


def dispatch_pending(
    db: Session,
    dispatcher: NotificationDispatcher,
    ids: list[str] | None = None,
) -> tuple[int, int]:
    """Deliver pending outbox rows (all of them, or only ``ids``). Returns (sent, failed)."""
    query = db.query(NotificationRecord).filter(NotificationRecord.status == "pending")
    if ids is not None:
        query = query.filter(NotificationRecord.id.in_(ids))
    pending = query.order_by(NotificationRecord.created_at).all()
    sent = failed = 0
    for record in pending:
        record.attempts += 1
        try:
            delivered = dispatcher.deliver(record.recipient, record.message)
            error = None if delivered else "Dispatcher reported failure"
        except Exception as exc:
            # Transport errors belong to the provider; record them on the row.
            logger.exception("Delivering notification %s failed", record.id)
            delivered, error = False, str(exc)
        if delivered:
            record.status = "sent"
            record.sent_at = _now()
            record.last_error = None
            sent += 1
        else:
            record.status = "failed"
            record.last_error = error
            failed += 1
        db.commit()
    return sent, failed


def list_notifications(
    db: Session,
    status: str | None = None,
    ids: list[str] | None = None,
) -> list[NotificationCommand]:
    query = db.query(NotificationRecord)
    if status:
        query = query.filter(NotificationRecord.status == status)
    if ids is not None:
        query = query.filter(NotificationRecord.id.in_(ids))
    return [record_to_command(r) for r in query.order_by(NotificationRecord.created_at).all()]


def retry_failed(db: Session) -> int:
    """Put failed rows back in the queue for the next dispatch."""
    failed = db.query(NotificationRecord).filter(NotificationRecord.status == "failed").all()
    for record in failed:
        record.status = "pending"
    db.commit()
    return len(failed)
