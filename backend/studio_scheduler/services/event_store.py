"""
Persistence boundary for scheduled events.

The (estimate_id, name) pair is UNIQUE in the database. ``upsert`` relies on
that constraint rather than on a prior ``exists`` check, so two conversions
racing on the same estimate can never both insert.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studio_scheduler.exceptions import DataFormatError, NotFoundError, StoreError
from studio_scheduler.models.assignment import AssignmentRecord
from studio_scheduler.models.deliverable import DeliverableRecord
from studio_scheduler.models.scheduled_event import ScheduledEventRecord
from studio_scheduler.schemas.event import (
    STAGES,
    Deliverable,
    EventAssignment,
    ScheduledEvent,
)

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "estimate_id", "name", "date", "start_time", "end_time", "location",
    "client_name", "client_phone", "client_email", "guest_count",
    "photographers_count", "videographers_count", "stage", "notes",
    "client_requirements", "estimate_package",
)


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def record_to_event(record: ScheduledEventRecord) -> ScheduledEvent:
    return ScheduledEvent(
        id=record.id,
        estimate_id=record.estimate_id,
        name=record.name,
        date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        location=record.location,
        client_name=record.client_name,
        client_phone=record.client_phone,
        client_email=record.client_email,
        guest_count=record.guest_count,
        photographers_count=record.photographers_count,
        videographers_count=record.videographers_count,
        assignments=[
            EventAssignment(
                event_id=a.event_id,
                team_member_id=a.team_member_id,
                role=a.role,
                status=a.status,
                notes=a.notes,
                reporting_time=a.reporting_time,
            )
            for a in record.assignments
        ],
        stage=record.stage,
        deliverables=[
            Deliverable(
                id=d.id,
                type=d.type,
                status=d.status,
                description=d.description,
                assigned_to=d.assigned_to,
                delivery_date=d.delivery_date,
            )
            for d in record.deliverables
        ],
        notes=record.notes,
        client_requirements=record.client_requirements,
        estimate_package=record.estimate_package,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _deliverable_records(event: ScheduledEvent) -> list[DeliverableRecord]:
    return [
        DeliverableRecord(
            id=d.id,
            event_id=event.id,
            type=d.type,
            status=d.status,
            description=d.description,
            assigned_to=d.assigned_to,
            delivery_date=d.delivery_date,
            position=i,
        )
        for i, d in enumerate(event.deliverables)
    ]


def _assignment_records(event: ScheduledEvent, now: str) -> list[AssignmentRecord]:
    return [
        AssignmentRecord(
            id=str(uuid.uuid4()),
            event_id=event.id,
            team_member_id=a.team_member_id,
            role=a.role,
            status=a.status,
            position=i,
            notes=a.notes,
            reporting_time=a.reporting_time,
            assigned_at=now,
        )
        for i, a in enumerate(event.assignments)
    ]


class EventStore:
    def __init__(self, db: Session):
        self.db = db

    def exists(self, estimate_id: str, event_name: str) -> bool:
        try:
            found = (
                self.db.query(ScheduledEventRecord.id)
                .filter(
                    ScheduledEventRecord.estimate_id == estimate_id,
                    ScheduledEventRecord.name == event_name,
                )
                .first()
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Existence check failed: {exc}") from exc
        return found is not None

    def get_record(self, event_id: str) -> ScheduledEventRecord | None:
        try:
            return self.db.query(ScheduledEventRecord).filter(ScheduledEventRecord.id == event_id).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not load event {event_id}: {exc}") from exc

    def get(self, event_id: str) -> ScheduledEvent | None:
        record = self.get_record(event_id)
        return record_to_event(record) if record else None

    def list_events(self, stage: str | None = None) -> list[ScheduledEvent]:
        try:
            query = self.db.query(ScheduledEventRecord)
            if stage:
                query = query.filter(ScheduledEventRecord.stage == stage)
            records = query.order_by(ScheduledEventRecord.date.asc(), ScheduledEventRecord.start_time.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not list events: {exc}") from exc
        return [record_to_event(r) for r in records]

    def upsert(self, event: ScheduledEvent) -> bool:
        """
        Insert or update an event by id.

        Returns False when another event already holds the same
        (estimate_id, name) pair; the caller treats that as "already exists".
        """
        now = _now()
        record = self.get_record(event.id)
        if record is not None:
            for field in _SCALAR_FIELDS:
                setattr(record, field, getattr(event, field))
            record.updated_at = now
            record.deliverables = _deliverable_records(event)
            record.assignments = _assignment_records(event, now)
        else:
            record = ScheduledEventRecord(
                id=event.id,
                **{field: getattr(event, field) for field in _SCALAR_FIELDS},
                created_at=event.created_at or now,
                updated_at=now,
            )
            record.deliverables = _deliverable_records(event)
            record.assignments = _assignment_records(event, now)
            self.db.add(record)

        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if self._held_by_other(event):
                logger.info(
                    "Event '%s' for estimate %s was created concurrently, skipping",
                    event.name, event.estimate_id,
                )
                return False
            raise StoreError(f"Could not save event {event.id}: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Could not save event {event.id}: {exc}") from exc
        return True

    def _held_by_other(self, event: ScheduledEvent) -> bool:
        found = (
            self.db.query(ScheduledEventRecord.id)
            .filter(
                ScheduledEventRecord.estimate_id == event.estimate_id,
                ScheduledEventRecord.name == event.name,
            )
            .first()
        )
        return found is not None and found.id != event.id

    def update_stage(self, event_id: str, stage: str) -> ScheduledEvent:
        if stage not in STAGES:
            raise DataFormatError(f"Unknown stage '{stage}'")
        record = self.get_record(event_id)
        if record is None:
            raise NotFoundError("Event", event_id)
        record.stage = stage
        record.updated_at = _now()
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Could not update stage of {event_id}: {exc}") from exc
        self.db.refresh(record)
        return record_to_event(record)
