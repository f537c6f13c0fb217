from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.exceptions import NotFoundError
from studio_scheduler.schemas.assignment import StaffingResponse
from studio_scheduler.schemas.event import (
    ConversionResponse,
    EventResponse,
    ScheduledEvent,
    Stage,
    StageUpdate,
)
from studio_scheduler.services.conversion_service import convert_approved_estimates
from studio_scheduler.services.estimate_source import SqlEstimateSource
from studio_scheduler.services.event_store import EventStore
from studio_scheduler.services.reconciler import (
    compute_counts,
    fulfillment_status,
    is_over_assigned,
    staffing_gaps,
)
from studio_scheduler.services.stage_projector import project_status

router = APIRouter(prefix="/events", tags=["events"])


def _event_to_response(event: ScheduledEvent, as_of: date | None = None) -> EventResponse:
    return EventResponse(
        **event.model_dump(),
        display_status=project_status(event, as_of),
        fulfillment_status=fulfillment_status(event),
    )


@router.post("/convert", response_model=ConversionResponse)
async def convert_estimates(db: Session = Depends(get_db)):
    created = convert_approved_estimates(SqlEstimateSource(db), EventStore(db))
    return ConversionResponse(created=created, total_created=len(created))


@router.get("", response_model=list[EventResponse])
async def list_events(
    stage: Stage | None = None,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    events = EventStore(db).list_events(stage)
    return [_event_to_response(e, as_of) for e in events]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, as_of: date | None = None, db: Session = Depends(get_db)):
    event = EventStore(db).get(event_id)
    if not event:
        raise NotFoundError("Event", event_id)
    return _event_to_response(event, as_of)


@router.put("/{event_id}/stage", response_model=EventResponse)
async def update_stage(event_id: str, req: StageUpdate, db: Session = Depends(get_db)):
    event = EventStore(db).update_stage(event_id, req.stage)
    return _event_to_response(event)


@router.get("/{event_id}/staffing", response_model=StaffingResponse)
async def event_staffing(event_id: str, db: Session = Depends(get_db)):
    event = EventStore(db).get(event_id)
    if not event:
        raise NotFoundError("Event", event_id)
    counts = compute_counts(event)
    gaps = staffing_gaps(event, counts)
    return StaffingResponse(
        event_id=event.id,
        photographers_required=event.photographers_count,
        videographers_required=event.videographers_count,
        counts=counts,
        status=fulfillment_status(event, counts),
        photographers_short=max(0, gaps["photographer"]),
        videographers_short=max(0, gaps["videographer"]),
        over_assigned=is_over_assigned(event, counts),
    )
