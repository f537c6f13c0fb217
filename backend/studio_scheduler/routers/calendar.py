from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.exceptions import NotFoundError
from studio_scheduler.schemas.event import Stage
from studio_scheduler.services.calendar_service import generate_events_ics
from studio_scheduler.services.event_store import EventStore
from studio_scheduler.services.pdf_service import generate_call_sheet_pdf
from studio_scheduler.services.team_service import get_member

router = APIRouter(tags=["calendar"])


@router.get("/events/{event_id}/calendar")
async def event_calendar(event_id: str, db: Session = Depends(get_db)):
    event = EventStore(db).get(event_id)
    if not event:
        raise NotFoundError("Event", event_id)

    return Response(
        content=generate_events_ics([event]),
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="event_{event_id[:8]}.ics"'},
    )


@router.get("/calendar/schedule")
async def schedule_calendar(stage: Stage | None = None, db: Session = Depends(get_db)):
    events = [e for e in EventStore(db).list_events(stage) if e.stage != "completed"]
    if not events:
        raise HTTPException(status_code=404, detail="No scheduled events")

    return Response(
        content=generate_events_ics(events),
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="production_schedule.ics"'},
    )


@router.get("/events/{event_id}/call-sheet")
async def call_sheet(event_id: str, db: Session = Depends(get_db)):
    event = EventStore(db).get(event_id)
    if not event:
        raise NotFoundError("Event", event_id)

    members = {}
    for assignment in event.assignments:
        if assignment.team_member_id not in members:
            members[assignment.team_member_id] = get_member(db, assignment.team_member_id)

    return Response(
        content=generate_call_sheet_pdf(event, members),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="call_sheet_{event_id[:8]}.pdf"'},
    )
