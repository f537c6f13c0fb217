from datetime import date

from studio_scheduler.schemas.event import ScheduledEvent

UPCOMING = "Upcoming"
IN_PROGRESS = "In Progress"
PENDING_COMPLETION = "Pending Completion"
COMPLETED = "Completed"


def project_status(event: ScheduledEvent, as_of: date | None = None) -> str:
    """
    Display status from the event's date and stored stage. Never touches ``event.stage``.

    An event is past only once ``as_of`` is strictly after its date, so on the
    day itself it is still Upcoming / In Progress. A past event still sitting in
    pre-production is reported as Pending Completion.
    """
    as_of = as_of or date.today()
    is_past = as_of > date.fromisoformat(event.date)
    in_pre_production = event.stage == "pre-production"
    if is_past:
        return PENDING_COMPLETION if in_pre_production else COMPLETED
    return UPCOMING if in_pre_production else IN_PROGRESS
