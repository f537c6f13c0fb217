from datetime import datetime, timedelta
from icalendar import Calendar, Event, Alarm

from studio_scheduler.exceptions import DataFormatError
from studio_scheduler.schemas.event import ScheduledEvent


def _event_window(event: ScheduledEvent) -> tuple[datetime, datetime]:
    try:
        start = datetime.strptime(f"{event.date} {event.start_time}", "%Y-%m-%d %H:%M")
        end = datetime.strptime(f"{event.date} {event.end_time}", "%Y-%m-%d %H:%M")
    except ValueError as exc:
        raise DataFormatError(f"Event {event.id} has an unreadable date or time") from exc
    if end <= start:
        # Overnight shoots end on the following day.
        end += timedelta(days=1)
    return start, end


def build_event_component(event: ScheduledEvent) -> Event:
    component = Event()
    component.add("uid", f"{event.id}@studio-scheduler")
    summary = event.name
    if event.client_name:
        summary += f" ({event.client_name})"
    component.add("summary", summary)

    start, end = _event_window(event)
    component.add("dtstart", start)
    component.add("dtend", end)
    component.add("location", event.location)

    description_parts = [f"Stage: {event.stage}"]
    if event.estimate_package:
        description_parts.append(f"Package: {event.estimate_package}")
    description_parts.append(
        f"Crew required: {event.photographers_count} photographers, "
        f"{event.videographers_count} videographers"
    )
    if event.client_requirements:
        description_parts.append(f"Requirements: {event.client_requirements}")
    component.add("description", "\n".join(description_parts))

    # Reminders: day before, two hours before call time
    for delta in [timedelta(days=1), timedelta(hours=2)]:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", -delta)
        alarm.add("description", f"Shoot reminder: {event.name}")
        component.add_component(alarm)
    return component


def generate_events_ics(events: list[ScheduledEvent]) -> bytes:
    cal = Calendar()
    cal.add("prodid", "-//StudioScheduler//EN")
    cal.add("version", "2.0")
    for event in events:
        cal.add_component(build_event_component(event))
    return cal.to_ical()
