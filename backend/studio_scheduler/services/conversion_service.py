"""
Turns approved estimates into scheduled production events.

Conversion is best-effort and idempotent: each (estimate, service-event) pair
becomes at most one ScheduledEvent, and a bad estimate or service-event is
logged and skipped without stopping the rest of the batch.
"""
import logging
import re
import uuid
from datetime import date

from pydantic import ValidationError

from studio_scheduler.config import settings
from studio_scheduler.exceptions import DataFormatError, StoreError
from studio_scheduler.schemas.estimate import NormalizedEstimate, ServiceEvent
from studio_scheduler.schemas.event import ScheduledEvent
from studio_scheduler.services.deliverables import build_deliverables
from studio_scheduler.services.estimate_source import (
    EstimateSource,
    normalize_estimate,
    parse_estimate_payload,
)
from studio_scheduler.services.event_store import EventStore

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Failures that only disqualify the unit being processed.
_UNIT_ERRORS = (DataFormatError, StoreError, ValidationError)


def parse_headcount(value: str | None, default: int) -> int:
    """Leading integer of a headcount field, ``default`` when there is none, never negative."""
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return max(0, int(match.group(1)))


def build_event(
    estimate: NormalizedEstimate,
    service: ServiceEvent,
    today: date | None = None,
) -> ScheduledEvent:
    today = today or date.today()
    if service.date:
        try:
            date.fromisoformat(service.date)
        except ValueError as exc:
            raise DataFormatError(f"Event date '{service.date}' is not an ISO date") from exc
    return ScheduledEvent(
        id=str(uuid.uuid4()),
        estimate_id=estimate.id,
        name=service.event,
        date=service.date or today.isoformat(),
        start_time=service.start_time or settings.default_start_time,
        end_time=service.end_time or settings.default_end_time,
        location=service.location or settings.default_location,
        client_name=estimate.client_name,
        client_phone=estimate.client_phone,
        client_email=estimate.client_email or None,
        guest_count=service.guests or "0",
        photographers_count=parse_headcount(service.photographers, 1),
        videographers_count=parse_headcount(service.videographers, 0),
        assignments=[],
        stage="pre-production",
        deliverables=build_deliverables(estimate.deliverables),
        estimate_package=estimate.package_name,
    )


def _convert_estimate(
    document: dict,
    store: EventStore,
    today: date | None,
) -> list[ScheduledEvent]:
    payload = parse_estimate_payload(document)
    if payload.id is None or not payload.id.strip():
        logger.debug("Skipping approved estimate without an id")
        return []

    estimate = normalize_estimate(payload)
    created = []
    for position, entry in enumerate(estimate.services):
        try:
            service = ServiceEvent.model_validate(entry)
            if not service.event:
                logger.warning(
                    "Estimate %s has a service without an event name at position %d, skipping",
                    estimate.id, position,
                )
                continue
            if store.exists(estimate.id, service.event):
                logger.debug("Event '%s' already exists for estimate %s", service.event, estimate.id)
                continue
            event = build_event(estimate, service, today)
            if not store.upsert(event):
                continue
        except _UNIT_ERRORS as exc:
            logger.error(
                "Could not convert service %d of estimate %s: %s",
                position, estimate.id, exc,
            )
            continue
        logger.info("Created event '%s' (%s) from estimate %s", event.name, event.id, estimate.id)
        created.append(event)
    return created


def convert_approved_estimates(
    source: EstimateSource,
    store: EventStore,
    today: date | None = None,
) -> list[ScheduledEvent]:
    """
    Materialize every approved service-event that has no ScheduledEvent yet.

    Returns only the events created by this call. Raises StoreError only when
    the estimate source itself cannot be read.
    """
    documents = source.get_approved()
    if not documents:
        logger.info("No approved estimates to convert")
        return []

    logger.info("Converting %d approved estimates", len(documents))
    created: list[ScheduledEvent] = []
    for document in documents:
        try:
            created.extend(_convert_estimate(document, store, today))
        except _UNIT_ERRORS as exc:
            logger.error("Skipping estimate %s: %s", document.get("id"), exc)
    logger.info("Created %d new events", len(created))
    return created
