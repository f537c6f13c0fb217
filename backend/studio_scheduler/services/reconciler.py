"""Required-vs-actual staffing for a scheduled event."""
from studio_scheduler.schemas.event import AssignmentCounts, ScheduledEvent

FULLY_ASSIGNED = "Fully Assigned"
PENDING_RESPONSES = "Pending Responses"
NEEDS_ASSIGNMENT = "Needs Assignment"


def compute_counts(event: ScheduledEvent) -> AssignmentCounts:
    """
    Tally photographer and videographer assignments by status.

    Declined assignments still count toward the totals (the slot was claimed)
    but never toward accepted or pending. Other roles are not counted.
    """
    counts = AssignmentCounts()
    for assignment in event.assignments:
        if assignment.role == "photographer":
            counts.total_photographers += 1
            if assignment.status == "accepted":
                counts.accepted_photographers += 1
            elif assignment.status == "pending":
                counts.pending_photographers += 1
        elif assignment.role == "videographer":
            counts.total_videographers += 1
            if assignment.status == "accepted":
                counts.accepted_videographers += 1
            elif assignment.status == "pending":
                counts.pending_videographers += 1
    return counts


def fulfillment_status(event: ScheduledEvent, counts: AssignmentCounts | None = None) -> str:
    counts = counts or compute_counts(event)
    if (
        counts.total_photographers == event.photographers_count
        and counts.total_videographers == event.videographers_count
    ):
        return FULLY_ASSIGNED
    if counts.pending_photographers + counts.pending_videographers > 0:
        return PENDING_RESPONSES
    return NEEDS_ASSIGNMENT


def staffing_gaps(event: ScheduledEvent, counts: AssignmentCounts | None = None) -> dict[str, int]:
    """Required minus assigned per role; negative means more people than asked for."""
    counts = counts or compute_counts(event)
    return {
        "photographer": event.photographers_count - counts.total_photographers,
        "videographer": event.videographers_count - counts.total_videographers,
    }


def is_over_assigned(event: ScheduledEvent, counts: AssignmentCounts | None = None) -> bool:
    return any(gap < 0 for gap in staffing_gaps(event, counts).values())
