from datetime import date

from studio_scheduler.schemas.event import ScheduledEvent
from studio_scheduler.services.stage_projector import (
    COMPLETED,
    IN_PROGRESS,
    PENDING_COMPLETION,
    UPCOMING,
    project_status,
)


def _event(stage="pre-production", on="2026-11-21"):
    return ScheduledEvent(
        id="ev-1",
        estimate_id="est-1",
        name="Reception",
        date=on,
        start_time="18:00",
        end_time="23:00",
        location="Palace Grounds",
        stage=stage,
    )


class TestProjectStatus:
    def test_future_pre_production_is_upcoming(self):
        assert project_status(_event(), date(2026, 11, 1)) == UPCOMING

    def test_future_production_is_in_progress(self):
        assert project_status(_event("production"), date(2026, 11, 1)) == IN_PROGRESS

    def test_event_day_is_not_past(self):
        assert project_status(_event(), date(2026, 11, 21)) == UPCOMING
        assert project_status(_event("post-production"), date(2026, 11, 21)) == IN_PROGRESS

    def test_day_after_pre_production_needs_completion(self):
        assert project_status(_event(), date(2026, 11, 22)) == PENDING_COMPLETION

    def test_day_after_other_stages_is_completed(self):
        assert project_status(_event("production"), date(2026, 11, 22)) == COMPLETED
        assert project_status(_event("completed"), date(2026, 11, 22)) == COMPLETED

    def test_projection_leaves_stage_alone(self):
        event = _event()
        project_status(event, date(2027, 1, 1))
        assert event.stage == "pre-production"
