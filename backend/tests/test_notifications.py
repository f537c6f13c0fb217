from datetime import date

from studio_scheduler.config import settings
from studio_scheduler.schemas.event import EventAssignment, ScheduledEvent
from studio_scheduler.schemas.team import TeamMember, TeamMemberCreate
from studio_scheduler.services import assignment_service
from studio_scheduler.services.event_store import EventStore
from studio_scheduler.services.notification_service import (
    LoggingDispatcher,
    build_assignment_message,
    build_reminder_message,
    dispatch_pending,
    list_notifications,
    queue_reminders,
    recipient_for,
    retry_failed,
)
from studio_scheduler.services.team_service import create_member


class RecordingDispatcher(LoggingDispatcher):
    def __init__(self, result=True):
        self.result = result
        self.delivered = []

    def deliver(self, recipient, message):
        self.delivered.append((recipient, message))
        return self.result


class ExplodingDispatcher(LoggingDispatcher):
    def deliver(self, recipient, message):
        raise ConnectionError("provider timed out")


def _event(**extra):
    fields = dict(
        id="ev-1",
        estimate_id="est-1",
        name="Reception",
        date="2026-11-21",
        start_time="18:00",
        end_time="23:00",
        location="Palace Grounds",
        client_name="Asha Rao",
        guest_count="800",
    )
    fields.update(extra)
    return ScheduledEvent(**fields)


def _member(**extra):
    fields = dict(id="m1", name="Ravi", role="photographer", phone="+91 90000 00001")
    fields.update(extra)
    return TeamMember(**fields)


def _assignment(**extra):
    fields = dict(event_id="ev-1", team_member_id="m1", role="photographer")
    fields.update(extra)
    return EventAssignment(**fields)


class TestMessages:
    def test_assignment_message(self):
        message = build_assignment_message(_event(), _assignment(), _member())
        assert message.startswith("Hello Ravi,")
        assert "assigned as photographer" in message
        assert "Event: Reception" in message
        assert "Date: Saturday, 21 November 2026" in message
        assert "Time: 18:00 - 23:00" in message
        assert "Location: Palace Grounds" in message
        assert "Client: Asha Rao" in message
        assert "Client Requirements" not in message
        assert message.rstrip().endswith(settings.studio_name)

    def test_reporting_time_and_requirements(self):
        message = build_assignment_message(
            _event(client_requirements="Candid shots of grandparents"),
            _assignment(reporting_time="17:15"),
            _member(),
        )
        assert "Time: 17:15 - 23:00" in message
        assert "Client Requirements:\nCandid shots of grandparents" in message

    def test_reminder_message(self):
        message = build_reminder_message(_event(), _assignment(), _member())
        assert message.startswith("REMINDER: Reception on Saturday, 21 November 2026")
        assert "Reporting Time: 18:00" in message
        assert "Approximate Guest Count: 800" in message

    def test_whatsapp_preferred(self):
        assert recipient_for(_member()) == "+91 90000 00001"
        assert recipient_for(_member(whatsapp="+91 90000 00009")) == "+91 90000 00009"


class TestLoggingDispatcher:
    def test_delivers_to_recipient(self):
        assert LoggingDispatcher().deliver("+91 90000 00001", "hi") is True

    def test_no_recipient(self):
        assert LoggingDispatcher().deliver("", "hi") is False
        assert LoggingDispatcher().send_assignment(_event(), _assignment(), _member(phone="")) is False


class TestOutbox:
    def _assigned(self, db, when="2026-11-21"):
        EventStore(db).upsert(_event(date=when))
        member = create_member(db, TeamMemberCreate(name="Ravi", role="photographer", phone="+91 90000 00001"))
        assignment_service.assign(db, "ev-1", member.id, "photographer")
        return member

    def test_dispatch_marks_sent(self, db):
        self._assigned(db)
        dispatcher = RecordingDispatcher()
        assert dispatch_pending(db, dispatcher) == (1, 0)
        assert dispatcher.delivered[0][0] == "+91 90000 00001"

        sent = list_notifications(db, "sent")
        assert len(sent) == 1
        assert sent[0].attempts == 1
        assert sent[0].sent_at is not None
        assert dispatch_pending(db, dispatcher) == (0, 0)

    def test_failure_is_recorded_not_raised(self, db):
        self._assigned(db)
        assert dispatch_pending(db, ExplodingDispatcher()) == (0, 1)

        failed = list_notifications(db, "failed")
        assert failed[0].last_error == "provider timed out"
        # The assignment itself is untouched.
        assert EventStore(db).get("ev-1").assignments[0].status == "pending"

    def test_retry_failed(self, db):
        self._assigned(db)
        dispatch_pending(db, RecordingDispatcher(result=False))
        assert list_notifications(db, "failed")[0].last_error == "Dispatcher reported failure"

        assert retry_failed(db) == 1
        assert dispatch_pending(db, RecordingDispatcher()) == (1, 0)
        notice = list_notifications(db)[0]
        assert notice.status == "sent"
        assert notice.attempts == 2
        assert notice.last_error is None

    def test_dispatch_only_selected_ids(self, db):
        self._assigned(db)
        assert dispatch_pending(db, RecordingDispatcher(), ids=["other"]) == (0, 0)
        assert len(list_notifications(db, "pending")) == 1


class TestReminders:
    def test_reminders_for_accepted_crew_only(self, db):
        EventStore(db).upsert(_event(date="2026-11-21"))
        accepted = create_member(db, TeamMemberCreate(name="Ravi", role="photographer", phone="1"))
        pending = create_member(db, TeamMemberCreate(name="Meena", role="videographer", phone="2"))
        assignment_service.assign(db, "ev-1", accepted.id, "photographer")
        assignment_service.assign(db, "ev-1", pending.id, "videographer")
        assignment_service.update_status(db, "ev-1", accepted.id, "accepted")

        queued = queue_reminders(db, date(2026, 11, 20))
        assert len(queued) == 1
        assert queued[0].kind == "reminder"
        assert queued[0].team_member_id == accepted.id
        assert queued[0].message.startswith("REMINDER: Reception")

    def test_reminders_are_not_queued_twice(self, db):
        EventStore(db).upsert(_event(date="2026-11-21"))
        member = create_member(db, TeamMemberCreate(name="Ravi", role="photographer", phone="1"))
        assignment_service.assign(db, "ev-1", member.id, "photographer")
        assignment_service.update_status(db, "ev-1", member.id, "accepted")

        assert len(queue_reminders(db, date(2026, 11, 20))) == 1
        assert queue_reminders(db, date(2026, 11, 20)) == []

    def test_other_days_are_ignored(self, db):
        EventStore(db).upsert(_event(date="2026-11-25"))
        member = create_member(db, TeamMemberCreate(name="Ravi", role="photographer", phone="1"))
        assignment_service.assign(db, "ev-1", member.id, "photographer")
        assignment_service.update_status(db, "ev-1", member.id, "accepted")

        assert queue_reminders(db, date(2026, 11, 20)) == []
