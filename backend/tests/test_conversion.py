from datetime import date

import pytest

from studio_scheduler.exceptions import StoreError
from studio_scheduler.services.conversion_service import (
    convert_approved_estimates,
    parse_headcount,
)
from studio_scheduler.services.event_store import EventStore

TODAY = date(2026, 10, 19)


class StaticSource:
    def __init__(self, documents):
        self.documents = documents

    def get_approved(self):
        return self.documents


class BrokenSource:
    def get_approved(self):
        raise StoreError("estimates unavailable")


def _estimate(estimate_id="est-1", services=None, **extra):
    doc = {
        "id": estimate_id,
        "status": "approved",
        "clientName": "Asha Rao",
        "clientPhone": "+91 98450 00000",
        "clientEmail": "asha@example.com",
        "services": services if services is not None else [
            {
                "event": "Haldi",
                "date": "2026-11-20",
                "startTime": "08:00",
                "endTime": "12:00",
                "location": "Jayanagar",
                "guests": 150,
                "photographers": "2",
                "cinematographers": "1",
            },
            {
                "event": "Reception",
                "date": "2026-11-21",
                "startTime": "19:00",
                "endTime": "23:00",
                "location": "Palace Grounds",
                "guests": "800",
                "photographers": 3,
                "cinematographers": 2,
            },
        ],
        "deliverables": ["Wedding film 8-12 mins", "35 Sheet Album"],
    }
    doc.update(extra)
    return doc


def _convert(db, documents):
    return convert_approved_estimates(StaticSource(documents), EventStore(db), TODAY)


class TestParseHeadcount:
    def test_leading_integer(self):
        assert parse_headcount("3", 1) == 3
        assert parse_headcount(" 4 photographers", 1) == 4

    def test_unreadable_uses_default(self):
        assert parse_headcount("two", 1) == 1
        assert parse_headcount("", 0) == 0
        assert parse_headcount(None, 1) == 1

    def test_zero_is_a_number(self):
        assert parse_headcount("0", 1) == 0

    def test_never_negative(self):
        assert parse_headcount("-2", 1) == 0


class TestConversion:
    def test_one_event_per_service(self, db):
        created = _convert(db, [_estimate()])
        assert [e.name for e in created] == ["Haldi", "Reception"]

        haldi = created[0]
        assert haldi.estimate_id == "est-1"
        assert haldi.date == "2026-11-20"
        assert haldi.start_time == "08:00"
        assert haldi.end_time == "12:00"
        assert haldi.location == "Jayanagar"
        assert haldi.guest_count == "150"
        assert haldi.photographers_count == 2
        assert haldi.videographers_count == 1
        assert haldi.client_name == "Asha Rao"
        assert haldi.client_email == "asha@example.com"
        assert haldi.stage == "pre-production"
        assert haldi.assignments == []
        assert [d.type for d in haldi.deliverables] == ["videos", "album"]

        stored = EventStore(db).list_events()
        assert len(stored) == 2
        assert stored[1].photographers_count == 3

    def test_second_run_creates_nothing(self, db):
        assert len(_convert(db, [_estimate()])) == 2
        assert _convert(db, [_estimate()]) == []
        assert len(EventStore(db).list_events()) == 2

    def test_new_service_on_known_estimate(self, db):
        _convert(db, [_estimate()])
        doc = _estimate()
        doc["services"].append({"event": "Sangeet", "date": "2026-11-19"})
        created = _convert(db, [doc])
        assert [e.name for e in created] == ["Sangeet"]

    def test_blank_fields_get_defaults(self, db):
        created = _convert(db, [_estimate(services=[{"event": "Engagement"}], deliverables=[])])
        event = created[0]
        assert event.date == "2026-10-19"
        assert event.start_time == "09:00"
        assert event.end_time == "17:00"
        assert event.location == "To be determined"
        assert event.guest_count == "0"
        assert event.photographers_count == 1
        assert event.videographers_count == 0
        assert [d.type for d in event.deliverables] == ["photos"]

    def test_videographers_key_is_accepted(self, db):
        created = _convert(db, [_estimate(services=[{"event": "Mehendi", "videographers": "2"}])])
        assert created[0].videographers_count == 2

    def test_numeric_estimate_id(self, db):
        created = _convert(db, [_estimate(estimate_id=42)])
        assert created[0].estimate_id == "42"

    def test_estimate_without_id_is_skipped(self, db):
        doc = _estimate()
        del doc["id"]
        assert _convert(db, [doc, _estimate("est-2")])[0].estimate_id == "est-2"

    def test_service_without_name_is_skipped(self, db):
        created = _convert(db, [_estimate(services=[{"date": "2026-11-20"}, {"event": "Haldi"}])])
        assert [e.name for e in created] == ["Haldi"]

    def test_bad_date_only_skips_that_service(self, db):
        created = _convert(db, [_estimate(services=[
            {"event": "Haldi", "date": "20/11/2026"},
            {"event": "Reception", "date": "2026-11-21"},
        ])])
        assert [e.name for e in created] == ["Reception"]

    def test_null_service_entry_only_skips_itself(self, db):
        created = _convert(db, [_estimate(services=[None, {"event": "Reception"}])])
        assert [e.name for e in created] == ["Reception"]

    def test_bad_field_only_skips_that_service(self, db):
        created = _convert(db, [_estimate(services=[
            {"event": "Haldi", "startTime": 900},
            {"event": "Reception"},
        ])])
        assert [e.name for e in created] == ["Reception"]

    def test_null_deliverables(self, db):
        created = _convert(db, [_estimate(services=[{"event": "Reception"}], deliverables=None)])
        assert [e.name for e in created] == ["Reception"]
        assert [d.type for d in created[0].deliverables] == ["photos"]

    def test_null_services(self, db):
        doc = _estimate()
        doc["services"] = None
        created = _convert(db, [doc, _estimate("est-2")])
        assert {e.estimate_id for e in created} == {"est-2"}

    def test_non_text_deliverable_lines_are_dropped(self, db):
        created = _convert(db, [_estimate(
            services=[{"event": "Reception"}],
            deliverables=["35 Sheet Album", 12, None, "Wedding film"],
        )])
        assert [d.description for d in created[0].deliverables] == ["35 Sheet Album", "Wedding film"]

    def test_malformed_estimate_does_not_stop_batch(self, db):
        bad = {"id": "est-bad", "status": "approved", "services": "not a list"}
        created = _convert(db, [bad, _estimate("est-2")])
        assert {e.estimate_id for e in created} == {"est-2"}

    def test_store_failure_skips_one_event(self, db, monkeypatch):
        store = EventStore(db)
        original = store.upsert

        def flaky_upsert(event):
            if event.name == "Haldi":
                raise StoreError("disk full")
            return original(event)

        monkeypatch.setattr(store, "upsert", flaky_upsert)
        created = convert_approved_estimates(StaticSource([_estimate()]), store, TODAY)
        assert [e.name for e in created] == ["Reception"]

    def test_concurrent_conversion_creates_no_duplicates(self, db, test_db, monkeypatch):
        _convert(db, [_estimate()])

        # A second worker whose existence check ran before the first one committed.
        other = test_db()
        store = EventStore(other)
        monkeypatch.setattr(store, "exists", lambda estimate_id, name: False)
        created = convert_approved_estimates(StaticSource([_estimate()]), store, TODAY)
        other.close()

        assert created == []
        assert len(EventStore(db).list_events()) == 2

    def test_source_failure_propagates(self, db):
        with pytest.raises(StoreError):
            convert_approved_estimates(BrokenSource(), EventStore(db), TODAY)

    def test_nothing_approved(self, db):
        assert _convert(db, []) == []


class TestPackagedEstimates:
    def _packaged(self, **extra):
        return _estimate(
            services=[],
            packages=[
                {
                    "name": "Silver",
                    "services": [{"event": "Wedding", "date": "2026-12-01", "photographers": "1"}],
                    "deliverables": ["Edited photos"],
                },
                {
                    "services": [
                        {"event": "Wedding", "date": "2026-12-01", "photographers": "2", "cinematographers": "2"},
                        {"event": "Reception", "date": "2026-12-02"},
                    ],
                    "deliverables": [],
                },
            ],
            **extra,
        )

    def test_selected_package_services(self, db):
        created = _convert(db, [self._packaged(selectedPackageIndex=1)])
        assert [e.name for e in created] == ["Wedding", "Reception"]
        assert created[0].photographers_count == 2
        assert created[0].videographers_count == 2
        assert created[0].estimate_package == "Option 2"

    def test_package_without_deliverables_uses_estimate_list(self, db):
        created = _convert(db, [self._packaged(selectedPackageIndex=1)])
        assert [d.type for d in created[0].deliverables] == ["videos", "album"]

    def test_first_package_by_default(self, db):
        created = _convert(db, [self._packaged()])
        assert [e.name for e in created] == ["Wedding"]
        assert created[0].estimate_package == "Silver"
        assert [d.type for d in created[0].deliverables] == ["photos"]

    def test_out_of_range_selection_uses_flat_services(self, db):
        doc = self._packaged(selectedPackageIndex=3)
        doc["services"] = [{"event": "Legacy", "date": "2026-12-05"}]
        created = _convert(db, [doc])
        assert [e.name for e in created] == ["Legacy"]
        assert created[0].estimate_package is None
        assert [d.type for d in created[0].deliverables] == ["videos", "album"]

    def test_out_of_range_selection_without_flat_services(self, db):
        created = _convert(db, [self._packaged(selectedPackageIndex=3), _estimate("est-2")])
        assert {e.estimate_id for e in created} == {"est-2"}

    def test_null_package_services(self, db):
        doc = self._packaged()
        doc["packages"][0]["services"] = None
        assert _convert(db, [doc]) == []

    def test_malformed_unselected_package_is_ignored(self, db):
        doc = self._packaged(selectedPackageIndex=1)
        doc["packages"][0] = None
        assert [e.name for e in _convert(db, [doc])] == ["Wedding", "Reception"]
