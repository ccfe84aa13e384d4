from __future__ import annotations

from datetime import date

import pytest

from careflow.errors import DirectoryError, PractitionerNotFoundError
from careflow.schemas import Schedule
from careflow.services.availability import SLOT_TEMPLATE, available_slots, resolve_availability
from helpers import practitioner

LEAVE_DAY = date(2025, 5, 15)
PARTIAL_DAY = date(2025, 5, 16)


class FakeDirectory:
    def __init__(self, *records):
        self.records = {record.id: record for record in records}

    def get(self, practitioner_id):
        if practitioner_id not in self.records:
            raise PractitionerNotFoundError(f"Practitioner {practitioner_id} not found")
        return self.records[practitioner_id]


class FakeBookings:
    def __init__(self, booked=None, error=None):
        self.booked = booked or {}
        self.error = error
        self.calls = 0

    def booked_labels(self, practitioner_id, day):
        self.calls += 1
        if self.error:
            raise self.error
        return set(self.booked.get((practitioner_id, day), ()))


def test_template_has_twelve_ordered_labels():
    assert len(SLOT_TEMPLATE) == 12
    assert SLOT_TEMPLATE[0] == "09:00 AM"
    assert SLOT_TEMPLATE[-1] == "05:30 PM"


def test_full_day_leave_yields_nothing():
    schedule = Schedule(full_day_leaves={LEAVE_DAY})

    assert available_slots(schedule, LEAVE_DAY, set()) == []


@pytest.mark.parametrize(
    "booked", [set(), {"09:00 AM"}, set(SLOT_TEMPLATE), {"not-a-slot"}]
)
def test_full_day_leave_dominates_other_inputs(booked):
    schedule = Schedule(
        full_day_leaves={LEAVE_DAY},
        leave_slots={LEAVE_DAY: {"10:00 AM"}},
    )

    assert available_slots(schedule, LEAVE_DAY, booked) == []


def test_leave_slots_and_bookings_are_removed_in_template_order():
    schedule = Schedule(leave_slots={PARTIAL_DAY: {"09:00 AM"}})

    slots = available_slots(schedule, PARTIAL_DAY, {"10:00 AM"})

    assert len(slots) == 10
    assert slots == [label for label in SLOT_TEMPLATE if label not in {"09:00 AM", "10:00 AM"}]


def test_day_without_leave_or_bookings_is_fully_open():
    assert available_slots(Schedule(), PARTIAL_DAY) == list(SLOT_TEMPLATE)


def test_leave_on_other_days_leaves_template_unchanged():
    schedule = Schedule(leave_slots={LEAVE_DAY: {"09:00 AM", "09:30 AM"}})

    assert available_slots(schedule, PARTIAL_DAY) == list(SLOT_TEMPLATE)


def test_repeated_calls_return_identical_results():
    schedule = Schedule(leave_slots={PARTIAL_DAY: {"03:00 PM", "11:00 AM"}})
    booked = {"04:30 PM"}

    first = available_slots(schedule, PARTIAL_DAY, booked)
    second = available_slots(schedule, PARTIAL_DAY, booked)

    assert first == second
    assert set(first) <= set(SLOT_TEMPLATE)


def test_document_store_map_encoding_is_accepted():
    schedule = Schedule.model_validate(
        {
            "fullDayLeaves": {"2025-05-15": 1},
            "leaveTimeSlots": {"2025-05-16": {"09:00 AM": 1, "09:30 AM": 1}},
        }
    )

    assert schedule.full_day_leaves == {LEAVE_DAY}
    assert schedule.leave_slots == {PARTIAL_DAY: {"09:00 AM", "09:30 AM"}}


def test_resolve_availability_reads_bookings():
    record = practitioner(
        "Cardiology",
        practitioner_id="doc-1",
        schedule=Schedule(leave_slots={PARTIAL_DAY: {"09:00 AM"}}),
    )
    bookings = FakeBookings({("doc-1", PARTIAL_DAY): {"10:00 AM"}})

    slots, error = resolve_availability(FakeDirectory(record), bookings, "doc-1", PARTIAL_DAY)

    assert error is None
    assert len(slots) == 10


def test_resolve_availability_skips_bookings_on_leave_days():
    record = practitioner(
        "Cardiology", practitioner_id="doc-1", schedule=Schedule(full_day_leaves={LEAVE_DAY})
    )
    bookings = FakeBookings()

    assert resolve_availability(FakeDirectory(record), bookings, "doc-1", LEAVE_DAY) == ([], None)
    assert bookings.calls == 0


def test_store_failure_degrades_to_empty_slots():
    record = practitioner("Cardiology", practitioner_id="doc-1")
    bookings = FakeBookings(error=DirectoryError("Failed to fetch appointments: timeout"))

    slots, error = resolve_availability(FakeDirectory(record), bookings, "doc-1", PARTIAL_DAY)

    assert slots == []
    assert error == "Failed to fetch appointments: timeout"


def test_unknown_practitioner_is_raised():
    with pytest.raises(PractitionerNotFoundError):
        resolve_availability(FakeDirectory(), FakeBookings(), "missing", PARTIAL_DAY)
