import logging
from datetime import date
from typing import Iterable

from ..errors import DirectoryError, PractitionerNotFoundError
from ..schemas import Schedule

logger = logging.getLogger(__name__)

SLOT_TEMPLATE: tuple[str, ...] = (
    "09:00 AM",
    "09:30 AM",
    "10:00 AM",
    "10:30 AM",
    "11:00 AM",
    "11:30 AM",
    "03:00 PM",
    "03:30 PM",
    "04:00 PM",
    "04:30 PM",
    "05:00 PM",
    "05:30 PM",
)


def available_slots(
    schedule: Schedule,
    day: date,
    booked: Iterable[str] = (),
    template: Iterable[str] = SLOT_TEMPLATE,
) -> list[str]:
    """Template labels still bookable on ``day``, in template order."""
    if day in schedule.full_day_leaves:
        return []
    blocked = set(schedule.leave_slots.get(day, ())) | set(booked)
    return [label for label in template if label not in blocked]


def resolve_availability(
    directory, bookings, practitioner_id: str, day: date
) -> tuple[list[str], str | None]:
    try:
        practitioner = directory.get(practitioner_id)
        if day in practitioner.schedule.full_day_leaves:
            logger.info(
                "availability practitioner_id=%s date=%s full_day_leave", practitioner_id, day
            )
            return [], None
        booked = bookings.booked_labels(practitioner_id, day)
    except PractitionerNotFoundError:
        raise
    except DirectoryError as exc:
        logger.warning(
            "availability_read_failed practitioner_id=%s date=%s error=%s",
            practitioner_id,
            day,
            exc.message,
        )
        return [], exc.message
    slots = available_slots(practitioner.schedule, day, booked)
    logger.info(
        "availability practitioner_id=%s date=%s booked=%s free=%s",
        practitioner_id,
        day,
        len(booked),
        len(slots),
    )
    return slots, None
