import logging
import uuid

from ..config import settings
from ..errors import BookingConflictError
from ..models import Appointment
from ..schemas import BookingRequest, PractitionerRecord, Schedule
from .availability import SLOT_TEMPLATE
from .directory import BookingStore, PractitionerDirectory

logger = logging.getLogger(__name__)

SCHEDULED = "Scheduled"


def commit_booking(
    bookings: BookingStore, request: BookingRequest, recheck: bool | None = None
) -> Appointment:
    """Write a new appointment for a slot the caller already saw as free.

    The slot is not re-read unless ``recheck`` (or the ``recheck_slot_on_commit``
    setting) is on, so two concurrent bookings for the same slot can both land.
    """
    if request.time not in SLOT_TEMPLATE:
        raise ValueError(f"Unknown time slot {request.time!r}")

    if settings.recheck_slot_on_commit if recheck is None else recheck:
        booked = bookings.booked_labels(request.practitioner_id, request.date)
        if request.time in booked:
            raise BookingConflictError("Slot already booked")

    appointment = Appointment(
        id=str(uuid.uuid4()),
        patient_id=request.patient_id,
        practitioner_id=request.practitioner_id,
        date=request.date,
        time=request.time,
        reason=request.reason,
        status=SCHEDULED,
    )
    appointment = bookings.create(appointment)
    logger.info(
        "appointment_booked id=%s practitioner_id=%s date=%s time=%s",
        appointment.id,
        appointment.practitioner_id,
        appointment.date,
        appointment.time,
    )
    return appointment


def set_schedule(
    directory: PractitionerDirectory, practitioner_id: str, schedule: Schedule
) -> PractitionerRecord:
    unknown = {
        label
        for labels in schedule.leave_slots.values()
        for label in labels
        if label not in SLOT_TEMPLATE
    }
    if unknown:
        raise ValueError(f"Unknown time slots: {', '.join(sorted(unknown))}")
    return directory.set_schedule(practitioner_id, schedule)
