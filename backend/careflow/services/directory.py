import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import BookingWriteError, DirectoryError, PractitionerNotFoundError
from ..models import Appointment, Practitioner
from ..schemas import PractitionerRecord, Schedule

logger = logging.getLogger(__name__)


def to_record(practitioner: Practitioner) -> PractitionerRecord:
    return PractitionerRecord(
        id=practitioner.id,
        name=practitioner.name,
        specialty=practitioner.specialty,
        schedule=Schedule(
            full_day_leaves=practitioner.full_day_leaves or [],
            leave_slots=practitioner.leave_slots or {},
        ),
    )


def _schedule_columns(schedule: Schedule) -> dict:
    return {
        "full_day_leaves": sorted(day.isoformat() for day in schedule.full_day_leaves),
        "leave_slots": {
            day.isoformat(): sorted(labels)
            for day, labels in sorted(schedule.leave_slots.items())
            if labels
        },
    }


class PractitionerDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_practitioners(self, specialty: str | None = None) -> list[PractitionerRecord]:
        stmt = select(Practitioner)
        if specialty:
            stmt = stmt.where(Practitioner.specialty == specialty)
        stmt = stmt.order_by(Practitioner.name, Practitioner.id)
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Failed to fetch practitioners: {exc}") from exc
        return [to_record(row) for row in rows]

    def get(self, practitioner_id: str) -> PractitionerRecord:
        try:
            practitioner = self.db.get(Practitioner, practitioner_id)
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Failed to fetch practitioner: {exc}") from exc
        if practitioner is None:
            raise PractitionerNotFoundError(f"Practitioner {practitioner_id} not found")
        return to_record(practitioner)

    def set_schedule(self, practitioner_id: str, schedule: Schedule) -> PractitionerRecord:
        try:
            practitioner = self.db.get(Practitioner, practitioner_id)
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Failed to fetch practitioner: {exc}") from exc
        if practitioner is None:
            raise PractitionerNotFoundError(f"Practitioner {practitioner_id} not found")
        for column, value in _schedule_columns(schedule).items():
            setattr(practitioner, column, value)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(f"Failed to update schedule: {exc}") from exc
        logger.info(
            "schedule_updated practitioner_id=%s full_day_leaves=%s leave_days=%s",
            practitioner_id,
            len(schedule.full_day_leaves),
            len(schedule.leave_slots),
        )
        return to_record(practitioner)


class BookingStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_for(self, practitioner_id: str, day: date) -> list[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.practitioner_id == practitioner_id, Appointment.date == day)
            .order_by(Appointment.created_at)
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Failed to fetch appointments: {exc}") from exc

    def booked_labels(self, practitioner_id: str, day: date) -> set[str]:
        return {appointment.time for appointment in self.list_for(practitioner_id, day)}

    def create(self, appointment: Appointment) -> Appointment:
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise BookingWriteError(f"Failed to book appointment: {exc}") from exc
        return appointment
