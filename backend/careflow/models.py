import datetime as dt
import uuid

from sqlalchemy import JSON, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .db import Base


class Practitioner(Base):
    __tablename__ = "practitioners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    specialty: Mapped[str] = mapped_column(String(100), nullable=False)
    # ISO dates, and ISO date -> list of time labels.
    full_day_leaves: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    leave_slots: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    appointments = relationship("Appointment", back_populates="practitioner")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    patient_id: Mapped[str] = mapped_column(String(100), nullable=False)
    practitioner_id: Mapped[str] = mapped_column(ForeignKey("practitioners.id"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Scheduled")
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    practitioner = relationship("Practitioner", back_populates="appointments")
