import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_session
from ..errors import BookingConflictError, BookingWriteError, DirectoryError, PractitionerNotFoundError
from ..schemas import AppointmentOut, BookingRequest
from ..services.directory import BookingStore, PractitionerDirectory
from ..services.scheduler import commit_booking

router = APIRouter()


@router.post("/appointments/book", response_model=AppointmentOut, status_code=201)
def book_appointment(
    payload: BookingRequest, db: Session = Depends(get_session)
) -> AppointmentOut:
    try:
        PractitionerDirectory(db).get(payload.practitioner_id)
    except PractitionerNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except DirectoryError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc

    try:
        return commit_booking(BookingStore(db), payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except BookingConflictError as exc:
        raise HTTPException(status_code=409, detail=exc.message) from exc
    except (BookingWriteError, DirectoryError) as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc


@router.get("/appointments", response_model=list[AppointmentOut])
def list_appointments(
    practitioner_id: str, date: dt.date, db: Session = Depends(get_session)
) -> list[AppointmentOut]:
    try:
        return BookingStore(db).list_for(practitioner_id, date)
    except DirectoryError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc
