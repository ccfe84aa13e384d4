import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_session
from ..errors import DirectoryError, PractitionerNotFoundError
from ..schemas import (
    AvailabilityOut,
    PractitionerMatchResponse,
    PractitionerRecord,
    Schedule,
    SpecialtyResolveRequest,
    SpecialtyResolveResponse,
)
from ..services.availability import resolve_availability
from ..services.directory import BookingStore, PractitionerDirectory
from ..services.matching import recommend_practitioners
from ..services.scheduler import set_schedule
from ..services.specialties import resolve_specialties

router = APIRouter()


@router.post("/specialties/resolve", response_model=SpecialtyResolveResponse)
def resolve(payload: SpecialtyResolveRequest) -> SpecialtyResolveResponse:
    return SpecialtyResolveResponse(
        specialties=resolve_specialties(payload.conditions, payload.specializations)
    )


@router.get("/practitioners", response_model=list[PractitionerRecord])
def list_practitioners(
    specialty: str | None = None, db: Session = Depends(get_session)
) -> list[PractitionerRecord]:
    try:
        return PractitionerDirectory(db).list_practitioners(specialty)
    except DirectoryError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc


@router.post("/practitioners/match", response_model=PractitionerMatchResponse)
def match(
    payload: SpecialtyResolveRequest, db: Session = Depends(get_session)
) -> PractitionerMatchResponse:
    directory = PractitionerDirectory(db)
    specialties, practitioners, error = recommend_practitioners(
        payload.conditions, directory.list_practitioners, payload.specializations
    )
    return PractitionerMatchResponse(
        specialties=specialties, practitioners=practitioners, error=error
    )


@router.put("/practitioners/{practitioner_id}/schedule", response_model=PractitionerRecord)
def update_schedule(
    practitioner_id: str, payload: Schedule, db: Session = Depends(get_session)
) -> PractitionerRecord:
    try:
        return set_schedule(PractitionerDirectory(db), practitioner_id, payload)
    except PractitionerNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DirectoryError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc


@router.get("/practitioners/{practitioner_id}/availability", response_model=AvailabilityOut)
def availability(
    practitioner_id: str,
    date: dt.date = Query(...),
    db: Session = Depends(get_session),
) -> AvailabilityOut:
    try:
        slots, error = resolve_availability(
            PractitionerDirectory(db), BookingStore(db), practitioner_id, date
        )
    except PractitionerNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return AvailabilityOut(practitioner_id=practitioner_id, date=date, slots=slots, error=error)
