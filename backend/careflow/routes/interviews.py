from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from ..db import get_session
from ..errors import GenerationError, InterviewStateError, ParseError
from ..schemas import AnswerRequest, InterviewCreate, InterviewOut, Symptoms
from ..services import interview as flow
from ..services.directory import PractitionerDirectory
from ..services.interview import InterviewRegistry, InterviewSession, InterviewState
from ..services.llm import TextGenerator, get_generator

router = APIRouter()


def get_registry(request: Request) -> InterviewRegistry:
    return request.app.state.interviews


def _load_session(session_id: str, registry: InterviewRegistry) -> InterviewSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return session


def _out(session: InterviewSession) -> InterviewOut:
    return InterviewOut(
        id=session.id,
        patient_id=session.patient_id,
        state=session.state.value,
        symptoms=session.symptoms,
        questions=session.questions,
        current_index=session.current_index,
        current_question=session.current_question,
        report=session.report,
        error=session.error,
        raw_response=session.raw_response,
        candidate_specialties=session.candidate_specialties,
        recommended_practitioners=session.recommended_practitioners,
        directory_error=session.directory_error,
    )


def _state_conflict(exc: InterviewStateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)


def _upstream_failure(exc: GenerationError | ParseError) -> HTTPException:
    detail = {"message": exc.message}
    if isinstance(exc, ParseError):
        detail["raw_text"] = exc.raw_text
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


async def _finalize(
    session: InterviewSession, generator: TextGenerator, db: Session
) -> None:
    directory = PractitionerDirectory(db)
    try:
        await flow.finalize(session, generator, directory.list_practitioners)
    except (GenerationError, ParseError) as exc:
        raise _upstream_failure(exc) from exc


@router.post("/interviews", response_model=InterviewOut, status_code=201)
def create_interview(
    payload: InterviewCreate, registry: InterviewRegistry = Depends(get_registry)
) -> InterviewOut:
    return _out(registry.create(payload.patient_id))


@router.get("/interviews/{session_id}", response_model=InterviewOut)
def get_interview(
    session_id: str, registry: InterviewRegistry = Depends(get_registry)
) -> InterviewOut:
    return _out(_load_session(session_id, registry))


@router.delete("/interviews/{session_id}", status_code=204)
def delete_interview(
    session_id: str, registry: InterviewRegistry = Depends(get_registry)
) -> Response:
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="Interview not found")
    return Response(status_code=204)


@router.post("/interviews/{session_id}/symptoms", response_model=InterviewOut)
async def submit_symptoms(
    session_id: str,
    payload: Symptoms,
    registry: InterviewRegistry = Depends(get_registry),
    generator: TextGenerator = Depends(get_generator),
    db: Session = Depends(get_session),
) -> InterviewOut:
    session = _load_session(session_id, registry)
    try:
        await flow.submit_symptoms(session, payload, generator)
    except InterviewStateError as exc:
        raise _state_conflict(exc) from exc
    except (GenerationError, ParseError) as exc:
        raise _upstream_failure(exc) from exc

    # Nothing to ask: go straight to the report.
    if session.state is InterviewState.FINALIZING:
        await _finalize(session, generator, db)
    return _out(session)


@router.post("/interviews/{session_id}/answer", response_model=InterviewOut)
def answer_question(
    session_id: str,
    payload: AnswerRequest,
    registry: InterviewRegistry = Depends(get_registry),
) -> InterviewOut:
    session = _load_session(session_id, registry)
    try:
        flow.record_answer(session, payload.answer)
    except InterviewStateError as exc:
        raise _state_conflict(exc) from exc
    return _out(session)


@router.post("/interviews/{session_id}/advance", response_model=InterviewOut)
async def advance_interview(
    session_id: str,
    registry: InterviewRegistry = Depends(get_registry),
    generator: TextGenerator = Depends(get_generator),
    db: Session = Depends(get_session),
) -> InterviewOut:
    session = _load_session(session_id, registry)
    try:
        flow.advance(session)
    except InterviewStateError as exc:
        raise _state_conflict(exc) from exc

    if session.state is InterviewState.FINALIZING:
        await _finalize(session, generator, db)
    return _out(session)


@router.post("/interviews/{session_id}/retreat", response_model=InterviewOut)
def retreat_interview(
    session_id: str, registry: InterviewRegistry = Depends(get_registry)
) -> InterviewOut:
    session = _load_session(session_id, registry)
    try:
        flow.retreat(session)
    except InterviewStateError as exc:
        raise _state_conflict(exc) from exc
    return _out(session)


@router.post("/interviews/{session_id}/finalize", response_model=InterviewOut)
async def finalize_interview(
    session_id: str,
    registry: InterviewRegistry = Depends(get_registry),
    generator: TextGenerator = Depends(get_generator),
    db: Session = Depends(get_session),
) -> InterviewOut:
    session = _load_session(session_id, registry)
    try:
        await _finalize(session, generator, db)
    except InterviewStateError as exc:
        raise _state_conflict(exc) from exc
    return _out(session)
