import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..errors import GenerationError, InterviewStateError, ParseError
from ..schemas import AssessmentReport, PractitionerRecord, Question, Symptoms
from .llm import TextGenerator, build_question_prompt, build_report_prompt
from .matching import recommend_practitioners
from .parsing import parse_questions, parse_report

logger = logging.getLogger(__name__)


# collecting -> questioning -> finalizing -> reported; a model failure ends in failed.
class InterviewState(str, Enum):
    COLLECTING = "collecting"
    QUESTIONING = "questioning"
    FINALIZING = "finalizing"
    REPORTED = "reported"
    FAILED = "failed"


TERMINAL_STATES = {InterviewState.REPORTED, InterviewState.FAILED}


@dataclass
class InterviewSession:
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    patient_id: Optional[str] = None
    state: InterviewState = InterviewState.COLLECTING
    symptoms: Optional[Symptoms] = None
    questions: list[Question] = field(default_factory=list)
    current_index: int = 0
    report: Optional[AssessmentReport] = None
    error: Optional[str] = None
    raw_response: Optional[str] = None
    candidate_specialties: list[str] = field(default_factory=list)
    recommended_practitioners: list[PractitionerRecord] = field(default_factory=list)
    directory_error: Optional[str] = None
    in_flight: bool = False
    created_at: float = field(default_factory=time.monotonic)

    @property
    def current_question(self) -> Optional[Question]:
        if self.state is not InterviewState.QUESTIONING:
            return None
        return self.questions[self.current_index]

    @property
    def all_answered(self) -> bool:
        return all(question.answer is not None for question in self.questions)


def _require(session: InterviewSession, *states: InterviewState) -> None:
    if session.state not in states:
        allowed = ", ".join(state.value for state in states)
        raise InterviewStateError(
            f"Interview {session.id} is {session.state.value}; expected {allowed}"
        )


def _begin_call(session: InterviewSession) -> None:
    if session.in_flight:
        raise InterviewStateError(f"Interview {session.id} already has a request in progress")
    session.in_flight = True


def _fail(session: InterviewSession, exc: GenerationError | ParseError) -> None:
    session.state = InterviewState.FAILED
    session.error = exc.message
    session.raw_response = getattr(exc, "raw_text", None)
    logger.warning(
        "interview_failed session_id=%s error_type=%s error=%s",
        session.id,
        type(exc).__name__,
        exc.message,
    )


async def submit_symptoms(
    session: InterviewSession, symptoms: Symptoms, generator: TextGenerator
) -> InterviewSession:
    _require(session, InterviewState.COLLECTING)
    _begin_call(session)
    session.symptoms = symptoms
    try:
        raw = await generator.generate(build_question_prompt(symptoms))
        questions = parse_questions(raw)
    except (GenerationError, ParseError) as exc:
        _fail(session, exc)
        raise
    finally:
        session.in_flight = False

    # Answers come from the patient, never from the model.
    session.questions = [q.model_copy(update={"answer": None}) for q in questions]
    session.current_index = 0
    if session.questions:
        session.state = InterviewState.QUESTIONING
    else:
        session.state = InterviewState.FINALIZING
    logger.info(
        "interview_questions session_id=%s count=%s state=%s",
        session.id,
        len(session.questions),
        session.state.value,
    )
    return session


def record_answer(session: InterviewSession, answer: str) -> InterviewSession:
    _require(session, InterviewState.QUESTIONING)
    question = session.questions[session.current_index]
    if question.answer is not None:
        raise InterviewStateError(f"Question {question.id} has already been answered")
    question.answer = answer
    return session


def advance(session: InterviewSession) -> InterviewSession:
    _require(session, InterviewState.QUESTIONING)
    question = session.questions[session.current_index]
    if question.answer is None:
        raise InterviewStateError(f"Question {question.id} has not been answered")
    if session.current_index < len(session.questions) - 1:
        session.current_index += 1
    else:
        session.state = InterviewState.FINALIZING
    return session


def retreat(session: InterviewSession) -> InterviewSession:
    _require(session, InterviewState.QUESTIONING)
    if session.current_index > 0:
        session.current_index -= 1
    return session


async def finalize(
    session: InterviewSession,
    generator: TextGenerator,
    load_directory: Callable[[], list[PractitionerRecord]] | None = None,
) -> InterviewSession:
    _require(session, InterviewState.FINALIZING)
    if not session.all_answered:
        raise InterviewStateError(f"Interview {session.id} has unanswered questions")
    _begin_call(session)
    try:
        raw = await generator.generate(build_report_prompt(session.symptoms, session.questions))
        report = parse_report(raw)
    except (GenerationError, ParseError) as exc:
        _fail(session, exc)
        raise
    finally:
        session.in_flight = False

    session.report = report
    session.state = InterviewState.REPORTED
    logger.info(
        "interview_reported session_id=%s urgency=%s conditions=%s",
        session.id,
        report.urgency_level,
        len(report.possible_conditions),
    )

    if load_directory is not None:
        candidates, practitioners, error = recommend_practitioners(
            report.possible_conditions, load_directory, report.specializations or ()
        )
        session.candidate_specialties = candidates
        session.recommended_practitioners = practitioners
        session.directory_error = error
    return session


class InterviewRegistry:
    """In-process interview sessions keyed by id.

    Reported and failed sessions older than ``ttl_seconds`` are swept out
    whenever a new session is created.
    """

    def __init__(self, ttl_seconds: float = 3600.0) -> None:
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, InterviewSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, patient_id: str | None = None) -> InterviewSession:
        self.prune()
        session = InterviewSession(patient_id=patient_id)
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> InterviewSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def prune(self, now: float | None = None) -> int:
        now = time.monotonic() if now is None else now
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.state in TERMINAL_STATES and now - session.created_at >= self.ttl_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(
                "interviews_pruned count=%s remaining=%s", len(expired), len(self._sessions)
            )
        return len(expired)
