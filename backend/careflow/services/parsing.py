import json
import logging
import re
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..errors import ParseError
from ..schemas import AssessmentReport, Question

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)
_QUESTIONS = TypeAdapter(list[Question])
_DECODER = json.JSONDecoder()

_RAW_LOG_LIMIT = 500


def strip_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _has_shape(value: Any, opener: str) -> bool:
    if opener == "[":
        return isinstance(value, list) and all(isinstance(item, dict) for item in value)
    return isinstance(value, dict)


def _extract_first_json(text: str, opener: str) -> Any:
    """First value decoded at an ``opener`` position that has the expected shape.

    Trailing text after the value is ignored, and bracketed prose such as
    ``[3]`` is skipped in favour of a later payload.
    """
    idx = text.find(opener)
    while idx != -1:
        try:
            value, _ = _DECODER.raw_decode(text, idx)
        except json.JSONDecodeError:
            value = None
        if value is not None and _has_shape(value, opener):
            return value
        idx = text.find(opener, idx + 1)
    return None


def _load_json(raw_text: str, opener: str, what: str) -> Any:
    candidate = strip_fences(raw_text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        error = exc

    # Not JSON as a whole: the payload is wrapped in prose.
    embedded = _extract_first_json(candidate, opener)
    if embedded is not None:
        return embedded
    logger.warning(
        "parse_failed what=%s error=%s raw=%r", what, error, raw_text[:_RAW_LOG_LIMIT]
    )
    raise ParseError(f"{what} parsing error: {error}", raw_text) from error


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def parse_questions(raw_text: str) -> list[Question]:
    payload = _load_json(raw_text, "[", "question")
    try:
        questions = _QUESTIONS.validate_python(payload)
    except ValidationError as exc:
        logger.warning(
            "parse_failed what=question error=%s raw=%r",
            _describe(exc),
            raw_text[:_RAW_LOG_LIMIT],
        )
        raise ParseError(f"question parsing error: {_describe(exc)}", raw_text) from exc
    logger.info("parsed_questions count=%s", len(questions))
    return questions


def parse_report(raw_text: str) -> AssessmentReport:
    payload = _load_json(raw_text, "{", "report")
    try:
        report = AssessmentReport.model_validate(payload)
    except ValidationError as exc:
        logger.warning(
            "parse_failed what=report error=%s raw=%r",
            _describe(exc),
            raw_text[:_RAW_LOG_LIMIT],
        )
        raise ParseError(f"report parsing error: {_describe(exc)}", raw_text) from exc
    logger.info(
        "parsed_report conditions=%s urgency=%s",
        len(report.possible_conditions),
        report.urgency_level,
    )
    return report
