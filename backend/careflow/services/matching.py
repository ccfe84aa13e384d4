import logging
from typing import Callable, Iterable

from ..errors import DirectoryError
from ..schemas import PractitionerRecord
from .specialties import resolve_specialties

logger = logging.getLogger(__name__)

GENERAL_TERM = "general"


def _matches(specialty: str, candidates: list[str]) -> bool:
    if not specialty:
        return False
    for candidate in candidates:
        if specialty in candidate or candidate in specialty:
            return True
    return GENERAL_TERM in specialty


def match_practitioners(
    candidates: Iterable[str], directory: list[PractitionerRecord]
) -> list[PractitionerRecord]:
    """Practitioners whose specialty overlaps a candidate, in directory order.

    Never empty for a non-empty directory: with no overlap the first general
    practitioner is returned, and failing that the first entry.
    """
    lowered = [c.strip().lower() for c in candidates if c and c.strip()]
    matched = [
        practitioner
        for practitioner in directory
        if _matches(practitioner.specialty.strip().lower(), lowered)
    ]
    if matched or not directory:
        return matched

    for practitioner in directory:
        if GENERAL_TERM in practitioner.specialty.lower():
            logger.info("match_fallback rung=general practitioner_id=%s", practitioner.id)
            return [practitioner]

    logger.info("match_fallback rung=first practitioner_id=%s", directory[0].id)
    return [directory[0]]


def recommend_practitioners(
    conditions: Iterable[str],
    load_directory: Callable[[], list[PractitionerRecord]],
    specializations: Iterable[str] = (),
) -> tuple[list[str], list[PractitionerRecord], str | None]:
    candidates = resolve_specialties(conditions, specializations)
    try:
        directory = load_directory()
    except DirectoryError as exc:
        logger.warning("directory_read_failed error=%s", exc.message)
        return candidates, [], exc.message
    practitioners = match_practitioners(candidates, directory)
    logger.info(
        "match_complete candidates=%s directory=%s matched=%s",
        len(candidates),
        len(directory),
        len(practitioners),
    )
    return candidates, practitioners, None
