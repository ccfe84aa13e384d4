import logging
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_SPECIALTY = "General Physician"

CONDITION_SPECIALTIES = {
    "Allergies": "Allergist",
    "Asthma": "Pulmonologist",
    "Arthritis": "Rheumatologist",
    "Bronchitis": "Pulmonologist",
    "Common Cold": "General Physician",
    "COVID-19": "Infectious Disease",
    "Depression": "Psychiatrist",
    "Diabetes": "Endocrinologist",
    "Flu": "General Physician",
    "Gastritis": "Gastroenterologist",
    "Heart Disease": "Cardiologist",
    "Hypertension": "Cardiologist",
    "Migraine": "Neurologist",
    "Pneumonia": "Pulmonologist",
    "Sinusitis": "Otolaryngologist",
    "Strep Throat": "Otolaryngologist",
    "Urinary Tract Infection": "Urologist",
}

# Specialist title -> practice area as it appears in the practitioner directory.
SPECIALIST_DEPARTMENTS = {
    "Allergist": "Immunology",
    "Cardiologist": "Cardiology",
    "Dermatologist": "Dermatology",
    "Endocrinologist": "Endocrinology",
    "Gastroenterologist": "Gastroenterology",
    "General Physician": "General Physician",
    "Infectious Disease": "Infectious Disease",
    "Neurologist": "Neurology",
    "Otolaryngologist": "ENT",
    "Psychiatrist": "Psychiatry",
    "Pulmonologist": "Pulmonology",
    "Rheumatologist": "Rheumatology",
    "Urologist": "Urology",
}

CONDITION_KEYWORDS: list[tuple[str, str]] = [
    # respiratory
    ("cough", "Pulmonology"),
    ("asthma", "Pulmonology"),
    ("bronchitis", "Pulmonology"),
    ("pneumonia", "Pulmonology"),
    ("respiratory", "Pulmonology"),
    ("lung", "Pulmonology"),
    ("breathing", "Pulmonology"),
    ("copd", "Pulmonology"),
    # cardiac
    ("heart", "Cardiology"),
    ("cardiac", "Cardiology"),
    ("chest pain", "Cardiology"),
    ("hypertension", "Cardiology"),
    ("blood pressure", "Cardiology"),
    ("cardiovascular", "Cardiology"),
    ("palpitation", "Cardiology"),
    # neurological
    ("migraine", "Neurology"),
    ("headache", "Neurology"),
    ("nerve", "Neurology"),
    ("seizure", "Neurology"),
    ("epilepsy", "Neurology"),
    ("stroke", "Neurology"),
    ("neurological", "Neurology"),
    ("brain", "Neurology"),
    # gastrointestinal
    ("stomach", "Gastroenterology"),
    ("gastritis", "Gastroenterology"),
    ("digestive", "Gastroenterology"),
    ("bowel", "Gastroenterology"),
    ("intestinal", "Gastroenterology"),
    ("acid reflux", "Gastroenterology"),
    ("ulcer", "Gastroenterology"),
    ("abdominal", "Gastroenterology"),
    # ENT
    ("throat", "ENT"),
    ("ear", "ENT"),
    ("nose", "ENT"),
    ("sinus", "ENT"),
    ("sinusitis", "ENT"),
    ("tonsil", "ENT"),
    ("pharyngitis", "ENT"),
    # dermatological
    ("skin", "Dermatology"),
    ("rash", "Dermatology"),
    ("dermatitis", "Dermatology"),
    ("eczema", "Dermatology"),
    ("acne", "Dermatology"),
    # orthopedic
    ("bone", "Orthopedics"),
    ("joint", "Orthopedics"),
    ("fracture", "Orthopedics"),
    ("arthritis", "Orthopedics"),
    ("muscle", "Orthopedics"),
    ("back pain", "Orthopedics"),
    ("sprain", "Orthopedics"),
    # general
    ("fever", "General Physician"),
    ("cold", "General Physician"),
    ("flu", "General Physician"),
    ("infection", "General Physician"),
    ("virus", "General Physician"),
    ("fatigue", "General Physician"),
]

Rule = tuple[Callable[[str], bool], str]


def keyword_rule(keyword: str, specialty: str) -> Rule:
    needle = keyword.lower()
    return (lambda subject: needle in subject.lower(), specialty)


KEYWORD_RULES: list[Rule] = [
    keyword_rule(keyword, specialty) for keyword, specialty in CONDITION_KEYWORDS
]

_EXACT_LOOKUP = {key.lower(): value for key, value in CONDITION_SPECIALTIES.items()}


def evaluate_rules(rules: Iterable[Rule], subject: str) -> list[str]:
    """Fold ``rules`` over ``subject``, collecting each distinct specialty that fires."""
    hits: list[str] = []
    for predicate, specialty in rules:
        if predicate(subject) and specialty not in hits:
            hits.append(specialty)
    return hits


def exact_specialty(condition: str) -> str | None:
    return _EXACT_LOOKUP.get(condition.strip().lower())


def resolve_condition(condition: str, rules: Iterable[Rule] = KEYWORD_RULES) -> str:
    exact = exact_specialty(condition)
    if exact:
        return exact
    hits = evaluate_rules(rules, condition)
    if hits:
        return hits[0]
    return DEFAULT_SPECIALTY


def _add(candidates: list[str], specialty: str) -> None:
    if specialty and specialty not in candidates:
        candidates.append(specialty)


def resolve_specialties(
    conditions: Iterable[str],
    specializations: Iterable[str] = (),
    rules: Iterable[Rule] = KEYWORD_RULES,
) -> list[str]:
    """Union of candidate specialties for a report's conditions.

    Insertion-ordered and duplicate free. The default specialty is always
    present, even when every condition matched something more specific.
    """
    rules = list(rules)
    candidates: list[str] = []
    for condition in conditions:
        exact = exact_specialty(condition)
        if exact:
            _add(candidates, exact)
            _add(candidates, SPECIALIST_DEPARTMENTS.get(exact, ""))
            continue
        hits = evaluate_rules(rules, condition)
        if not hits:
            logger.info("specialty_default condition=%r", condition)
            hits = [DEFAULT_SPECIALTY]
        for specialty in hits:
            _add(candidates, specialty)

    for specialization in specializations:
        _add(candidates, specialization.strip())

    _add(candidates, DEFAULT_SPECIALTY)
    return candidates
