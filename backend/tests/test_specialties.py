from __future__ import annotations

from careflow.services.specialties import (
    CONDITION_KEYWORDS,
    CONDITION_SPECIALTIES,
    DEFAULT_SPECIALTY,
    evaluate_rules,
    keyword_rule,
    resolve_condition,
    resolve_specialties,
)


def test_exact_table_wins_and_ignores_case():
    assert resolve_condition("Migraine") == "Neurologist"
    assert resolve_condition("diabetes") == "Endocrinologist"
    assert resolve_condition("  URINARY TRACT INFECTION ") == "Urologist"


def test_keyword_rule_applies_when_no_exact_entry():
    assert resolve_condition("Chronic lower back pain") == "Orthopedics"
    assert resolve_condition("Skin rash on the leg") == "Dermatology"


def test_unmatched_condition_defaults_to_general_physician():
    assert resolve_condition("Vitamin deficiency") == DEFAULT_SPECIALTY


def test_tables_keep_their_full_membership():
    assert len(CONDITION_SPECIALTIES) == 17
    assert len(CONDITION_KEYWORDS) == 56
    families = {specialty for _, specialty in CONDITION_KEYWORDS}
    assert families == {
        "Pulmonology",
        "Cardiology",
        "Neurology",
        "Gastroenterology",
        "ENT",
        "Dermatology",
        "Orthopedics",
        "General Physician",
    }


def test_heart_disease_resolves_to_cardiologist():
    candidates = resolve_specialties(["Heart Disease"])

    assert "Cardiologist" in candidates
    assert "Cardiology" in candidates
    assert candidates[-1] == DEFAULT_SPECIALTY


def test_keyword_hits_are_unioned_across_conditions():
    candidates = resolve_specialties(["Persistent cough with fever", "Stomach ulcer"])

    assert candidates == [
        "Pulmonology",
        "General Physician",
        "Gastroenterology",
    ]


def test_default_is_always_included():
    candidates = resolve_specialties(["Skin eczema"])

    assert candidates == ["Dermatology", DEFAULT_SPECIALTY]
    assert resolve_specialties([]) == [DEFAULT_SPECIALTY]


def test_report_specializations_join_the_candidate_set():
    candidates = resolve_specialties(["Unexplained symptoms"], ["Rheumatology", " ENT "])

    assert candidates == [DEFAULT_SPECIALTY, "Rheumatology", "ENT"]


def test_evaluate_rules_collects_every_distinct_hit():
    rules = [
        keyword_rule("knee", "Orthopedics"),
        keyword_rule("swelling", "Rheumatology"),
        keyword_rule("knee", "Orthopedics"),
        keyword_rule("rash", "Dermatology"),
    ]

    assert evaluate_rules(rules, "Knee swelling") == ["Orthopedics", "Rheumatology"]
    assert evaluate_rules(rules, "nothing relevant") == []


def test_custom_rules_drive_resolution():
    rules = [(lambda subject: subject.startswith("peds"), "Pediatrics")]

    assert resolve_condition("peds fever", rules=rules) == "Pediatrics"
    assert resolve_specialties(["peds fever"], rules=rules) == ["Pediatrics", DEFAULT_SPECIALTY]
