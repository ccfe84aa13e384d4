from __future__ import annotations

import json

from careflow.schemas import PractitionerRecord, Schedule


class ScriptedGenerator:
    """Returns canned completions in order and records every prompt."""

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("generator called more often than scripted")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def practitioner(
    specialty: str,
    practitioner_id: str | None = None,
    name: str | None = None,
    schedule: Schedule | None = None,
) -> PractitionerRecord:
    return PractitionerRecord(
        id=practitioner_id or specialty.lower().replace(" ", "-"),
        name=name or f"Dr. {specialty}",
        specialty=specialty,
        schedule=schedule or Schedule(),
    )


def fenced(payload) -> str:
    return f"```json\n{json.dumps(payload)}\n```"


QUESTIONS = [
    {"id": "q1", "text": "Do you have a fever?", "type": "boolean", "options": None},
    {
        "id": "q2",
        "text": "Where is the pain?",
        "type": "singleChoice",
        "options": ["Head", "Chest", "Abdomen"],
    },
    {"id": "q3", "text": "Describe anything else", "type": "text"},
]

REPORT = {
    "possibleConditions": ["Heart Disease", "Anxiety"],
    "recommendations": ["Rest", "Monitor blood pressure"],
    "urgencyLevel": "Urgent",
    "followUpSteps": ["Book a cardiology consult"],
    "specializations": ["Cardiology"],
}
