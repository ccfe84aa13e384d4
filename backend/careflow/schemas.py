import datetime as dt
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

QuestionKind = Literal["multipleChoice", "singleChoice", "text", "boolean"]
CHOICE_KINDS = frozenset({"multipleChoice", "singleChoice"})

UrgencyLevel = Literal["Emergency", "Urgent", "Non-urgent", "Self-care"]
_URGENCY_LOOKUP = {
    "emergency": "Emergency",
    "urgent": "Urgent",
    "non-urgent": "Non-urgent",
    "self-care": "Self-care",
}

InterviewStateName = Literal["collecting", "questioning", "finalizing", "reported", "failed"]


class Symptoms(BaseModel):
    symptoms: list[str]
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Question(BaseModel):
    id: str
    text: str
    kind: QuestionKind = Field(alias="type")
    options: Optional[list[str]] = None
    answer: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _options_match_kind(self) -> "Question":
        if self.kind in CHOICE_KINDS:
            if not self.options:
                raise ValueError(
                    f"question {self.id!r} of type {self.kind} requires options"
                )
        elif self.options is not None:
            self.options = None
        return self


class AssessmentReport(BaseModel):
    possible_conditions: list[str] = Field(alias="possibleConditions")
    recommendations: list[str]
    urgency_level: UrgencyLevel = Field(alias="urgencyLevel")
    follow_up_steps: list[str] = Field(alias="followUpSteps")
    specializations: Optional[list[str]] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("urgency_level", mode="before")
    @classmethod
    def _normalize_urgency(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-").replace(" ", "-")
            return _URGENCY_LOOKUP.get(key, value)
        return value


class Schedule(BaseModel):
    full_day_leaves: set[dt.date] = Field(
        default_factory=set,
        validation_alias=AliasChoices("fullDayLeaves", "full_day_leaves"),
        serialization_alias="fullDayLeaves",
    )
    leave_slots: dict[dt.date, set[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("leaveSlots", "leaveTimeSlots", "leave_slots"),
        serialization_alias="leaveSlots",
    )

    # Document-store encodings keep leaves as maps: {date: 1} and {date: {label: 1}}.
    @field_validator("full_day_leaves", mode="before")
    @classmethod
    def _accept_leave_map(cls, value):
        if isinstance(value, dict):
            return list(value.keys())
        return value

    @field_validator("leave_slots", mode="before")
    @classmethod
    def _accept_slot_maps(cls, value):
        if isinstance(value, dict):
            return {
                day: list(labels.keys()) if isinstance(labels, dict) else labels
                for day, labels in value.items()
            }
        return value


class PractitionerRecord(BaseModel):
    id: str
    name: str
    specialty: str
    schedule: Schedule = Field(default_factory=Schedule)


class BookingRequest(BaseModel):
    patient_id: str
    practitioner_id: str
    date: dt.date
    time: str
    reason: str = Field(min_length=1)

    @field_validator("date")
    @classmethod
    def _not_in_past(cls, value: dt.date) -> dt.date:
        if value < dt.date.today():
            raise ValueError("appointment date is in the past")
        return value


class AppointmentOut(BaseModel):
    id: str
    patient_id: str
    practitioner_id: str
    date: dt.date
    time: str
    reason: str
    status: str
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class InterviewCreate(BaseModel):
    patient_id: Optional[str] = None


class AnswerRequest(BaseModel):
    answer: str = Field(min_length=1)


class InterviewOut(BaseModel):
    id: str
    patient_id: Optional[str] = None
    state: InterviewStateName
    symptoms: Optional[Symptoms] = None
    questions: list[Question] = []
    current_index: int = 0
    current_question: Optional[Question] = None
    report: Optional[AssessmentReport] = None
    error: Optional[str] = None
    raw_response: Optional[str] = None
    candidate_specialties: list[str] = []
    recommended_practitioners: list[PractitionerRecord] = []
    directory_error: Optional[str] = None


class SpecialtyResolveRequest(BaseModel):
    conditions: list[str]
    specializations: list[str] = []


class SpecialtyResolveResponse(BaseModel):
    specialties: list[str]


class PractitionerMatchResponse(BaseModel):
    specialties: list[str]
    practitioners: list[PractitionerRecord]
    error: Optional[str] = None


class AvailabilityOut(BaseModel):
    practitioner_id: str
    date: dt.date
    slots: list[str]
    error: Optional[str] = None
