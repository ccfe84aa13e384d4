import logging
import time
import uuid
from typing import Protocol

import httpx

from ..config import settings
from ..errors import GenerationError
from ..schemas import Question, Symptoms

logger = logging.getLogger(__name__)

QUESTION_PROMPT = """Based on the following symptoms: {symptoms}
Additional description: {description}
Generate up to {max_questions} relevant medical assessment questions in JSON format.
Each question should have:
- id: unique string
- text: question text
- type: "multipleChoice", "singleChoice", "text", or "boolean"
- options: array of possible answers (for multiple/single choice)
Questions should help narrow down the possible conditions and severity.

Return ONLY a valid JSON array with no additional text."""

REPORT_PROMPT = """Based on the following symptoms and answers, generate a medical assessment report in JSON format:
Initial Symptoms: {symptoms}
Initial Description: {description}

Questionnaire Responses:
{transcript}

Generate a report with:
- possibleConditions: array of potential conditions
- recommendations: array of recommendations
- urgencyLevel: "Emergency", "Urgent", "Non-urgent", or "Self-care"
- followUpSteps: array of next steps
- specializations: array of medical specializations that would be relevant for these conditions

Return ONLY a valid JSON object with no additional text."""


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


def build_question_prompt(symptoms: Symptoms, max_questions: int | None = None) -> str:
    return QUESTION_PROMPT.format(
        symptoms=", ".join(symptoms.symptoms),
        description=symptoms.description or "None",
        max_questions=max_questions or settings.max_questions,
    )


def build_report_prompt(symptoms: Symptoms, questions: list[Question]) -> str:
    transcript = "\n".join(
        f"Q: {question.text}\nA: {question.answer or 'No answer'}" for question in questions
    )
    return REPORT_PROMPT.format(
        symptoms=", ".join(symptoms.symptoms),
        description=symptoms.description or "None",
        transcript=transcript or "No questions were asked.",
    )


class AnthropicTextGenerator:
    """Text completion through the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = settings.anthropic_api_key if api_key is None else api_key
        self.model = model or settings.anthropic_model
        self.base_url = (base_url or settings.anthropic_base_url).rstrip("/")
        self.timeout = timeout or settings.generation_timeout_seconds
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerationError("ANTHROPIC_API_KEY is not configured")

        request_id = uuid.uuid4().hex
        start = time.perf_counter()
        outcome = "error"
        try:
            payload = {
                "model": self.model,
                "max_tokens": settings.generation_max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            }
            headers = {
                "x-api-key": self.api_key,
                "anthropic-version": "2023-06-01",
                "content-type": "application/json",
            }
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await client.post(
                        f"{self.base_url}/messages", json=payload, headers=headers
                    )
                    response.raise_for_status()
                    data = response.json()
            except httpx.HTTPStatusError as exc:
                raise GenerationError(
                    f"API error: generative service returned {exc.response.status_code}"
                ) from exc
            except (httpx.HTTPError, ValueError) as exc:
                raise GenerationError(f"API error: {exc}") from exc

            if not isinstance(data, dict):
                raise GenerationError("API error: unexpected response body")
            content = data.get("content") or []
            text = "".join(
                part.get("text", "")
                for part in content
                if isinstance(part, dict) and part.get("type") == "text"
            )
            if not text.strip():
                raise GenerationError("No response text received")
            outcome = "ok"
            return text
        finally:
            latency_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "anthropic_generate request_id=%s latency_ms=%s outcome=%s",
                request_id,
                latency_ms,
                outcome,
            )


def get_generator() -> TextGenerator:
    return AnthropicTextGenerator()
