"""Normalize raw model output into typed results.

Generative models do not always follow the requested output shape. The
functions here tolerate the common deviations:

- JSON wrapped in ```json fences or stray prose
- ``improvedPrompt`` returned as a mapping of section name to text instead
  of a pre-rendered markdown string
- missing or empty fields, which are replaced by fixed fallback strings

Improvement and refinement responses that are not JSON at all raise
:class:`MalformedResponseError`. Clarifying questions never raise; they fall
back to a generic question list.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Union

from prompt_refiner.errors import MalformedResponseError
from prompt_refiner.models.prompt import ImprovementResult
from prompt_refiner.utils.json_parser import parse_json

logger = logging.getLogger(__name__)

GENERATE_FALLBACK = "Failed to generate prompt"
REFINE_FALLBACK = "Failed to refine prompt"
EXPLANATION_FALLBACK = "No explanation provided"
FALLBACK_QUESTIONS = (
    "Who is the target audience?",
    "What is the tone?",
    "What is the specific goal?",
)


@dataclass(frozen=True)
class PromptText:
    """``improvedPrompt`` delivered as a ready-made string."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class PromptSections:
    """``improvedPrompt`` delivered as a section-name -> text mapping."""

    sections: dict[str, Any]

    def render(self) -> str:
        blocks = []
        for name, value in self.sections.items():
            body = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
            blocks.append(f"# {str(name).upper()}\n{body}")
        return "\n\n".join(blocks)


PromptBody = Union[PromptText, PromptSections]


def coerce_prompt_body(value: Any) -> PromptBody | None:
    """Tag the raw ``improvedPrompt`` value; None for any unusable shape."""
    if isinstance(value, str):
        return PromptText(value)
    if isinstance(value, dict):
        return PromptSections(value)
    if value is not None:
        logger.warning("Unexpected improvedPrompt type: %s", type(value).__name__)
    return None


def normalize_improvement(raw_text: str, fallback_prompt: str = GENERATE_FALLBACK) -> ImprovementResult:
    """Parse an improvement/refinement response into an ImprovementResult."""
    data = parse_json(raw_text)
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    body = coerce_prompt_body(data.get("improvedPrompt"))
    improved = body.render() if body is not None else ""
    if not improved.strip():
        logger.warning("Response had no usable improvedPrompt; using fallback")
        improved = fallback_prompt

    explanation = data.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = EXPLANATION_FALLBACK

    return ImprovementResult(improved_prompt=improved, explanation=explanation)


def normalize_questions(raw_text: str) -> list[str]:
    """Parse a clarifying-questions response, falling back to generic questions."""
    try:
        data = parse_json(raw_text)
    except MalformedResponseError:
        logger.warning("Could not parse clarifying questions; using fallback", exc_info=True)
        return list(FALLBACK_QUESTIONS)

    # Handle dict wrapper (e.g. {"questions": [...]})
    if isinstance(data, dict):
        for key in ("questions", "items"):
            if key in data and isinstance(data[key], list):
                data = data[key]
                break
        else:
            logger.warning("Clarifying questions response was an object without a question list")
            return list(FALLBACK_QUESTIONS)

    if not isinstance(data, list):
        logger.warning("Clarifying questions response was not a list: %s", type(data).__name__)
        return list(FALLBACK_QUESTIONS)

    questions = [q.strip() for q in data if isinstance(q, str) and q.strip()]
    if not questions:
        logger.warning("Clarifying questions response was empty; using fallback")
        return list(FALLBACK_QUESTIONS)
    return questions
