"""Data models for the prompt refiner."""

from prompt_refiner.models.clarification import (
    ADDITIONAL_INSTRUCTIONS_QUESTION,
    ClarificationSet,
    RefinementRequest,
)
from prompt_refiner.models.prompt import (
    SECTION_HEADERS,
    ImprovementRequest,
    ImprovementResult,
    StructuredFields,
)

__all__ = [
    "ADDITIONAL_INSTRUCTIONS_QUESTION",
    "ClarificationSet",
    "ImprovementRequest",
    "ImprovementResult",
    "RefinementRequest",
    "SECTION_HEADERS",
    "StructuredFields",
]
