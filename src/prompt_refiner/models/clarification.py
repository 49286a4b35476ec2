"""Pydantic models for the clarifying-question refinement loop."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

ADDITIONAL_INSTRUCTIONS_QUESTION = "Additional User Instructions"


class ClarificationSet(BaseModel):
    """Questions paired by position with the user's answers."""

    questions: list[str]
    answers: list[str]

    @model_validator(mode="after")
    def _check_pairing(self) -> ClarificationSet:
        if len(self.questions) != len(self.answers):
            raise ValueError(
                f"questions and answers must pair up: "
                f"{len(self.questions)} questions, {len(self.answers)} answers"
            )
        return self

    def qa_pairs(self) -> list[tuple[str, str]]:
        return list(zip(self.questions, self.answers))

    def with_additional_instructions(self, text: str) -> ClarificationSet:
        """Return a copy with the free-text instructions appended as a synthetic pair.

        The receiver is left untouched, so repeated calls never accumulate entries.
        """
        if not text or not text.strip():
            return self.model_copy(deep=True)
        return ClarificationSet(
            questions=[*self.questions, ADDITIONAL_INSTRUCTIONS_QUESTION],
            answers=[*self.answers, text],
        )


class RefinementRequest(BaseModel):
    """The prompt being refined and the clarifications gathered for it."""

    original_prompt: str
    clarifications: ClarificationSet
