"""Pydantic models for improvement requests and results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

SECTION_HEADERS = ("ROLE", "CONTEXT", "TASK", "INSTRUCTIONS", "FORMAT")

# Order in which structured fields are joined into the prompt text
_FIELD_LABELS = (
    ("task", "Task"),
    ("role", "Role"),
    ("context", "Context"),
    ("instructions", "Instructions"),
    ("format", "Format"),
)


class StructuredFields(BaseModel):
    """The five labeled inputs of structured mode."""

    task: str = ""
    role: str = ""
    context: str = ""
    instructions: str = ""
    format: str = ""

    def to_prompt_text(self) -> str:
        """Join non-empty fields as ``Label: value`` lines."""
        lines = []
        for attr, label in _FIELD_LABELS:
            value = getattr(self, attr).strip()
            if value:
                lines.append(f"{label}: {value}")
        return "\n".join(lines)


class ImprovementRequest(BaseModel):
    """A free-text idea (instant mode) or five labeled fields (structured mode)."""

    idea: str = ""
    structured: StructuredFields | None = None

    def to_prompt_text(self) -> str:
        if self.structured is not None:
            return self.structured.to_prompt_text()
        return self.idea.strip()

    @property
    def is_empty(self) -> bool:
        return not self.to_prompt_text()


class ImprovementResult(BaseModel):
    """A Golden Prompt plus a short explanation of what changed."""

    model_config = ConfigDict(populate_by_name=True)

    improved_prompt: str = Field(alias="improvedPrompt")
    explanation: str

    def missing_sections(self) -> list[str]:
        """Headers from SECTION_HEADERS that are absent from the prompt."""
        return [h for h in SECTION_HEADERS if f"# {h}" not in self.improved_prompt]
