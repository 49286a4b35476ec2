"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from prompt_refiner.clients.llm_client import LLMClient, LLMResponse
from prompt_refiner.models.prompt import ImprovementRequest, StructuredFields


@pytest.fixture(autouse=True)
def _no_ambient_api_key(monkeypatch):
    """Keep tests independent of a developer's real credential."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture
def sample_idea() -> str:
    return "I need a blog post about the future of AI in healthcare"


@pytest.fixture
def sample_fields() -> StructuredFields:
    return StructuredFields(
        task="Write a product launch email",
        role="Senior copywriter",
        context="",
        instructions="Keep it under 200 words",
        format="Plain text",
    )


@pytest.fixture
def sample_structured_request(sample_fields) -> ImprovementRequest:
    return ImprovementRequest(structured=sample_fields)


@pytest.fixture
def golden_prompt() -> str:
    return (
        "# ROLE\nYou are a health-tech journalist.\n\n"
        "# CONTEXT\nReaders are hospital administrators.\n\n"
        "# TASK\nWrite a blog post on AI in healthcare.\n\n"
        "# INSTRUCTIONS\nCite three recent studies.\n\n"
        "# FORMAT\nMarkdown, 800 words."
    )


@pytest.fixture
def improvement_json(golden_prompt) -> str:
    return json.dumps(
        {"improvedPrompt": golden_prompt, "explanation": "Added a persona and audience."}
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client that has a credential."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50))
    client.require_credential = MagicMock(return_value=None)
    client.has_credential = True
    return client
