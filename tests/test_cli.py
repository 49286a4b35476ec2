"""Tests for the typer CLI."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from prompt_refiner.cli import app
from prompt_refiner.config import AppConfig
from prompt_refiner.errors import GenerationFailedError, MissingCredentialError
from prompt_refiner.models.prompt import ImprovementRequest, ImprovementResult

runner = CliRunner()


@pytest.fixture
def improver():
    instance = MagicMock()
    instance.improve_prompt = AsyncMock(
        return_value=ImprovementResult(
            improved_prompt="# ROLE\nA\n\n# CONTEXT\nB\n\n# TASK\nC\n\n# INSTRUCTIONS\nD\n\n# FORMAT\nE",
            explanation="Added a persona.",
        )
    )
    instance.get_clarifying_questions = AsyncMock(return_value=["Tone?", "Audience?"])
    instance.refine_prompt = AsyncMock(
        return_value=ImprovementResult(improved_prompt="# ROLE\nRefined", explanation="Used tone.")
    )
    with patch("prompt_refiner.cli.PromptImprover", return_value=instance), \
            patch("prompt_refiner.cli.load_config", return_value=AppConfig()):
        yield instance


class TestImproveCommand:
    def test_instant_idea(self, improver):
        result = runner.invoke(app, ["improve", "write a haiku about tea"])

        assert result.exit_code == 0, result.output
        request = improver.improve_prompt.call_args.args[0]
        assert request == ImprovementRequest(idea="write a haiku about tea")
        assert "Added a persona." in result.output

    def test_structured_fields(self, improver):
        result = runner.invoke(app, ["improve", "--task", "Summarize", "--format", "Bullets"])

        assert result.exit_code == 0, result.output
        request = improver.improve_prompt.call_args.args[0]
        assert request.to_prompt_text() == "Task: Summarize\nFormat: Bullets"

    def test_empty_input_exits(self, improver):
        result = runner.invoke(app, ["improve", "   "])

        assert result.exit_code == 1
        improver.improve_prompt.assert_not_called()

    def test_writes_output_file(self, improver, tmp_path):
        out = tmp_path / "out" / "prompt.md"
        result = runner.invoke(app, ["improve", "idea", "--output", str(out)])

        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8").startswith("# ROLE\nA")

    def test_generation_failure_exits(self, improver):
        improver.improve_prompt.side_effect = GenerationFailedError("Generation failed: boom")
        result = runner.invoke(app, ["improve", "idea"])

        assert result.exit_code == 1
        assert "Failed to generate prompt" in result.output

    def test_missing_credential_reported(self, improver):
        improver.improve_prompt.side_effect = MissingCredentialError(
            "Missing ANTHROPIC_API_KEY environment variable"
        )
        result = runner.invoke(app, ["improve", "idea"])

        assert result.exit_code == 1
        assert "ANTHROPIC_API_KEY" in result.output


class TestQuestionsCommand:
    def test_lists_questions(self, improver, tmp_path):
        prompt_file = tmp_path / "prompt.md"
        prompt_file.write_text("# ROLE\nA\n", encoding="utf-8")

        result = runner.invoke(app, ["questions", str(prompt_file)])

        assert result.exit_code == 0, result.output
        assert "1. Tone?" in result.output
        assert "2. Audience?" in result.output
        improver.get_clarifying_questions.assert_awaited_once_with("# ROLE\nA")

    def test_missing_file(self, improver, tmp_path):
        result = runner.invoke(app, ["questions", str(tmp_path / "nope.md")])
        assert result.exit_code == 1


class TestRefineCommand:
    def test_answers_from_options(self, improver, tmp_path):
        prompt_file = tmp_path / "prompt.md"
        prompt_file.write_text("# ROLE\nA", encoding="utf-8")

        result = runner.invoke(
            app,
            ["refine", str(prompt_file), "-a", "Playful", "-a", "Kids", "--additional", "Use emojis"],
        )

        assert result.exit_code == 0, result.output
        improver.refine_prompt.assert_awaited_once_with(
            "# ROLE\nA", ["Tone?", "Audience?"], ["Playful", "Kids"], "Use emojis"
        )
        assert "Used tone." in result.output

    def test_answers_prompted_interactively(self, improver, tmp_path):
        prompt_file = tmp_path / "prompt.md"
        prompt_file.write_text("# ROLE\nA", encoding="utf-8")

        result = runner.invoke(app, ["refine", str(prompt_file)], input="Formal\nExecutives\n")

        assert result.exit_code == 0, result.output
        args = improver.refine_prompt.call_args.args
        assert args[2] == ["Formal", "Executives"]
