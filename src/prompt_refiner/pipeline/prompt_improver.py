"""Prompt improver: turns vague ideas into Golden Prompts and refines them."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from prompt_refiner.clients.llm_client import DEFAULT_MODEL, LLMClient
from prompt_refiner.errors import (
    GenerationFailedError,
    MissingCredentialError,
    RefinementFailedError,
)
from prompt_refiner.models.clarification import ClarificationSet
from prompt_refiner.models.prompt import ImprovementRequest, ImprovementResult
from prompt_refiner.pipeline.normalizer import (
    FALLBACK_QUESTIONS,
    GENERATE_FALLBACK,
    REFINE_FALLBACK,
    normalize_improvement,
    normalize_questions,
)
from prompt_refiner.pipeline.templates import (
    build_clarifying_questions_instruction,
    build_initial_improvement_instruction,
    build_refinement_instruction,
)

logger = logging.getLogger(__name__)


class PromptImprover:
    """Run the improve / clarify / refine operations against an injected LLM client.

    Each operation issues exactly one model request. A missing API key is
    reported as MissingCredentialError before any request is made.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _complete(self, instruction: str) -> str:
        response = await self.llm.generate(
            prompt=instruction,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.text

    async def improve_prompt(
        self, request: ImprovementRequest | str
    ) -> ImprovementResult | None:
        """Rewrite an idea (or structured fields) into a five-section Golden Prompt.

        Returns None without calling the model when the request is empty.
        """
        if isinstance(request, str):
            request = ImprovementRequest(idea=request)
        if request.is_empty:
            logger.debug("Empty improvement request; nothing to do")
            return None

        self.llm.require_credential()
        logger.info("Generating improved prompt...")
        instruction = build_initial_improvement_instruction(request.to_prompt_text())
        try:
            raw = await self._complete(instruction)
            return normalize_improvement(raw, fallback_prompt=GENERATE_FALLBACK)
        except MissingCredentialError:
            raise
        except Exception as e:
            logger.exception("Prompt generation failed")
            raise GenerationFailedError(
                f"Generation failed: {str(e) or 'Unknown error occurred'}", cause=e
            ) from e

    async def get_clarifying_questions(self, current_prompt: str) -> list[str]:
        """Ask the model for clarifying questions; fall back to generic ones on failure."""
        self.llm.require_credential()
        logger.info("Generating clarifying questions...")
        instruction = build_clarifying_questions_instruction(current_prompt)
        try:
            raw = await self._complete(instruction)
        except MissingCredentialError:
            raise
        except Exception:
            logger.exception("Clarifying question generation failed; using fallback")
            return list(FALLBACK_QUESTIONS)
        return normalize_questions(raw)

    async def refine_prompt(
        self,
        original_prompt: str,
        questions: list[str],
        answers: list[str],
        additional_instructions: str = "",
    ) -> ImprovementResult:
        """Regenerate the prompt using the answers to the clarifying questions.

        ``questions`` and ``answers`` are never modified; additional
        instructions are appended to a copy.
        """
        self.llm.require_credential()
        try:
            clarifications = ClarificationSet(
                questions=list(questions), answers=list(answers)
            ).with_additional_instructions(additional_instructions)
        except ValidationError as e:
            logger.error("Invalid clarifications: %s", e)
            raise RefinementFailedError(REFINE_FALLBACK, cause=e) from e

        logger.info("Refining prompt with %d clarifications...", len(clarifications.questions))
        instruction = build_refinement_instruction(original_prompt, clarifications.qa_pairs())
        try:
            raw = await self._complete(instruction)
            return normalize_improvement(raw, fallback_prompt=REFINE_FALLBACK)
        except MissingCredentialError:
            raise
        except Exception as e:
            logger.exception("Error generating refined prompt")
            raise RefinementFailedError(REFINE_FALLBACK, cause=e) from e
