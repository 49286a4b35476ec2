"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import anthropic
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from prompt_refiner.config import ENV_API_KEY
from prompt_refiner.errors import MissingCredentialError, TransportFailureError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

# Only transient failures are worth another attempt; auth and bad requests are not.
_RETRYABLE_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)
_RETRY_WAIT = wait_exponential(min=1, max=10)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client with optional exponential-backoff retries.

    The credential is resolved once at construction (explicit ``api_key`` or
    the ``ANTHROPIC_API_KEY`` environment variable). A client without a
    credential can be built, but every call fails with
    :class:`MissingCredentialError` before touching the network.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 1,
    ):
        self.api_key = api_key or os.environ.get(ENV_API_KEY) or None
        self.max_retries = max_retries
        self.client: anthropic.AsyncAnthropic | None = None
        if self.api_key:
            kwargs: dict = {"api_key": self.api_key, "max_retries": 0}
            if timeout is not None:
                kwargs["timeout"] = timeout
            self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @property
    def has_credential(self) -> bool:
        return self.client is not None

    def require_credential(self) -> None:
        """Raise MissingCredentialError if no API key was configured."""
        if self.client is None:
            raise MissingCredentialError(f"Missing {ENV_API_KEY} environment variable")

    async def _call_api(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call, retrying transient errors up to max_retries attempts."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=_RETRY_WAIT,
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        "Retrying LLM call (attempt %d/%d)",
                        attempt.retry_state.attempt_number,
                        self.max_retries,
                    )
                return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        self.require_credential()
        logger.debug("LLM call: model=%s", model)
        try:
            message = await self._call_api(
                prompt=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except anthropic.APIError as e:
            logger.error("LLM call failed", exc_info=True)
            raise TransportFailureError(getattr(e, "message", None) or str(e)) from e
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
