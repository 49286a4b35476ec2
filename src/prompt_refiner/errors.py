"""Error types raised by the prompt refiner."""

from __future__ import annotations


class PromptRefinerError(Exception):
    """Base class for all prompt refiner errors."""


class MissingCredentialError(PromptRefinerError):
    """Required API credential is absent from the environment."""


class MalformedResponseError(PromptRefinerError):
    """Model output could not be parsed into the expected shape."""


class TransportFailureError(PromptRefinerError):
    """The model API call itself failed (network, quota, auth, timeout)."""


class OperationFailedError(PromptRefinerError):
    """An operation failed; ``cause`` holds the underlying error, if any."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class GenerationFailedError(OperationFailedError):
    """Initial prompt improvement failed."""


class RefinementFailedError(OperationFailedError):
    """Prompt refinement from clarifying answers failed."""
