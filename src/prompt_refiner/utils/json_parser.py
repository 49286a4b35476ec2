"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
import re
from typing import Any

from prompt_refiner.errors import MalformedResponseError

_FENCE_RE = re.compile(r"```(?:json)?")


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and trim surrounding whitespace.

    Idempotent: stripping an already stripped string returns it unchanged.
    """
    return _FENCE_RE.sub("", text).strip()


def parse_json(text: str) -> Any:
    """Parse JSON from LLM response, handling ```json blocks.

    Tries in order:
    1. Strip fenced code block markers and parse directly
    2. Find first '{' to last '}' and parse
    3. Find first '[' to last ']' and parse (JSON array)

    Returns whatever JSON value parsed (object, array or scalar).
    Raises MalformedResponseError if none of them parse.
    """
    stripped = strip_code_fences(text or "")

    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    result = _extract_braces(stripped)
    if result is not None:
        return result

    result = _extract_brackets(stripped)
    if result is not None:
        return result

    raise MalformedResponseError(f"Could not extract JSON from text: {stripped[:200]}...")


def _extract_braces(text: str) -> dict | None:
    """Try to extract JSON object from first '{' to last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None


def _extract_brackets(text: str) -> list | None:
    """Try to extract JSON array from first '[' to last ']'."""
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
