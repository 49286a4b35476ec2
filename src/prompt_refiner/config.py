"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

ENV_API_KEY = "ANTHROPIC_API_KEY"


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout: int = 60
    max_retries: int = 1  # total attempts; 1 disables retrying

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")
        if not 1 <= self.max_tokens <= 64000:
            raise ValueError(f"max_tokens must be between 1 and 64000, got {self.max_tokens}")
        if self.timeout < 1:
            raise ValueError(f"timeout must be at least 1 second, got {self.timeout}")
        if not 1 <= self.max_retries <= 10:
            raise ValueError(f"max_retries must be between 1 and 10, got {self.max_retries}")


@dataclass(frozen=True)
class UIConfig:
    max_input_chars: int = 10000

    def __post_init__(self) -> None:
        if self.max_input_chars < 1:
            raise ValueError(f"max_input_chars must be positive, got {self.max_input_chars}")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        ui=UIConfig(**raw.get("ui", {})),
    )
