"""Configuration objects for transcoding and semantic repair."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

__all__ = ["RepairConfig", "TranscodeOptions", "DEFAULT_MODEL", "DEFAULT_BASE_URL"]

DEFAULT_MODEL = "anthropic/claude-sonnet-4.0"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

_API_KEY_VARS = ("FLOWBRIDGE_API_KEY", "OPENROUTER_API_KEY")


@dataclass(frozen=True)
class RepairConfig:
    """Settings for the LLM-assisted repair pass.

    Repair is skipped entirely when ``api_key`` is unset.
    """

    api_key: str | None = field(default=None, repr=False)
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 45.0
    temperature: float = 0.2
    max_tokens: int = 3000
    reasoning_effort: str = "high"

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "RepairConfig":
        """Build a config from an explicitly passed environment mapping."""
        api_key = next((environ[k] for k in _API_KEY_VARS if environ.get(k)), None)
        return cls(
            api_key=api_key,
            model=environ.get("FLOWBRIDGE_MODEL") or DEFAULT_MODEL,
            base_url=environ.get("FLOWBRIDGE_BASE_URL") or DEFAULT_BASE_URL,
        )


@dataclass(frozen=True)
class TranscodeOptions:
    id_prefix: str | None = None
    token_namespace: str = "fp"
    disable_semantic_recovery: bool = False
    force_semantic_recovery: bool = False
    repair: RepairConfig = field(default_factory=RepairConfig)
