"""Runtime configuration loaded from environment variables and ``.env``."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from dotenv import load_dotenv

from .splitter import DEFAULT_CHUNK_SIZE, DEFAULT_OVERLAP_SIZE
from .tokenizers import DEFAULT_ENCODING, DEFAULT_HF_MODEL, TOKENIZER_NAMES

ENV_PREFIX = "TOKEN_SPLITTER_"


def _parse_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Config:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    overlap_size: int = DEFAULT_OVERLAP_SIZE
    tokenizer: str = "tiktoken"
    encoding_name: str = DEFAULT_ENCODING
    hf_model: str = DEFAULT_HF_MODEL
    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a Config from ``TOKEN_SPLITTER_*`` variables.

        Keyword overrides that are not None take precedence over the
        environment; unknown keywords raise TypeError.
        """
        load_dotenv()
        env = os.environ
        cfg = cls(
            chunk_size=_parse_int(env.get(f"{ENV_PREFIX}CHUNK_SIZE"), DEFAULT_CHUNK_SIZE),
            overlap_size=_parse_int(env.get(f"{ENV_PREFIX}OVERLAP_SIZE"), DEFAULT_OVERLAP_SIZE),
            tokenizer=env.get(f"{ENV_PREFIX}TOKENIZER", "tiktoken"),
            encoding_name=env.get(f"{ENV_PREFIX}ENCODING", DEFAULT_ENCODING),
            hf_model=env.get(f"{ENV_PREFIX}HF_MODEL", DEFAULT_HF_MODEL),
            verbose=_parse_bool(env.get(f"{ENV_PREFIX}VERBOSE"), False),
        )
        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown config field: {key}")
            if value is not None:
                setattr(cfg, key, value)
        return cfg

    def validate(self) -> list[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors: list[str] = []
        if self.chunk_size < 1:
            errors.append(f"chunk_size must be at least 1, got {self.chunk_size}")
        if self.tokenizer not in TOKENIZER_NAMES:
            errors.append(
                f"Unknown tokenizer '{self.tokenizer}', expected one of: "
                + ", ".join(TOKENIZER_NAMES)
            )
        return errors
