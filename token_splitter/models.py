"""Data models shared by the splitter, the facade and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, Field

# tiktoken yields integer ids, BERT-style tokenizers yield token strings.
Token = Union[int, str]


@dataclass(frozen=True)
class Segment:
    """A span of the input text (trailing separator included) and its tokens."""

    text: str
    tokens: tuple[Token, ...]

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class Chunk(BaseModel):
    """One finished window of the split."""

    index: int
    text: str
    tokens: list[Token] = Field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def to_row(self) -> dict:
        """Plain dict used by the facade and the JSONL writer."""
        return {
            "index": self.index,
            "text": self.text,
            "token_count": self.token_count,
            "tokens": list(self.tokens),
        }
