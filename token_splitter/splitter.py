"""Recursive token splitter: cascade separators, then pack windows greedily.

The input is split on progressively finer separators (paragraph, line,
sentence, word, code point) until every resulting Segment fits the token
budget on its own. Those Segments are then packed into windows without
ever splitting a Segment, carrying whole trailing Segments over as the
overlap for the next window. Chunk text is rebuilt from the original
substrings, never by detokenizing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Chunk, Segment, Token
from .tokenizers import Tokenizer
from .utils import logger

# Two positions are left for the [CLS]/[SEP] markers an encoder adds.
MAX_CHUNK_TOKENS = 510

SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")

DEFAULT_CHUNK_SIZE = MAX_CHUNK_TOKENS
DEFAULT_OVERLAP_SIZE = 0


@dataclass(frozen=True)
class Budget:
    """Clamped per-chunk token limit and requested overlap."""

    target: int
    overlap: int

    @classmethod
    def from_request(cls, chunk_size: int, overlap_size: int) -> "Budget":
        target = max(1, min(chunk_size, MAX_CHUNK_TOKENS))
        if target != chunk_size:
            logger.debug("Clamped chunk size %d to %d tokens", chunk_size, target)
        overlap = max(0, min(abs(overlap_size), target - 1))
        return cls(target=target, overlap=overlap)


# --------------------------------------------------------------------------
# Separator cascade
# --------------------------------------------------------------------------


def split_on(text: str, separator: str) -> list[str]:
    """Split *text* on *separator*, keeping the separator on each part it followed.

    The empty separator splits at code points. Empty parts are dropped;
    the separators between them stay on the preceding part, so only
    leading separators are lost when the pieces are joined back. The last
    part gets no separator unless the input ended with one.
    """
    if separator == "":
        return list(text)
    parts = text.split(separator)
    last = len(parts) - 1
    pieces: list[str] = []
    for i, part in enumerate(parts):
        tail = separator if i < last else ""
        if part:
            pieces.append(part + tail)
        elif pieces:
            pieces[-1] += tail
    return pieces


def build_segments(
    text: str,
    separator: str,
    tokenizer: Tokenizer,
    limit: int,
) -> Optional[list[Segment]]:
    """Tokenize each part of *text*; None as soon as one exceeds *limit* tokens."""
    segments: list[Segment] = []
    for part in split_on(text, separator):
        segment = Segment(text=part, tokens=tuple(tokenizer.tokenize(part)))
        if segment.token_count > limit:
            logger.debug(
                "Separator %r rejected: segment of %d tokens exceeds budget %d",
                separator,
                segment.token_count,
                limit,
            )
            return None
        segments.append(segment)
    return segments


def cascade(
    text: str,
    tokenizer: Tokenizer,
    budget: Budget,
) -> Optional[tuple[str, list[Segment]]]:
    """Return the first separator whose Segments all fit, with those Segments."""
    for separator in SEPARATORS:
        segments = build_segments(text, separator, tokenizer, budget.target)
        if segments is not None:
            logger.debug("Separator %r accepted with %d segments", separator, len(segments))
            return separator, segments
    return None


# --------------------------------------------------------------------------
# Output assembly
# --------------------------------------------------------------------------


def assemble_chunk(segments: list[Segment], index: int) -> Chunk:
    """Join a window's Segments into a Chunk; the text may trim down to ""."""
    text = "".join(s.text for s in segments).strip()
    tokens: list[Token] = []
    for s in segments:
        tokens.extend(s.tokens)
    return Chunk(index=index, text=text, tokens=tokens)


# --------------------------------------------------------------------------
# Window accumulation
# --------------------------------------------------------------------------


def carry_overlap(previous: list[Segment], tokens_needed: int) -> list[Segment]:
    """Trailing whole Segments of *previous* covering *tokens_needed* tokens.

    The carry can fall short of the request when a single Segment is
    large, or exceed it by less than one Segment.
    """
    carried: list[Segment] = []
    for segment in reversed(previous):
        if tokens_needed <= 0:
            break
        carried.insert(0, segment)
        tokens_needed -= segment.token_count
    return carried


class WindowAccumulator:
    """Greedily packs Segments into windows that fit the budget.

    A Segment that would overflow the current window triggers a
    transition: the window is closed into a Chunk, then the next window
    is opened with an overlap seed taken from the closed one. If the seed
    plus the new Segment would not fit, the seed is dropped and the
    window starts with the Segment alone.
    """

    def __init__(self, budget: Budget):
        self.budget = budget
        self.chunks: list[Chunk] = []
        self._window: list[Segment] = []
        self._count = 0

    def add(self, segment: Segment) -> None:
        if self._count + segment.token_count <= self.budget.target:
            self._window.append(segment)
            self._count += segment.token_count
            return
        previous = self._close()
        self._open(carry_overlap(previous, self.budget.overlap), segment)

    def finish(self) -> list[Chunk]:
        self._close()
        return self.chunks

    def _close(self) -> list[Segment]:
        closed = self._window
        if closed:
            self.chunks.append(assemble_chunk(closed, len(self.chunks)))
        self._window = []
        self._count = 0
        return closed

    def _open(self, seed: list[Segment], segment: Segment) -> None:
        seed_count = sum(s.token_count for s in seed)
        if seed_count + segment.token_count <= self.budget.target:
            self._window = seed + [segment]
            self._count = seed_count + segment.token_count
        else:
            self._window = [segment]
            self._count = segment.token_count


# --------------------------------------------------------------------------
# Public entry point
# --------------------------------------------------------------------------


class RecursiveTokenSplitter:
    """Splits text into token-bounded chunks using an injected tokenizer.

    The instance holds only the tokenizer; ``split`` may be called
    repeatedly and from several threads if the tokenizer allows it.
    """

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer

    def split_chunks(
        self,
        text: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap_size: int = DEFAULT_OVERLAP_SIZE,
    ) -> list[Chunk]:
        """Split *text* into Chunk models. Empty list when no valid split exists."""
        if not text:
            return []

        budget = Budget.from_request(chunk_size, overlap_size)
        accepted = cascade(text, self.tokenizer, budget)
        if accepted is None:
            logger.warning(
                "No separator fits a %d-token budget; input of %d characters left unsplit",
                budget.target,
                len(text),
            )
            return []

        _, segments = accepted
        accumulator = WindowAccumulator(budget)
        for segment in segments:
            accumulator.add(segment)
        return accumulator.finish()

    def split(
        self,
        text: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap_size: int = DEFAULT_OVERLAP_SIZE,
    ) -> tuple[list[str], Optional[list[list[Token]]]]:
        """Split *text* into ``(chunks, chunk_tokens)``.

        ``chunks[i]`` is the trimmed original text of chunk i and
        ``chunk_tokens[i]`` its tokens. Returns ``([], None)`` for empty
        input or when even single code points exceed the budget.
        """
        chunks = self.split_chunks(text, chunk_size, overlap_size)
        if not chunks:
            return [], None
        return [c.text for c in chunks], [list(c.tokens) for c in chunks]
