"""Chunk text into token-bounded, optionally overlapping windows.

Thin call-boundary wrapper over :class:`RecursiveTokenSplitter` for
callers that want plain dict rows, as the indexing scripts do.
"""

from __future__ import annotations

from typing import Optional

from .config import Config
from .splitter import DEFAULT_CHUNK_SIZE, DEFAULT_OVERLAP_SIZE, RecursiveTokenSplitter
from .tokenizers import DEFAULT_ENCODING, Tokenizer, TiktokenTokenizer, build_tokenizer


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP_SIZE,
    tokenizer: Optional[Tokenizer] = None,
    encoding_name: str = DEFAULT_ENCODING,
) -> list[dict]:
    """Split text into token-bounded chunks.

    Returns a list of dicts, each with:
        - "index": position of the chunk
        - "text": the chunk text, taken from the original input
        - "tokens": the chunk's tokens
        - "token_count": number of tokens in the chunk

    A tiktoken tokenizer for *encoding_name* is used when *tokenizer*
    is not given. Returns an empty list when the text is empty or
    whitespace-only, or cannot be split within the budget.
    """
    if not text.strip():
        return []
    if tokenizer is None:
        tokenizer = TiktokenTokenizer(encoding_name)
    splitter = RecursiveTokenSplitter(tokenizer)
    return [c.to_row() for c in splitter.split_chunks(text, chunk_size, overlap)]


def chunk_with_config(
    text: str,
    config: Config,
    tokenizer: Optional[Tokenizer] = None,
) -> list[dict]:
    """Same as :func:`chunk_text`, with sizes and tokenizer taken from *config*."""
    if tokenizer is None:
        tokenizer = build_tokenizer(
            config.tokenizer,
            encoding_name=config.encoding_name,
            model_name=config.hf_model,
        )
    return chunk_text(
        text,
        chunk_size=config.chunk_size,
        overlap=config.overlap_size,
        tokenizer=tokenizer,
    )
