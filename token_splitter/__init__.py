"""Split long text into token-bounded, optionally overlapping chunks."""

from .chunker import chunk_text, chunk_with_config
from .config import Config
from .models import Chunk, Segment, Token
from .splitter import MAX_CHUNK_TOKENS, SEPARATORS, RecursiveTokenSplitter
from .tokenizers import (
    BasicTokenizer,
    HuggingFaceTokenizer,
    TiktokenTokenizer,
    Tokenizer,
    build_tokenizer,
)

__all__ = [
    "BasicTokenizer",
    "Chunk",
    "Config",
    "HuggingFaceTokenizer",
    "MAX_CHUNK_TOKENS",
    "RecursiveTokenSplitter",
    "SEPARATORS",
    "Segment",
    "TiktokenTokenizer",
    "Token",
    "Tokenizer",
    "build_tokenizer",
    "chunk_text",
    "chunk_with_config",
]
