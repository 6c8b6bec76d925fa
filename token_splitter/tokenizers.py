"""Tokenizer collaborators for the splitter.

The splitter only needs two operations, ``tokenize`` and ``detokenize``,
so any object providing them can be injected. Adapters are provided for
tiktoken encodings, Hugging Face tokenizers and a vocabulary-free
BERT-style pre-tokenizer.

None of the adapters keep per-call state; sharing one instance between
threads is safe as long as the wrapped backend allows concurrent reads
(tiktoken encodings and Hugging Face fast tokenizers do).
"""

from __future__ import annotations

import unicodedata
from typing import TYPE_CHECKING, Protocol, Sequence

import tiktoken

from .models import Token
from .utils import logger

if TYPE_CHECKING:
    from transformers import PreTrainedTokenizerBase

DEFAULT_ENCODING = "cl100k_base"
DEFAULT_HF_MODEL = "bert-base-uncased"
TOKENIZER_NAMES = ("tiktoken", "huggingface", "basic")


class Tokenizer(Protocol):
    """Capability the splitter depends on."""

    def tokenize(self, text: str) -> list[Token]:
        ...

    def detokenize(self, tokens: Sequence[Token]) -> str:
        ...


class TiktokenTokenizer:
    """Integer token ids from a tiktoken encoding."""

    def __init__(self, encoding_name: str = DEFAULT_ENCODING):
        self.encoding_name = encoding_name
        self._enc = tiktoken.get_encoding(encoding_name)

    def tokenize(self, text: str) -> list[Token]:
        # Text that looks like "<|endoftext|>" is encoded as plain text.
        return list(self._enc.encode(text, disallowed_special=()))

    def detokenize(self, tokens: Sequence[Token]) -> str:
        return self._enc.decode(list(tokens))


class HuggingFaceTokenizer:
    """Subword token strings from a ``transformers`` tokenizer."""

    def __init__(self, tokenizer: PreTrainedTokenizerBase):
        self._tok = tokenizer

    @classmethod
    def from_pretrained(cls, model_name: str = DEFAULT_HF_MODEL) -> "HuggingFaceTokenizer":
        from transformers import AutoTokenizer

        logger.info("Loading Hugging Face tokenizer '%s'", model_name)
        return cls(AutoTokenizer.from_pretrained(model_name))

    def tokenize(self, text: str) -> list[Token]:
        return list(self._tok.tokenize(text))

    def detokenize(self, tokens: Sequence[Token]) -> str:
        return self._tok.convert_tokens_to_string([str(t) for t in tokens])


def _is_punctuation(char: str) -> bool:
    """ASCII non-alphanumeric symbols count as punctuation, like BERT does."""
    cp = ord(char)
    if 33 <= cp <= 47 or 58 <= cp <= 64 or 91 <= cp <= 96 or 123 <= cp <= 126:
        return True
    return unicodedata.category(char).startswith("P")


class BasicTokenizer:
    """Whitespace and punctuation pre-tokenizer with no vocabulary.

    Every whitespace-delimited word is one token, except that each
    punctuation character becomes a token of its own::

        >>> BasicTokenizer().tokenize("UIs. It works!")
        ['UIs', '.', 'It', 'works', '!']

    ``detokenize`` joins tokens with single spaces, which tokenizes back to
    the same tokens.
    """

    def tokenize(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        for word in text.split():
            current: list[str] = []
            for char in word:
                if _is_punctuation(char):
                    if current:
                        tokens.append("".join(current))
                        current = []
                    tokens.append(char)
                else:
                    current.append(char)
            if current:
                tokens.append("".join(current))
        return tokens

    def detokenize(self, tokens: Sequence[Token]) -> str:
        return " ".join(str(t) for t in tokens)


def build_tokenizer(
    name: str = "tiktoken",
    *,
    encoding_name: str = DEFAULT_ENCODING,
    model_name: str = DEFAULT_HF_MODEL,
) -> Tokenizer:
    """Create the tokenizer adapter registered under *name*."""
    if name == "tiktoken":
        return TiktokenTokenizer(encoding_name)
    if name == "huggingface":
        return HuggingFaceTokenizer.from_pretrained(model_name)
    if name == "basic":
        return BasicTokenizer()
    raise ValueError(
        f"Unknown tokenizer '{name}', expected one of: {', '.join(TOKENIZER_NAMES)}"
    )
