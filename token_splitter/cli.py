"""CLI entry point with two subcommands: split and count.

Usage:
    token-splitter split notes.md --chunk-size 256 --overlap 32 --output chunks.jsonl
    cat notes.md | token-splitter count - --tokenizer basic
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from .config import Config
from .models import Chunk
from .splitter import RecursiveTokenSplitter
from .tokenizers import TOKENIZER_NAMES, build_tokenizer
from .utils import ensure_dir, logger, read_text, setup_logging


def _config_from_args(args: argparse.Namespace) -> Config:
    return Config.from_env(
        chunk_size=getattr(args, "chunk_size", None),
        overlap_size=getattr(args, "overlap", None),
        tokenizer=args.tokenizer,
        encoding_name=args.encoding,
        hf_model=args.hf_model,
        verbose=args.verbose or None,
    )


def _load_input(source: str) -> str | None:
    if source != "-" and not Path(source).exists():
        logger.error("Input file not found: %s", source)
        return None
    try:
        return read_text(source)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read input %s: %s", source, e)
        return None


def _write_chunks(chunks: list[Chunk], fmt: str, out: TextIO) -> None:
    for chunk in chunks:
        if fmt == "jsonl":
            out.write(json.dumps(chunk.to_row(), ensure_ascii=False) + "\n")
        else:
            out.write(f"--- chunk {chunk.index} ({chunk.token_count} tokens) ---\n")
            out.write(chunk.text + "\n\n")


def cmd_split(args: argparse.Namespace) -> int:
    """Split the input and write the chunks."""
    config = _config_from_args(args)
    errors = config.validate()
    if errors:
        for e in errors:
            logger.error(e)
        return 1

    text = _load_input(args.input)
    if text is None:
        return 1

    tokenizer = build_tokenizer(
        config.tokenizer,
        encoding_name=config.encoding_name,
        model_name=config.hf_model,
    )
    splitter = RecursiveTokenSplitter(tokenizer)
    chunks = splitter.split_chunks(text, config.chunk_size, config.overlap_size)
    if not chunks and text.strip():
        logger.error(
            "Input cannot be split within %d tokens; increase --chunk-size",
            config.chunk_size,
        )
        return 2

    logger.info(
        "Split %d characters into %d chunks (chunk_size=%d, overlap=%d, tokenizer=%s)",
        len(text),
        len(chunks),
        config.chunk_size,
        config.overlap_size,
        config.tokenizer,
    )

    if args.output:
        output_path = Path(args.output)
        ensure_dir(output_path.parent)
        with output_path.open("w", encoding="utf-8") as f:
            _write_chunks(chunks, args.format, f)
        logger.info("Wrote %s", output_path)
    else:
        _write_chunks(chunks, args.format, sys.stdout)
    return 0


def cmd_count(args: argparse.Namespace) -> int:
    """Print the token count of the input."""
    config = _config_from_args(args)
    errors = config.validate()
    if errors:
        for e in errors:
            logger.error(e)
        return 1

    text = _load_input(args.input)
    if text is None:
        return 1

    tokenizer = build_tokenizer(
        config.tokenizer,
        encoding_name=config.encoding_name,
        model_name=config.hf_model,
    )
    print(len(tokenizer.tokenize(text)))
    return 0


def _add_tokenizer_args(parser: argparse.ArgumentParser) -> None:
    """Add input, tokenizer selection and --verbose to a subparser."""
    parser.add_argument(
        "input",
        help="Path to a UTF-8 text file, or '-' for stdin",
    )
    parser.add_argument(
        "--tokenizer", default=None, choices=TOKENIZER_NAMES,
        help="Tokenizer backend (default: tiktoken, or TOKEN_SPLITTER_TOKENIZER)",
    )
    parser.add_argument(
        "--encoding", default=None,
        help="tiktoken encoding name (default: cl100k_base)",
    )
    parser.add_argument(
        "--hf-model", default=None,
        help="Hugging Face model whose tokenizer to load (default: bert-base-uncased)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-splitter",
        description="Split text into token-bounded chunks for embedding pipelines",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- split subcommand ---
    sp_split = subparsers.add_parser(
        "split",
        help="Split text into chunks",
    )
    _add_tokenizer_args(sp_split)
    sp_split.add_argument(
        "--chunk-size", type=int, default=None,
        help="Maximum tokens per chunk, capped at 510 (default: 510)",
    )
    sp_split.add_argument(
        "--overlap", type=int, default=None,
        help="Tokens of trailing context repeated in the next chunk (default: 0)",
    )
    sp_split.add_argument(
        "--format", choices=["jsonl", "text"], default="jsonl",
        help="Output format (default: jsonl)",
    )
    sp_split.add_argument(
        "--output", default=None,
        help="Write chunks to this file instead of stdout",
    )
    sp_split.set_defaults(func=cmd_split)

    # --- count subcommand ---
    sp_count = subparsers.add_parser(
        "count",
        help="Print the number of tokens in the input",
    )
    _add_tokenizer_args(sp_count)
    sp_count.set_defaults(func=cmd_count)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
