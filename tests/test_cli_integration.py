"""Integration tests for CLI argument parsing and command wiring."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from token_splitter import cli
from token_splitter.cli import build_parser, main

ALPHABET = "a b c d e f g h i j k l m n o p q r s t"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CHUNK_SIZE", "OVERLAP_SIZE", "TOKENIZER", "ENCODING", "HF_MODEL", "VERBOSE"):
        monkeypatch.delenv(f"TOKEN_SPLITTER_{name}", raising=False)


@pytest.fixture()
def alphabet_file(tmp_path: Path) -> Path:
    path = tmp_path / "alphabet.txt"
    path.write_text(ALPHABET, encoding="utf-8")
    return path


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestBuildParser:
    def test_split_defaults_none(self) -> None:
        args = build_parser().parse_args(["split", "in.txt"])
        assert args.input == "in.txt"
        assert args.chunk_size is None
        assert args.overlap is None
        assert args.tokenizer is None
        assert args.format == "jsonl"
        assert args.output is None
        assert args.verbose is False

    def test_split_options(self) -> None:
        args = build_parser().parse_args([
            "split", "-",
            "--chunk-size", "128",
            "--overlap", "16",
            "--tokenizer", "basic",
            "--format", "text",
            "--output", "out.txt",
        ])
        assert args.chunk_size == 128
        assert args.overlap == 16
        assert args.tokenizer == "basic"
        assert args.format == "text"
        assert args.output == "out.txt"

    def test_count_has_tokenizer_args(self) -> None:
        args = build_parser().parse_args(["count", "in.txt", "--encoding", "o200k_base"])
        assert args.encoding == "o200k_base"
        assert args.func is cli.cmd_count

    def test_rejects_unknown_tokenizer(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["split", "in.txt", "--tokenizer", "nope"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestSplitCommand:
    def test_writes_jsonl(self, alphabet_file: Path, capsys: pytest.CaptureFixture) -> None:
        code = _run(["split", str(alphabet_file), "--tokenizer", "basic", "--chunk-size", "4"])
        assert code == 0
        rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [r["text"] for r in rows] == ["a b c d", "e f g h", "i j k l", "m n o p", "q r s t"]
        assert rows[0] == {
            "index": 0,
            "text": "a b c d",
            "token_count": 4,
            "tokens": ["a", "b", "c", "d"],
        }

    def test_writes_text_format(self, alphabet_file: Path, capsys: pytest.CaptureFixture) -> None:
        code = _run([
            "split", str(alphabet_file),
            "--tokenizer", "basic", "--chunk-size", "10", "--overlap", "2",
            "--format", "text",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "--- chunk 0 (10 tokens) ---\na b c d e f g h i j\n" in out
        assert "--- chunk 1 (10 tokens) ---\ni j k l m n o p q r\n" in out

    def test_writes_output_file(self, alphabet_file: Path, tmp_path: Path) -> None:
        out_path = tmp_path / "nested" / "chunks.jsonl"
        code = _run([
            "split", str(alphabet_file),
            "--tokenizer", "basic", "--chunk-size", "10",
            "--output", str(out_path),
        ])
        assert code == 0
        lines = out_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2

    def test_reads_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("One.\n\nTwo.\n\nThree?"))
        code = _run(["split", "-", "--tokenizer", "basic", "--chunk-size", "3"])
        assert code == 0
        rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [r["text"] for r in rows] == ["One.", "Two.", "Three?"]

    def test_tokenizer_from_environment(
        self,
        alphabet_file: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture,
    ) -> None:
        monkeypatch.setenv("TOKEN_SPLITTER_TOKENIZER", "basic")
        monkeypatch.setenv("TOKEN_SPLITTER_CHUNK_SIZE", "5")
        code = _run(["split", str(alphabet_file)])
        assert code == 0
        assert len(capsys.readouterr().out.splitlines()) == 4

    def test_missing_input_file(self, tmp_path: Path) -> None:
        code = _run(["split", str(tmp_path / "missing.txt"), "--tokenizer", "basic"])
        assert code == 1

    def test_non_utf8_input(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes("caf\u00e9".encode("latin-1"))
        code = _run(["split", str(path), "--tokenizer", "basic"])
        assert code == 1

    def test_input_is_a_directory(self, tmp_path: Path) -> None:
        assert _run(["split", str(tmp_path), "--tokenizer", "basic"]) == 1

    def test_invalid_chunk_size(self, alphabet_file: Path) -> None:
        code = _run(["split", str(alphabet_file), "--tokenizer", "basic", "--chunk-size", "0"])
        assert code == 1

    def test_unsplittable_input(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        class ByteTokenizer:
            def tokenize(self, text: str) -> list[int]:
                return list(text.encode("utf-8"))

            def detokenize(self, tokens) -> str:
                return bytes(tokens).decode("utf-8")

        monkeypatch.setattr(cli, "build_tokenizer", lambda *a, **kw: ByteTokenizer())
        path = tmp_path / "accent.txt"
        path.write_text("é", encoding="utf-8")
        code = _run(["split", str(path), "--tokenizer", "basic", "--chunk-size", "1"])
        assert code == 2

    def test_empty_input_succeeds_with_no_chunks(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        code = _run(["split", str(path), "--tokenizer", "basic"])
        assert code == 0
        assert capsys.readouterr().out == ""


class TestCountCommand:
    def test_prints_token_count(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "in.txt"
        path.write_text("a b c.", encoding="utf-8")
        code = _run(["count", str(path), "--tokenizer", "basic"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "4"

    def test_missing_input_file(self, tmp_path: Path) -> None:
        assert _run(["count", str(tmp_path / "nope.txt"), "--tokenizer", "basic"]) == 1
