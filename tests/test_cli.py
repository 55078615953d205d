"""Tests for the strict-srt command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

from typer.testing import CliRunner

from strict_srt.cli import app
from strict_srt.srt import parse

runner = CliRunner()

SAMPLE_PATH = Path(__file__).resolve().parent / "data" / "sample.srt"
MINIMAL = "1\n00:00:00,000 --> 00:00:05,000\nSample text\n"


def test_check_reports_count() -> None:
    result = runner.invoke(app, ["check", str(SAMPLE_PATH)])

    assert result.exit_code == 0
    assert "OK: 2 subtitles" in result.output


def test_check_reports_line_addressed_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.srt"
    broken.write_text("1\n00:00:00,000 ---> 00:01:23,456\nOh no\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(broken)])

    assert result.exit_code == 1
    assert "Invalid timestamp divider on line 2" in result.output


def test_check_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["check", str(tmp_path / "missing.srt")])

    assert result.exit_code == 1
    assert "Error reading SRT file" in result.output


def test_parser_options_are_global(tmp_path: Path) -> None:
    trailing = tmp_path / "trailing.srt"
    trailing.write_text("1\n00:00:00,000 --> 00:00:01,000 X1:Y1\nhi\n", encoding="utf-8")

    rejected = runner.invoke(app, ["check", str(trailing)])
    accepted = runner.invoke(app, ["--allow-trailing-bytes", "check", str(trailing)])

    assert rejected.exit_code == 1
    assert "Invalid timestamp line on line 2" in rejected.output
    assert accepted.exit_code == 0

    empty = tmp_path / "empty.srt"
    empty.write_text("1\n00:00:00,000 --> 00:00:01,000\n\n", encoding="utf-8")
    assert runner.invoke(app, ["check", str(empty)]).exit_code == 0
    required = runner.invoke(app, ["--require-text", "check", str(empty)])
    assert required.exit_code == 1
    assert "Missing subtitle text on line 3" in required.output


def test_show_lists_subtitles() -> None:
    result = runner.invoke(app, ["show", str(SAMPLE_PATH)])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "#1 00:00:00,000 --> 00:01:23,456 (00:01:23,456) This is some sample | text"
    assert lines[1].startswith("#2 00:02:34,567 --> 00:03:00,000 (00:00:25,433) 3 | ")


def test_fmt_reads_stdin_and_strips_bom() -> None:
    source = "\ufeff\n\n9\r\n00:00:00,000 --> 00:00:05,000\r\nSample text\r\n"

    result = runner.invoke(app, ["fmt"], input=source)

    assert result.exit_code == 0
    assert result.output == MINIMAL


def test_shift_writes_output_file(tmp_path: Path) -> None:
    out = tmp_path / "shifted.srt"

    result = runner.invoke(app, ["shift", "--by=-100", str(SAMPLE_PATH), "--out", str(out)])

    assert result.exit_code == 0
    shifted = parse(out.read_text(encoding="utf-8"))
    assert [str(item.start) for item in shifted] == ["00:00:00,000", "00:02:34,467"]


def test_shift_to_stdout() -> None:
    result = runner.invoke(app, ["shift", "--by", "1000", "-"], input=MINIMAL)

    assert result.exit_code == 0
    assert result.output == "1\n00:00:01,000 --> 00:00:06,000\nSample text\n"


def test_scale_to_stdout() -> None:
    result = runner.invoke(app, ["scale", "2", "-"], input=MINIMAL)

    assert result.exit_code == 0
    assert result.output == "1\n00:00:00,000 --> 00:00:10,000\nSample text\n"


def test_scale_rejects_invalid_input() -> None:
    result = runner.invoke(app, ["scale", "2"], input="nope\n")

    assert result.exit_code == 1
    assert "Invalid ID-marker on line 1" in result.output


def test_stdin_and_file_keep_lone_carriage_returns(tmp_path: Path) -> None:
    source = b"1\n00:00:00,000 --> 00:00:05,000\na\rb\n"
    path = tmp_path / "cr.srt"
    path.write_bytes(source)

    from_file = runner.invoke(app, ["fmt", str(path)])
    from_stdin = runner.invoke(app, ["fmt", "-"], input=source)

    assert from_file.exit_code == 0
    assert from_stdin.exit_code == 0
    assert from_stdin.output == from_file.output
    assert "a\rb" in from_stdin.output


def test_stdin_rejects_invalid_utf8() -> None:
    result = runner.invoke(app, ["check", "-"], input=b"1\n\xff\n")

    assert result.exit_code == 1
    assert "Error reading SRT file" in result.output


def test_verbose_enables_debug_logging() -> None:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        result = runner.invoke(app, ["-v", "check", str(SAMPLE_PATH)])
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)

    assert result.exit_code == 0
    assert "OK: 2 subtitles" in result.output
    assert "DEBUG strict_srt.srt: Parsed 2 subtitles" in result.output
