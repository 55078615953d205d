"""SRT (SubRip) subtitle parsing and rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .models import Subtitle
from .utils import (
    Duration,
    Timestamp,
    TimecodeError,
    parse_timecode,
    read_text,
    write_text,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ErrorKind",
    "ParserConfig",
    "SrtParseError",
    "load_srt",
    "parse",
    "render",
    "save_srt",
    "scale",
    "shift",
]

logger = logging.getLogger(__name__)

_DIVIDER = " --> "
_TIMECODE_WIDTH = len("00:00:00,000")
_END_OFFSET = _TIMECODE_WIDTH + len(_DIVIDER)
_LINE_WIDTH = _END_OFFSET + _TIMECODE_WIDTH
_ASCII_DIGITS = frozenset("0123456789")


class ErrorKind(Enum):
    """Why a subtitle file was rejected. Values are the human readable labels."""

    INVALID_ID = "Invalid ID-marker"
    # Covers both a missing timestamp line and trailing characters after it.
    INVALID_TIMESTAMP_LINE = "Invalid timestamp line"
    INVALID_TIMESTAMP_START = "Invalid starting timestamp"
    INVALID_TIMESTAMP_DIVIDER = "Invalid timestamp divider"
    INVALID_TIMESTAMP_END = "Invalid ending timestamp"
    TIMESTAMP_END_BEFORE_START = "End timestamp is before start"
    MISSING_TEXT = "Missing subtitle text"

    def __str__(self) -> str:
        return self.value


class SrtParseError(ValueError):
    """Raised when an SRT document cannot be parsed.

    ``line`` is the 1-indexed line that broke the grammar, or one past the last
    line when a required line is missing.
    """

    def __init__(self, line: int, kind: ErrorKind) -> None:
        super().__init__(f"{kind} on line {line}")
        self.line = line
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SrtParseError):
            return NotImplemented
        return (self.line, self.kind) == (other.line, other.kind)

    def __hash__(self) -> int:
        return hash((self.line, self.kind))

    def __reduce__(self):
        return (type(self), (self.line, self.kind))


@dataclass(slots=True, frozen=True)
class ParserConfig:
    """Switches for the two places where SRT readers disagree.

    Attributes:
        allow_trailing_bytes: Ignore characters after the ending timestamp
            instead of rejecting the timestamp line.
        allow_empty_text: Accept a blank or absent text section as empty text.
            When ``False`` the parser raises ``MISSING_TEXT`` instead.
    """

    allow_trailing_bytes: bool = False
    allow_empty_text: bool = True


DEFAULT_CONFIG = ParserConfig()


def _split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    # A terminating newline does not open another line.
    if lines[-1] == "":
        lines.pop()
    # Only the carriage return of a CRLF pair belongs to the line ending.
    return [line.removesuffix("\r") for line in lines]


def _is_id(line: str) -> bool:
    return bool(line) and all(char in _ASCII_DIGITS for char in line)


def _timecode_or_none(segment: str) -> Optional[Timestamp]:
    try:
        return parse_timecode(segment)
    except TimecodeError:
        return None


def _parse_timestamp_line(
    line: str, line_number: int, config: ParserConfig
) -> Tuple[Timestamp, Duration]:
    start = _timecode_or_none(line[:_TIMECODE_WIDTH])
    if start is None:
        raise SrtParseError(line_number, ErrorKind.INVALID_TIMESTAMP_START)

    if line[_TIMECODE_WIDTH:_END_OFFSET] != _DIVIDER:
        raise SrtParseError(line_number, ErrorKind.INVALID_TIMESTAMP_DIVIDER)

    end = _timecode_or_none(line[_END_OFFSET:_LINE_WIDTH])
    if end is None:
        raise SrtParseError(line_number, ErrorKind.INVALID_TIMESTAMP_END)

    if end < start:
        raise SrtParseError(line_number, ErrorKind.TIMESTAMP_END_BEFORE_START)

    if len(line) > _LINE_WIDTH:
        if not config.allow_trailing_bytes:
            raise SrtParseError(line_number, ErrorKind.INVALID_TIMESTAMP_LINE)
        logger.debug("Ignoring trailing characters on line %d: %r", line_number, line[_LINE_WIDTH:])

    return start, end - start


def _read_text_block(lines: Iterator[Tuple[int, str]]) -> str:
    body: List[str] = []
    for _, line in lines:
        line = line.rstrip("\r")
        if not line:
            break
        body.append(line)
    return "\n".join(body)


def parse(text: str, config: ParserConfig = DEFAULT_CONFIG) -> List[Subtitle]:
    """Parse SRT ``text`` into a list of subtitles.

    Lines are separated by ``\\n`` and one trailing ``\\r`` is dropped, so Windows
    line endings are accepted. Text lines lose every trailing ``\\r``. Parsing
    stops at the first violation.

    Raises:
        SrtParseError: With the offending line number and the kind of failure.
    """

    subtitles: List[Subtitle] = []
    lines = enumerate(_split_lines(text), start=1)

    for line_number, line in lines:
        if not line:
            continue

        if not _is_id(line):
            raise SrtParseError(line_number, ErrorKind.INVALID_ID)

        timestamp_line = next(lines, None)
        if timestamp_line is None:
            raise SrtParseError(line_number + 1, ErrorKind.INVALID_TIMESTAMP_LINE)
        timestamp_line_number, timestamp_text = timestamp_line
        start, duration = _parse_timestamp_line(timestamp_text, timestamp_line_number, config)

        body = _read_text_block(lines)
        if not body and not config.allow_empty_text:
            raise SrtParseError(timestamp_line_number + 1, ErrorKind.MISSING_TEXT)

        subtitles.append(Subtitle(start=start, duration=duration, text=body))

    logger.debug("Parsed %d subtitles", len(subtitles))
    return subtitles


def render(subtitles: Iterable[Subtitle]) -> str:
    """Render ``subtitles`` to SRT text, numbering them from 1.

    Blocks are separated by a single blank line. An empty sequence renders to an
    empty string.
    """

    blocks = [f"{index}\n{subtitle}\n" for index, subtitle in enumerate(subtitles, start=1)]
    logger.debug("Rendered %d subtitles", len(blocks))
    return "\n".join(blocks)


def shift(subtitles: Iterable[Subtitle], offset: int | Duration) -> List[Subtitle]:
    """Move every subtitle's start by ``offset``.

    ``offset`` is a :class:`Duration` or a signed number of milliseconds.
    Negative offsets move subtitles earlier, stopping at ``00:00:00,000``;
    positive offsets stop at :attr:`Timestamp.MAX`. Durations are unchanged and
    the input records are left untouched.
    """

    if isinstance(offset, Timestamp):
        delta, backwards = offset, False
    else:
        delta, backwards = Duration.from_millis(abs(offset)), offset < 0

    logger.debug("Shifting subtitles by %s%s", "-" if backwards else "+", delta)
    if backwards:
        return [replace(subtitle, start=subtitle.start - delta) for subtitle in subtitles]
    return [replace(subtitle, start=subtitle.start + delta) for subtitle in subtitles]


def scale(subtitles: Iterable[Subtitle], factor: float) -> List[Subtitle]:
    """Multiply every start and duration by ``factor``, saturating at the bounds."""

    logger.debug("Scaling subtitles by %r", factor)
    return [
        replace(subtitle, start=subtitle.start * factor, duration=subtitle.duration * factor)
        for subtitle in subtitles
    ]


def load_srt(path: str | Path, config: ParserConfig = DEFAULT_CONFIG) -> List[Subtitle]:
    """Parse the SRT file at ``path``. A leading byte-order mark is ignored."""

    return parse(read_text(path), config)


def save_srt(path: str | Path, subtitles: Iterable[Subtitle]) -> None:
    """Render ``subtitles`` and write them to ``path`` as UTF-8."""

    write_text(path, render(subtitles))
