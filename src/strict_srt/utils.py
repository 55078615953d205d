"""Shared utility helpers for the strict_srt package."""

from __future__ import annotations

import math
import re
from functools import total_ordering
from pathlib import Path
from typing import ClassVar, Optional

_TIME_PATTERN = re.compile(
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2}),(?P<millis>[0-9]{3})"
)

MAX_HOURS = 100
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60
MILLIS_PER_SECOND = 1_000

_MAX_MILLIS = MAX_HOURS * MINUTES_PER_HOUR * SECONDS_PER_MINUTE * MILLIS_PER_SECOND - 1


class TimecodeError(ValueError):
    """Raised when a timecode string cannot be parsed."""


@total_ordering
class Timestamp:
    """A bounded millisecond count rendered as ``HH:MM:SS,mmm``.

    Values always lie in ``[0, Timestamp.MAX]``. Construction and arithmetic
    saturate at either end of that range instead of wrapping or going negative,
    so ``Timestamp.MAX + Duration.from_millis(1) == Timestamp.MAX`` and
    ``Timestamp() - Duration.from_millis(1) == Timestamp()``.

    Instances are immutable and hashable.
    """

    __slots__ = ("_millis",)

    MAX: ClassVar["Timestamp"]

    def __init__(self, millis: int = 0) -> None:
        object.__setattr__(self, "_millis", min(max(int(millis), 0), _MAX_MILLIS))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def new(cls, hours: int, minutes: int, seconds: int, millis: int) -> Optional["Timestamp"]:
        """Build a timestamp from its components.

        Returns ``None`` if any component lies outside its range: hours
        ``0..100``, minutes ``0..60``, seconds ``0..60``, millis ``0..1000``
        (upper bounds exclusive).
        """

        if not (
            0 <= hours < MAX_HOURS
            and 0 <= minutes < MINUTES_PER_HOUR
            and 0 <= seconds < SECONDS_PER_MINUTE
            and 0 <= millis < MILLIS_PER_SECOND
        ):
            return None
        total_minutes = hours * MINUTES_PER_HOUR + minutes
        total_seconds = total_minutes * SECONDS_PER_MINUTE + seconds
        return cls(total_seconds * MILLIS_PER_SECOND + millis)

    @classmethod
    def from_millis(cls, total_millis: int) -> "Timestamp":
        """Return a timestamp, saturating to :attr:`MAX` when out of range."""

        return cls(total_millis)

    @classmethod
    def checked_from_millis(cls, total_millis: int) -> Optional["Timestamp"]:
        """Return a timestamp, or ``None`` when ``total_millis`` is out of range."""

        if 0 <= total_millis <= _MAX_MILLIS:
            return cls(total_millis)
        return None

    @classmethod
    def parse(cls, value: str) -> "Timestamp":
        """Parse a strict ``HH:MM:SS,mmm`` token. See :func:`parse_timecode`."""

        return parse_timecode(value)

    @property
    def hours(self) -> int:
        return self.total_hours

    @property
    def minutes(self) -> int:
        return self.total_minutes % MINUTES_PER_HOUR

    @property
    def seconds(self) -> int:
        return self.total_seconds % SECONDS_PER_MINUTE

    @property
    def millis(self) -> int:
        return self._millis % MILLIS_PER_SECOND

    @property
    def total_hours(self) -> int:
        return self.total_minutes // MINUTES_PER_HOUR

    @property
    def total_minutes(self) -> int:
        return self.total_seconds // SECONDS_PER_MINUTE

    @property
    def total_seconds(self) -> int:
        return self._millis // MILLIS_PER_SECOND

    @property
    def total_millis(self) -> int:
        return self._millis

    def to_string(self) -> str:
        """Render the timestamp as ``HH:MM:SS,mmm``."""

        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d},{self.millis:03d}"

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return format(self.to_string(), format_spec)

    def __repr__(self) -> str:
        return f"Timestamp({self.to_string()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._millis == other._millis

    def __lt__(self, other: "Timestamp") -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._millis < other._millis

    def __hash__(self) -> int:
        return hash(self._millis)

    def __add__(self, other: "Timestamp") -> "Timestamp":
        if not isinstance(other, Timestamp):
            return NotImplemented
        return Timestamp(self._millis + other._millis)

    def __sub__(self, other: "Timestamp") -> "Timestamp":
        if not isinstance(other, Timestamp):
            return NotImplemented
        return Timestamp(self._millis - other._millis)

    def __mul__(self, factor: float) -> "Timestamp":
        if isinstance(factor, bool) or not isinstance(factor, (int, float)):
            return NotImplemented
        product = self._millis * float(factor)
        # NaN fails both comparisons and lands on zero.
        if not product > 0:
            return Timestamp()
        if product >= _MAX_MILLIS:
            return Timestamp.MAX
        return Timestamp(math.trunc(product))

    __rmul__ = __mul__

    def __reduce__(self):
        return (type(self), (self._millis,))


Timestamp.MAX = Timestamp(_MAX_MILLIS)

# Elapsed spans share the same bounded representation.
Duration = Timestamp


def parse_timecode(value: str) -> Timestamp:
    """Parse a timecode string into a :class:`Timestamp` instance.

    Args:
        value: A string of the exact form ``HH:MM:SS,mmm`` using ASCII digits.

    Raises:
        TimecodeError: If the value is malformed or a component is out of range.
    """

    match = _TIME_PATTERN.fullmatch(value)
    if not match:
        raise TimecodeError(f"Invalid timecode: {value!r}")

    timestamp = Timestamp.new(
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        int(match.group("millis")),
    )
    if timestamp is None:
        raise TimecodeError(f"Timecode out of range: {value!r}")
    return timestamp


def read_text(path: str | Path) -> str:
    """Read UTF-8 text from ``path``, dropping a leading byte-order mark.

    Line endings are passed through untouched for the parser to handle.
    """

    with open(path, "r", encoding="utf-8-sig", newline="") as fh:
        return fh.read()


def write_text(path: str | Path, text: str) -> None:
    """Write ``text`` to ``path`` as UTF-8, creating parent directories."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
