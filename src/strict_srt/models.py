"""Data models representing subtitle records."""

from __future__ import annotations

from dataclasses import dataclass, field

from .utils import Duration, Timestamp


@dataclass(slots=True)
class Subtitle:
    """Represents a single SRT subtitle item.

    The end time is derived as ``start + duration`` and never stored. There is
    no id: numbering is assigned from the position in the list when rendering.

    ``text`` must not contain an empty line. The record does not enforce this,
    but a blank line is the block separator on the wire, so such text renders
    into a different number of subtitles when parsed back.
    """

    start: Timestamp = field(default_factory=Timestamp)
    duration: Duration = field(default_factory=Duration)
    text: str = ""

    @property
    def end(self) -> Timestamp:
        return self.start + self.duration

    def __str__(self) -> str:
        return f"{self.start} --> {self.end}\n{self.text}"
