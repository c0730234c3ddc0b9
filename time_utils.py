from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

SRT_TIMESTAMP_PATTERN = re.compile(r"(\d{2}):(\d{2}):(\d{2}),(\d{3})")

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


@dataclass(frozen=True, order=True)
class TimeValue:
    """Millisecond-precision timestamp, never negative."""

    milliseconds: int = 0

    def __post_init__(self) -> None:
        if self.milliseconds < 0:
            raise ValueError(f"TimeValue cannot be negative: {self.milliseconds} ms")

    @classmethod
    def from_components(
        cls, hours: int = 0, minutes: int = 0, seconds: int = 0, milliseconds: int = 0
    ) -> "TimeValue":
        return cls(
            hours * MS_PER_HOUR
            + minutes * MS_PER_MINUTE
            + seconds * MS_PER_SECOND
            + milliseconds
        )

    @classmethod
    def from_seconds(cls, seconds: Union[float, str, Decimal]) -> "TimeValue":
        return cls(seconds_to_milliseconds(seconds))

    @property
    def hours(self) -> int:
        return self.milliseconds // MS_PER_HOUR

    @property
    def minutes(self) -> int:
        return (self.milliseconds % MS_PER_HOUR) // MS_PER_MINUTE

    @property
    def seconds(self) -> int:
        return (self.milliseconds % MS_PER_MINUTE) // MS_PER_SECOND

    @property
    def millis(self) -> int:
        return self.milliseconds % MS_PER_SECOND

    def total_seconds(self) -> float:
        return self.milliseconds / MS_PER_SECOND

    def shifted(self, delta_ms: int) -> "TimeValue":
        """Add a (possibly negative) delta; the result floors at zero."""
        return TimeValue(max(0, self.milliseconds + delta_ms))

    def scaled(self, ratio: Decimal) -> "TimeValue":
        """Multiply by an exact ratio, rounding half-up to a whole millisecond."""
        value = (Decimal(self.milliseconds) * ratio).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        return TimeValue(max(0, int(value)))

    def __add__(self, other: "TimeValue") -> "TimeValue":
        if not isinstance(other, TimeValue):
            return NotImplemented
        return TimeValue(self.milliseconds + other.milliseconds)

    def __str__(self) -> str:
        return format_srt_timestamp(self)


ZERO = TimeValue(0)


def seconds_to_milliseconds(seconds: Union[float, str, Decimal]) -> int:
    # str() keeps 2.675 as 2.675 instead of its binary approximation
    value = Decimal(str(seconds)) * MS_PER_SECOND
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def format_srt_timestamp(value: TimeValue) -> str:
    return f"{value.hours:02d}:{value.minutes:02d}:{value.seconds:02d},{value.millis:03d}"


def parse_srt_timestamp(value: str) -> TimeValue:
    """Parse a strict ``HH:MM:SS,mmm`` timestamp."""
    if not value:
        raise ValueError("Empty timestamp")
    match = SRT_TIMESTAMP_PATTERN.fullmatch(value.strip())
    if not match:
        raise ValueError(f"Invalid timestamp: {value}")
    return _from_match(match)


def find_timestamps(line: str) -> tuple[Optional[TimeValue], Optional[TimeValue]]:
    """Return the first two timestamps found in ``line`` (missing ones are None)."""
    matches = SRT_TIMESTAMP_PATTERN.finditer(line or "")
    start = next(matches, None)
    end = next(matches, None)
    return (
        _from_match(start) if start else None,
        _from_match(end) if end else None,
    )


def _from_match(match: re.Match) -> TimeValue:
    hours, minutes, secs, ms = (int(group) for group in match.groups())
    return TimeValue.from_components(hours, minutes, secs, ms)
