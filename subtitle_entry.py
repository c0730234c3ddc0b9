from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Union

from time_utils import TimeValue, find_timestamps, format_srt_timestamp, seconds_to_milliseconds

PREVIEW_LIMIT = 50
PREVIEW_CUT = 47


class InvalidSubtitleError(ValueError):
    """A subtitle block that breaks the SRT grammar or the entry invariants.

    Carries the offending block's context so the message can point at it.
    """

    def __init__(
        self,
        message: str,
        subtitle_index: Optional[int] = None,
        start_time: Optional[TimeValue] = None,
        end_time: Optional[TimeValue] = None,
        subtitle_text: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.base_message = message
        self.subtitle_index = subtitle_index
        self.start_time = start_time
        self.end_time = end_time
        self.subtitle_text = subtitle_text
        self.cause = cause
        super().__init__(self._detailed_message())
        if cause is not None:
            self.__cause__ = cause

    def _detailed_message(self) -> str:
        parts = []
        if self.subtitle_index is not None:
            parts.append(f"Subtitle #{self.subtitle_index}: ")
        parts.append(self.base_message)

        times = []
        if self.start_time is not None:
            times.append(f"start: {format_srt_timestamp(self.start_time)}")
        if self.end_time is not None:
            times.append(f"end: {format_srt_timestamp(self.end_time)}")
        if times:
            parts.append(f" [{', '.join(times)}]")

        if self.subtitle_text and self.subtitle_text.strip():
            preview = self.subtitle_text
            if len(preview) > PREVIEW_LIMIT:
                preview = preview[:PREVIEW_CUT] + "..."
            preview = preview.replace("\n", "\\n")
            parts.append(f' Text: "{preview}"')
        return "".join(parts)

    @classmethod
    def invalid_index(
        cls,
        index: Optional[int],
        start: Optional[TimeValue],
        end: Optional[TimeValue],
        text: Optional[str],
    ) -> "InvalidSubtitleError":
        return cls(f"Subtitle index must be positive, got: {index}", index, start, end, text)

    @classmethod
    def end_before_start(
        cls,
        index: Optional[int],
        start: Optional[TimeValue],
        end: Optional[TimeValue],
        text: Optional[str],
    ) -> "InvalidSubtitleError":
        return cls("End time cannot be before start time", index, start, end, text)

    @classmethod
    def blank_text(
        cls,
        index: Optional[int],
        start: Optional[TimeValue],
        end: Optional[TimeValue],
        text: Optional[str],
    ) -> "InvalidSubtitleError":
        return cls("Subtitle text cannot be empty or blank", index, start, end, text)

    @classmethod
    def empty_timeline(cls, index: Optional[int], text: Optional[str]) -> "InvalidSubtitleError":
        return cls("Timeline cannot be empty", index, subtitle_text=text)

    @classmethod
    def invalid_timeline_format(
        cls, index: Optional[int], timeline: str, text: Optional[str]
    ) -> "InvalidSubtitleError":
        return cls(f"Invalid timeline format: {timeline}", index, subtitle_text=text)

    @classmethod
    def missing_end_time(
        cls,
        index: Optional[int],
        timeline: str,
        start: Optional[TimeValue],
        text: Optional[str],
    ) -> "InvalidSubtitleError":
        return cls(
            f"Invalid timeline format - missing end time: {timeline}",
            index,
            start_time=start,
            subtitle_text=text,
        )


@dataclass(frozen=True)
class SubtitleEntry:
    index: int
    start: TimeValue
    end: TimeValue
    text: str

    @classmethod
    def parse(cls, index: int, time_line: str, text: str) -> "SubtitleEntry":
        """Build an entry from a raw timeline; missing timestamps default to zero."""
        start, end = find_timestamps(time_line)
        return cls(
            index,
            start if start is not None else TimeValue(),
            end if end is not None else TimeValue(),
            text,
        )

    @classmethod
    def parse_strict(cls, index: int, time_line: str, text: str) -> "SubtitleEntry":
        """Like :meth:`parse`, but raise :class:`InvalidSubtitleError` on bad input."""
        if not time_line or not time_line.strip():
            raise InvalidSubtitleError.empty_timeline(index, text)
        start, end = find_timestamps(time_line)
        if start is None or "-->" not in time_line:
            raise InvalidSubtitleError.invalid_timeline_format(index, time_line.strip(), text)
        if end is None:
            raise InvalidSubtitleError.missing_end_time(index, time_line.strip(), start, text)
        return cls(index, start, end, text).validate()

    def validate(self) -> "SubtitleEntry":
        if self.index <= 0:
            raise InvalidSubtitleError.invalid_index(self.index, self.start, self.end, self.text)
        if self.end < self.start:
            raise InvalidSubtitleError.end_before_start(self.index, self.start, self.end, self.text)
        if not self.text or not self.text.strip():
            raise InvalidSubtitleError.blank_text(self.index, self.start, self.end, self.text)
        return self

    def shift_by_seconds(self, seconds: Union[float, str, Decimal]) -> "SubtitleEntry":
        delta = seconds_to_milliseconds(seconds)
        return replace(self, start=self.start.shifted(delta), end=self.end.shifted(delta))

    def convert_frame_rate(self, ratio: Decimal) -> "SubtitleEntry":
        return replace(self, start=self.start.scaled(ratio), end=self.end.scaled(ratio))

    def with_text(self, text: str) -> "SubtitleEntry":
        return replace(self, text=text)

    def to_srt_block(self) -> str:
        return (
            f"{self.index}\n"
            f"{format_srt_timestamp(self.start)} --> {format_srt_timestamp(self.end)}\n"
            f"{self.text}"
        )
