from decimal import Decimal

import pytest

from frame_rate import FrameRate, conversion_ratio
from subtitle_entry import InvalidSubtitleError, SubtitleEntry
from time_utils import TimeValue


def _entry(start_ms: int = 1000, end_ms: int = 3000, text: str = "Hello") -> SubtitleEntry:
    return SubtitleEntry(1, TimeValue(start_ms), TimeValue(end_ms), text)


def test_parse_timeline() -> None:
    entry = SubtitleEntry.parse(7, "00:00:01,000 --> 00:00:03,250", "Hi")
    assert entry.start == TimeValue(1000)
    assert entry.end == TimeValue(3250)


def test_parse_malformed_timeline_defaults_to_zero() -> None:
    entry = SubtitleEntry.parse(1, "not a timeline", "Hi")
    assert entry.start == TimeValue(0)
    assert entry.end == TimeValue(0)


def test_shift_by_seconds() -> None:
    shifted = _entry().shift_by_seconds(2.5)
    assert shifted.start == TimeValue(3500)
    assert shifted.end == TimeValue(5500)
    assert shifted.text == "Hello"
    assert shifted.index == 1


def test_shift_keeps_duration_unless_clamped() -> None:
    original = _entry(5000, 7500)
    shifted = original.shift_by_seconds(-1.25)
    assert (shifted.start.milliseconds - original.start.milliseconds) == (
        shifted.end.milliseconds - original.end.milliseconds
    )


def test_large_negative_shift_clamps_each_time() -> None:
    shifted = _entry(1000, 3000).shift_by_seconds(-2)
    assert shifted.start == TimeValue(0)
    assert shifted.end == TimeValue(1000)
    both = _entry(1000, 3000).shift_by_seconds(-60)
    assert both.start == TimeValue(0)
    assert both.end == TimeValue(0)


def test_zero_shift_and_unit_ratio_are_identity() -> None:
    entry = _entry(1234, 5678)
    assert entry.shift_by_seconds(0) == entry
    assert entry.convert_frame_rate(Decimal("1")) == entry


def test_convert_frame_rate() -> None:
    entry = SubtitleEntry(1, TimeValue(10_000), TimeValue(12_000), "x")
    converted = entry.convert_frame_rate(conversion_ratio(FrameRate.FPS_25, FrameRate.FPS_30))
    assert converted.start == TimeValue(8333)
    assert converted.end == TimeValue(10_000)


def test_convert_and_back_within_one_millisecond() -> None:
    there = conversion_ratio(FrameRate.FPS_23_976, FrameRate.FPS_25)
    back = conversion_ratio(FrameRate.FPS_25, FrameRate.FPS_23_976)
    for ms in (0, 1, 999, 61_001, 3_599_999, 7_654_321):
        entry = _entry(ms, ms + 1500)
        result = entry.convert_frame_rate(there).convert_frame_rate(back)
        assert abs(result.start.milliseconds - ms) <= 1
        assert abs(result.end.milliseconds - (ms + 1500)) <= 1


def test_entries_are_immutable() -> None:
    entry = _entry()
    with pytest.raises(AttributeError):
        entry.text = "changed"


def test_to_srt_block() -> None:
    assert _entry().to_srt_block() == "1\n00:00:01,000 --> 00:00:03,000\nHello"


def test_parse_strict_reports_context() -> None:
    with pytest.raises(InvalidSubtitleError) as info:
        SubtitleEntry.parse_strict(4, "00:00:01,000 -->", "Some text")
    err = info.value
    assert err.subtitle_index == 4
    assert err.start_time == TimeValue(1000)
    assert str(err) == (
        'Subtitle #4: Invalid timeline format - missing end time: 00:00:01,000 --> '
        '[start: 00:00:01,000] Text: "Some text"'
    )


def test_parse_strict_rejects_empty_timeline_and_blank_text() -> None:
    with pytest.raises(InvalidSubtitleError, match="Timeline cannot be empty"):
        SubtitleEntry.parse_strict(1, "", "Hi")
    with pytest.raises(InvalidSubtitleError, match="cannot be empty or blank"):
        SubtitleEntry.parse_strict(1, "00:00:01,000 --> 00:00:02,000", "   ")


def test_validate_rejects_bad_index_and_order() -> None:
    with pytest.raises(InvalidSubtitleError, match="index must be positive"):
        SubtitleEntry(0, TimeValue(0), TimeValue(1), "x").validate()
    with pytest.raises(InvalidSubtitleError, match="before start"):
        SubtitleEntry(2, TimeValue(5000), TimeValue(1000), "x").validate()


def test_error_message_truncates_long_text() -> None:
    err = InvalidSubtitleError("Boom", 3, subtitle_text="a" * 60 + "\nb")
    assert str(err) == 'Subtitle #3: Boom Text: "' + "a" * 47 + '..."'
    multi = InvalidSubtitleError("Boom", subtitle_text="one\ntwo")
    assert str(multi) == 'Boom Text: "one\\ntwo"'


def test_named_constructors_accept_missing_context() -> None:
    err = InvalidSubtitleError.end_before_start(7, TimeValue(2000), TimeValue(1000), None)
    assert err.subtitle_text is None
    assert str(err) == (
        "Subtitle #7: End time cannot be before start time "
        "[start: 00:00:02,000, end: 00:00:01,000]"
    )
    assert str(InvalidSubtitleError.empty_timeline(None, None)) == "Timeline cannot be empty"
    assert str(InvalidSubtitleError.invalid_timeline_format(2, "junk", "")) == (
        "Subtitle #2: Invalid timeline format: junk"
    )
