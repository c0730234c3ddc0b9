from decimal import Decimal

import pytest

from frame_rate import FrameRate, closest_frame_rate, conversion_ratio


def test_conversion_ratio_has_ten_decimals() -> None:
    assert conversion_ratio(FrameRate.FPS_25, FrameRate.FPS_30) == Decimal("0.8333333333")
    assert conversion_ratio(FrameRate.FPS_23_976, FrameRate.FPS_25) == Decimal("0.9590400000")
    assert conversion_ratio(FrameRate.FPS_24, FrameRate.FPS_24) == Decimal("1.0000000000")


def test_labels() -> None:
    assert FrameRate.FPS_25.name_with_description == "25 (European TV)"
    assert FrameRate.FPS_23_976.name_with_fps_suffix == "23.976 fps"
    assert FrameRate.FPS_23_976.filename_label == "23_976_fps"
    assert str(FrameRate.FPS_60) == "60 (games, sports)"


def test_from_value() -> None:
    assert FrameRate.from_value("29.97") is FrameRate.FPS_29_97
    assert FrameRate.from_value("25 fps") is FrameRate.FPS_25
    assert FrameRate.from_value("24.000") is FrameRate.FPS_24
    with pytest.raises(ValueError):
        FrameRate.from_value("42")


def test_closest_frame_rate() -> None:
    assert closest_frame_rate(Decimal(24000) / Decimal(1001)) is FrameRate.FPS_23_976
    assert closest_frame_rate(Decimal("25")) is FrameRate.FPS_25
    assert closest_frame_rate(Decimal("59.9")) is FrameRate.FPS_59_94
    assert closest_frame_rate(Decimal("15")) is None
    assert closest_frame_rate(None) is None
