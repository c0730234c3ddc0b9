from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional, Union

RATIO_SCALE = Decimal("0.0000000001")  # 10 decimal digits
MAX_MATCH_DIFFERENCE = Decimal("0.5")


class FrameRate(Enum):
    """Known playback frame rates with exact decimal values."""

    FPS_23_976 = ("23.976", Decimal("23.976"), "film movies")
    FPS_24 = ("24", Decimal("24.000"), "film movies")
    FPS_25 = ("25", Decimal("25.000"), "European TV")
    FPS_29_97 = ("29.97", Decimal("29.970"), "American TV")
    FPS_30 = ("30", Decimal("30.000"), "American TV")
    FPS_50 = ("50", Decimal("50.000"), "European HD TV")
    FPS_59_94 = ("59.94", Decimal("59.940"), "American HD TV")
    FPS_60 = ("60", Decimal("60.000"), "games, sports")

    def __init__(self, label: str, precise_value: Decimal, description: str) -> None:
        self.label = label
        self.precise_value = precise_value
        self.description = description

    @property
    def name_with_description(self) -> str:
        return f"{self.label} ({self.description})"

    @property
    def name_with_fps_suffix(self) -> str:
        return f"{self.label} fps"

    @property
    def filename_label(self) -> str:
        """Form used in output file names, e.g. ``23_976_fps``."""
        return self.name_with_fps_suffix.replace(" ", "_").replace(".", "_")

    def __str__(self) -> str:
        return self.name_with_description

    @classmethod
    def from_value(cls, value: Union[str, float, Decimal]) -> "FrameRate":
        """Look up a rate by its label or numeric value ("25", "29.97", 23.976)."""
        text = str(value).strip().lower()
        if text.endswith("fps"):
            text = text[:-3].strip()
        for rate in cls:
            if rate.label == text:
                return rate
        try:
            numeric = Decimal(text)
        except ArithmeticError:
            numeric = None
        if numeric is not None:
            for rate in cls:
                if rate.precise_value == numeric:
                    return rate
        known = ", ".join(rate.label for rate in cls)
        raise ValueError(f"Unknown frame rate: {value!r} (known: {known})")


def conversion_ratio(source: FrameRate, target: FrameRate) -> Decimal:
    """Ratio source/target rounded half-up to 10 decimal places."""
    return (source.precise_value / target.precise_value).quantize(
        RATIO_SCALE, rounding=ROUND_HALF_UP
    )


def closest_frame_rate(fps: Union[Decimal, float, None]) -> Optional[FrameRate]:
    """Map a measured fps to the nearest known rate if it is within 0.5 fps."""
    if fps is None:
        return None
    measured = Decimal(str(fps))
    closest = min(FrameRate, key=lambda rate: abs(rate.precise_value - measured))
    if abs(closest.precise_value - measured) < MAX_MATCH_DIFFERENCE:
        return closest
    return None
