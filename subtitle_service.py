from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Union

import subtitle_cleaner
from frame_rate import FrameRate, conversion_ratio
from settings import SubtitleSyncSettings
from srt_utils import parse_srt, write_srt
from subtitle_entry import SubtitleEntry

logger = logging.getLogger("subtitle_sync")

SHIFTED_SUFFIX = "_shifted"
CLEANED_SUFFIX = "_cleaned"


class ParameterError(ValueError):
    """Rejected operation parameters; raised before any file is touched."""


def output_path_for(input_path: Union[str, Path], suffix: str) -> Path:
    """``dir/name.ext`` -> ``dir/name<suffix>.srt`` (only the last extension is dropped)."""
    input_path = Path(input_path)
    name = input_path.name
    dot = name.rfind(".")
    base_name = name if dot == -1 else name[:dot]
    return input_path.parent / f"{base_name}{suffix}.srt"


def frame_rate_suffix(source: FrameRate, target: FrameRate) -> str:
    return f"_{source.filename_label}_to_{target.filename_label}"


class SubtitleService:
    def __init__(self, settings: Optional[SubtitleSyncSettings] = None) -> None:
        self.settings = settings or SubtitleSyncSettings()

    def load_entries(self, input_path: Union[str, Path]) -> List[SubtitleEntry]:
        return parse_srt(
            input_path,
            fallback_encoding=self.settings.fallback_encoding,
            strict=self.settings.strict_parsing,
        )

    def create_shifted_subtitles(
        self,
        input_path: Union[str, Path],
        offset_seconds: float,
        remove_sdh: bool = False,
        remove_spam: bool = False,
    ) -> Path:
        if not math.isfinite(offset_seconds):
            raise ParameterError(f"Offset must be a finite number of seconds, got: {offset_seconds}")

        logger.info(f"[SERVICE] Shifting {input_path} by {offset_seconds:+.3f} s")
        entries = self.load_entries(input_path)
        shifted = [entry.shift_by_seconds(offset_seconds) for entry in entries]
        shifted = self._clean(shifted, remove_sdh, remove_spam)
        return self._write(output_path_for(input_path, SHIFTED_SUFFIX), shifted)

    def create_frame_rate_converted_subtitles(
        self,
        input_path: Union[str, Path],
        from_rate: FrameRate,
        to_rate: FrameRate,
        remove_sdh: bool = False,
        remove_spam: bool = False,
    ) -> Path:
        if from_rate == to_rate:
            raise ParameterError("Source and target frame rate are identical")

        ratio = conversion_ratio(from_rate, to_rate)
        logger.info(
            f"[SERVICE] Converting {input_path} from {from_rate.name_with_fps_suffix} "
            f"to {to_rate.name_with_fps_suffix} (ratio {ratio})"
        )
        entries = self.load_entries(input_path)
        converted = [entry.convert_frame_rate(ratio) for entry in entries]
        converted = self._clean(converted, remove_sdh, remove_spam)
        output_path = output_path_for(input_path, frame_rate_suffix(from_rate, to_rate))
        return self._write(output_path, converted)

    def create_cleaned_subtitles(
        self,
        input_path: Union[str, Path],
        remove_sdh: bool = True,
        remove_spam: bool = True,
    ) -> Path:
        if not (remove_sdh or remove_spam):
            raise ParameterError("Nothing to clean: enable SDH or spam removal")

        logger.info(f"[SERVICE] Cleaning {input_path} (sdh={remove_sdh}, spam={remove_spam})")
        entries = self.load_entries(input_path)
        cleaned = self._clean(entries, remove_sdh, remove_spam)
        return self._write(output_path_for(input_path, CLEANED_SUFFIX), cleaned)

    def _write(self, output_path: Path, entries: List[SubtitleEntry]) -> Path:
        return write_srt(output_path, entries, encoding=self.settings.output_encoding)

    @staticmethod
    def _clean(
        entries: List[SubtitleEntry], remove_sdh: bool, remove_spam: bool
    ) -> List[SubtitleEntry]:
        before = len(entries)
        if remove_spam:
            entries = subtitle_cleaner.remove_spam(entries)
        if remove_sdh:
            entries = subtitle_cleaner.remove_sdh(entries)
        if len(entries) != before:
            logger.info(f"[SERVICE] Cleaning removed {before - len(entries)} entries")
        return entries
