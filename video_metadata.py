from __future__ import annotations

import logging
import subprocess
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional, Union

from frame_rate import FrameRate, closest_frame_rate

logger = logging.getLogger("subtitle_sync")

FrameRateProbe = Callable[[Path], Optional[Decimal]]

PROBE_TIMEOUT_SECONDS = 60
VERSION_TIMEOUT_SECONDS = 5


class FrameRateProbeError(RuntimeError):
    pass


def parse_frame_rate(output: str) -> Decimal:
    """Parse ffprobe's ``num/den`` rate (e.g. ``24000/1001``) into an exact fps."""
    lines = (output or "").strip().splitlines()
    # csv output can carry a trailing separator
    line = lines[0].strip().rstrip(",") if lines else ""
    parts = line.split("/")
    if len(parts) != 2:
        raise FrameRateProbeError(f"Unexpected frame rate format: {line!r}")
    try:
        numerator = Decimal(parts[0].strip())
        denominator = Decimal(parts[1].strip())
    except InvalidOperation as exc:
        raise FrameRateProbeError(f"Unexpected frame rate format: {line!r}") from exc
    if not (numerator.is_finite() and denominator.is_finite()):
        raise FrameRateProbeError(f"Unexpected frame rate format: {line!r}")
    if denominator == 0:
        raise FrameRateProbeError(f"Frame rate has zero denominator: {line!r}")
    return numerator / denominator


class FFprobeFrameRateProbe:
    """Reads the first video stream's frame rate with ffprobe."""

    def __init__(
        self,
        ffprobe_path: str = "ffprobe",
        runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    ) -> None:
        self.ffprobe_path = ffprobe_path
        self.runner = runner or subprocess.run

    def is_available(self) -> bool:
        try:
            result = self.runner(
                [self.ffprobe_path, "-version"],
                capture_output=True,
                text=True,
                timeout=VERSION_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError):
            return False
        return result.returncode == 0

    def probe(self, video_path: Path) -> Decimal:
        cmd = [
            self.ffprobe_path,
            "-v",
            "quiet",
            "-show_entries",
            "stream=r_frame_rate",
            "-select_streams",
            "v:0",
            "-of",
            "csv=p=0",
            str(video_path),
        ]
        logger.debug(f"[FFPROBE] Running: {' '.join(cmd)}")
        try:
            result = self.runner(cmd, capture_output=True, text=True, timeout=PROBE_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired as exc:
            raise FrameRateProbeError(f"ffprobe timed out after {PROBE_TIMEOUT_SECONDS}s") from exc
        except OSError as exc:
            raise FrameRateProbeError(f"Failed to run ffprobe: {exc}") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise FrameRateProbeError(f"ffprobe failed with code {result.returncode}: {stderr}")
        if not (result.stdout or "").strip():
            raise FrameRateProbeError("ffprobe returned no frame rate")
        return parse_frame_rate(result.stdout)

    def __call__(self, video_path: Path) -> Optional[Decimal]:
        """Probe function form: exact fps, or None when it cannot be determined."""
        if not self.is_available():
            logger.warning(f"[FFPROBE] {self.ffprobe_path} is not available on this system")
            return None
        try:
            fps = self.probe(video_path)
        except FrameRateProbeError as exc:
            logger.warning(f"[FFPROBE] Could not read frame rate from {video_path.name}: {exc}")
            return None
        logger.info(f"[FFPROBE] {video_path.name}: {fps:.3f} fps")
        return fps


class VideoMetadataService:
    def __init__(self, probe: Optional[FrameRateProbe] = None) -> None:
        self.probe = probe or FFprobeFrameRateProbe()

    def detect_frame_rate(self, video_path: Union[str, Path, None]) -> Optional[FrameRate]:
        """Nearest known frame rate of a video, or None when undetected."""
        if video_path is None:
            return None
        path = Path(video_path)
        if not path.exists():
            logger.warning(f"[FFPROBE] Video file not found: {path}")
            return None

        fps = self.probe(path)
        if fps is None:
            return None
        frame_rate = closest_frame_rate(fps)
        if frame_rate is None:
            logger.warning(f"[FFPROBE] {fps:.3f} fps does not match any known frame rate")
        return frame_rate
