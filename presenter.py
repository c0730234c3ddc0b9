from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from frame_rate import FrameRate
from settings import SubtitleSyncSettings
from subtitle_entry import InvalidSubtitleError
from subtitle_service import ParameterError, SubtitleService
from video_metadata import FFprobeFrameRateProbe, VideoMetadataService
from worker import run_in_thread

logger = logging.getLogger("subtitle_sync")

DETECTION_FAILED_MESSAGE = (
    "Failed to detect frame rate from video file.\n"
    "Possible reasons:\n"
    "- Unsupported file format\n"
    "- Corrupted metadata\n"
    "- Missing frame rate information in file\n"
    "- ffprobe is not installed"
)


def error_message(exc: BaseException) -> str:
    """Short user-facing text for a failed operation."""
    if isinstance(exc, ParameterError):
        return f"Parameter error: {exc}"
    if isinstance(exc, InvalidSubtitleError):
        return f"Invalid subtitle file: {exc}"
    if isinstance(exc, OSError):
        return f"Failed to process file: {exc}"
    return f"An unexpected error occurred: {exc}"


def format_offset(offset_seconds: float) -> str:
    return f"{offset_seconds:.1f} s"


class SubtitleSyncPresenter(QObject):
    """
    Connects a subtitle-sync view to the core services.

    The view reports user actions by calling the ``on_*`` methods and listens
    to the signals below. Every operation is wrapped in busy_changed(True) /
    busy_changed(False) and ends with exactly one succeeded or failed signal.
    With ``run_async`` the work runs on a QThread and results arrive through
    the Qt event loop.
    """

    busy_changed = pyqtSignal(bool)
    succeeded = pyqtSignal(str)
    failed = pyqtSignal(str)
    subtitle_file_changed = pyqtSignal(str)
    video_file_changed = pyqtSignal(str)
    frame_rate_detected = pyqtSignal(object)
    offset_text_changed = pyqtSignal(str)

    def __init__(
        self,
        subtitle_service: Optional[SubtitleService] = None,
        video_service: Optional[VideoMetadataService] = None,
        settings: Optional[SubtitleSyncSettings] = None,
        run_async: bool = False,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings or SubtitleSyncSettings()
        self.subtitle_service = subtitle_service or SubtitleService(self.settings)
        self.video_service = video_service or VideoMetadataService(
            FFprobeFrameRateProbe(self.settings.ffprobe_path)
        )
        self.run_async = run_async
        self.subtitle_file: Optional[Path] = None
        self.video_file: Optional[Path] = None
        self._threads: List[QThread] = []

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def on_subtitle_file_selected(self, path: Union[str, Path, None]) -> None:
        if not path:
            return
        self.subtitle_file = Path(path)
        logger.info(f"[PRESENTER] Subtitle file selected: {self.subtitle_file}")
        self.subtitle_file_changed.emit(self.subtitle_file.name)

    def on_video_file_selected(self, path: Union[str, Path, None]) -> None:
        if not path:
            return
        self.video_file = Path(path)
        logger.info(f"[PRESENTER] Video file selected: {self.video_file}")
        self.video_file_changed.emit(self.video_file.name)
        self.on_detect_frame_rate_from_video()

    def on_offset_changed(self, offset_seconds: float) -> None:
        self.offset_text_changed.emit(format_offset(offset_seconds))

    def on_save_shifted_subtitles(
        self, offset_seconds: float, remove_sdh: bool = False, remove_spam: bool = False
    ) -> None:
        subtitle_file = self._require_subtitle_file()
        if subtitle_file is None:
            return
        try:
            self.validate_offset(offset_seconds)
        except ParameterError as exc:
            self._report_error(exc)
            return

        def task() -> Path:
            return self.subtitle_service.create_shifted_subtitles(
                subtitle_file, offset_seconds, remove_sdh=remove_sdh, remove_spam=remove_spam
            )

        self._execute(task, lambda output: f"Shifted subtitles saved as:\n{output.name}")

    def on_frame_rate_conversion(
        self,
        from_rate: FrameRate,
        to_rate: FrameRate,
        remove_sdh: bool = False,
        remove_spam: bool = False,
    ) -> None:
        subtitle_file = self._require_subtitle_file()
        if subtitle_file is None:
            return
        if from_rate == to_rate:
            self._report_error(ParameterError("Source and target frame rate are identical."))
            return

        def task() -> Path:
            return self.subtitle_service.create_frame_rate_converted_subtitles(
                subtitle_file, from_rate, to_rate, remove_sdh=remove_sdh, remove_spam=remove_spam
            )

        self._execute(task, lambda output: f"Converted subtitles saved as:\n{output.name}")

    def on_clean_subtitles(self, remove_sdh: bool = True, remove_spam: bool = True) -> None:
        subtitle_file = self._require_subtitle_file()
        if subtitle_file is None:
            return

        def task() -> Path:
            return self.subtitle_service.create_cleaned_subtitles(
                subtitle_file, remove_sdh=remove_sdh, remove_spam=remove_spam
            )

        self._execute(task, lambda output: f"Cleaned subtitles saved as:\n{output.name}")

    def on_detect_frame_rate_from_video(self) -> None:
        if self.video_file is None:
            self.failed.emit("No video file selected.")
            return
        video_file = self.video_file

        def task() -> Optional[FrameRate]:
            return self.video_service.detect_frame_rate(video_file)

        self._execute(task, self._frame_rate_message, self._frame_rate_done)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def validate_offset(self, offset_seconds: float) -> None:
        limit = self.settings.max_offset_seconds
        if not math.isfinite(offset_seconds) or abs(offset_seconds) > limit:
            raise ParameterError(
                f"Offset must be between -{limit:g} and {limit:g} seconds, got: {offset_seconds}"
            )

    def _require_subtitle_file(self) -> Optional[Path]:
        if self.subtitle_file is None:
            self.failed.emit("No subtitle file selected.")
        return self.subtitle_file

    def _frame_rate_done(self, frame_rate: Optional[FrameRate]) -> bool:
        if frame_rate is None:
            self.failed.emit(DETECTION_FAILED_MESSAGE)
            return False
        self.frame_rate_detected.emit(frame_rate)
        return True

    @staticmethod
    def _frame_rate_message(frame_rate: FrameRate) -> str:
        return f"Frame rate detected: {frame_rate.name_with_description}"

    def _execute(
        self,
        task: Callable[[], Any],
        success_message: Callable[[Any], str],
        on_result: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        def finished(result: Any) -> None:
            try:
                if on_result is None or on_result(result):
                    self.succeeded.emit(success_message(result))
            finally:
                self.busy_changed.emit(False)

        def errored(exc: BaseException) -> None:
            try:
                self._report_error(exc)
            finally:
                self.busy_changed.emit(False)

        self.busy_changed.emit(True)
        if self.run_async:
            run_in_thread(self, self._threads, task, finished, errored)
            return
        try:
            result = task()
        except Exception as exc:
            errored(exc)
        else:
            finished(result)

    def _report_error(self, exc: BaseException) -> None:
        message = error_message(exc)
        if isinstance(exc, ParameterError):
            logger.warning(f"[PRESENTER] {message}")
        else:
            logger.error(f"[PRESENTER] {message}", exc_info=exc)
        self.failed.emit(message)
