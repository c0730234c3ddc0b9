from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

LOGGER_NAME = "subtitle_sync"


class LogSignalHandler(logging.Handler):
    """Forwards formatted records to a Qt signal."""

    def __init__(self, log_signal: pyqtSignal) -> None:
        super().__init__()
        self.log_signal = log_signal

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)
        self.log_signal.emit(msg)


class LogEmitter(QObject):
    """Log lines for a presentation layer."""
    log_message = pyqtSignal(str)


def setup_logging(
    log_file: Optional[Path] = None,
    console_level: int = logging.INFO,
    with_signals: bool = True,
) -> tuple[logging.Logger, Optional[LogEmitter]]:
    """Configure the subtitle_sync logger.

    Args:
        log_file: Optional file receiving DEBUG and above.
        console_level: Level for the stderr handler.
        with_signals: Also emit every line through a LogEmitter (for a UI).

    Returns:
        The configured logger and the LogEmitter (None without signals).
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Repeated setup must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    log_emitter = None
    if with_signals:
        log_emitter = LogEmitter()
        signal_handler = LogSignalHandler(log_emitter.log_message)
        signal_handler.setLevel(logging.INFO)
        signal_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(signal_handler)

    return logger, log_emitter
