from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_FALLBACK_ENCODING = "windows-1250"
OUTPUT_ENCODING = "utf-8"
MAX_OFFSET_SECONDS = 60.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SubtitleSyncSettings:
    """
    Runtime options for one subtitle-sync session.

    Nothing here is persisted; values come from defaults, environment
    variables (see :meth:`from_env`) or command-line flags.
    """

    # Used when charset detection is not confident.
    # Central European legacy subtitle files are the common case.
    fallback_encoding: str = DEFAULT_FALLBACK_ENCODING

    # Output is always written without a byte-order mark.
    output_encoding: str = OUTPUT_ENCODING

    # Raise InvalidSubtitleError on malformed blocks instead of defaulting them
    strict_parsing: bool = False

    ffprobe_path: str = "ffprobe"

    # Offsets accepted from the presentation layer (seconds, both directions)
    max_offset_seconds: float = MAX_OFFSET_SECONDS

    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SubtitleSyncSettings":
        env = os.environ if environ is None else environ
        log_file = env.get("SUBTITLE_SYNC_LOG_FILE")
        return cls(
            fallback_encoding=env.get("SUBTITLE_SYNC_FALLBACK_ENCODING") or DEFAULT_FALLBACK_ENCODING,
            strict_parsing=env.get("SUBTITLE_SYNC_STRICT", "").strip().lower() in _TRUE_VALUES,
            ffprobe_path=env.get("SUBTITLE_SYNC_FFPROBE") or "ffprobe",
            log_file=Path(log_file).expanduser() if log_file else None,
        )
