from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Optional, Union

from chardet import UniversalDetector

logger = logging.getLogger("subtitle_sync")

BUFFER_SIZE = 4096
# Guesses below this are treated as undetected
MIN_CONFIDENCE = 0.5


def detect_charset(file_path: Union[str, Path]) -> Optional[str]:
    """
    Guess the text encoding of a file.

    Bytes are fed to the detector in BUFFER_SIZE chunks until it is confident
    or the file ends. Returns a Python codec name, or None when the guess is
    below MIN_CONFIDENCE, unusable, or the file could not be read.
    """
    path = Path(file_path)
    detector = UniversalDetector()
    try:
        with path.open("rb") as handle:
            while not detector.done:
                chunk = handle.read(BUFFER_SIZE)
                if not chunk:
                    break
                detector.feed(chunk)
    except OSError as exc:
        logger.debug(f"[CHARSET] Could not read {path} for encoding detection: {exc}")
        return None
    finally:
        detector.close()

    detected = detector.result.get("encoding")
    confidence = detector.result.get("confidence") or 0.0
    if not detected:
        logger.info(f"[CHARSET] Could not detect encoding of {path}")
        return None
    if confidence < MIN_CONFIDENCE:
        logger.info(
            f"[CHARSET] Ignoring guess '{detected}' for {path.name} (confidence {confidence:.2f})"
        )
        return None

    try:
        codec = codecs.lookup(detected)
    except LookupError:
        logger.info(f"[CHARSET] Detected encoding '{detected}' is not supported: {path}")
        return None
    logger.debug(f"[CHARSET] {path.name}: {codec.name} (confidence {confidence:.2f})")
    return codec.name


def detect_charset_with_fallback(file_path: Union[str, Path], fallback_encoding: str) -> str:
    encoding = detect_charset(file_path)
    if encoding is None:
        logger.info(f"[CHARSET] Using fallback encoding '{fallback_encoding}' for {file_path}")
        return fallback_encoding
    logger.info(f"[CHARSET] Detected encoding '{encoding}' for {file_path}")
    return encoding
