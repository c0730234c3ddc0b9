from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

import sdh_patterns
from subtitle_entry import SubtitleEntry

logger = logging.getLogger("subtitle_sync")

URL_PATTERN = re.compile(r"(?:https?://|www\.)\S+")
LEADING_DASH = re.compile(r"^-\s*")
DASH_PREFIX = "- "


def contains_url(text: str) -> bool:
    return URL_PATTERN.search(text) is not None


def remove_spam(entries: Iterable[SubtitleEntry]) -> List[SubtitleEntry]:
    """Drop every entry whose text advertises a URL."""
    kept = []
    for entry in entries:
        if contains_url(entry.text):
            logger.debug(f"[CLEANER] Removing spam entry #{entry.index}: {entry.text!r}")
            continue
        kept.append(entry)
    return kept


def remove_sdh(entries: Iterable[SubtitleEntry]) -> List[SubtitleEntry]:
    """Strip hearing-impaired annotations; entries left without text are dropped."""
    cleaned_entries = []
    for entry in entries:
        cleaned = clean_entry(entry)
        if cleaned is None:
            logger.debug(f"[CLEANER] Removing SDH-only entry #{entry.index}")
            continue
        cleaned_entries.append(cleaned)
    return cleaned_entries


def clean_entry(entry: SubtitleEntry) -> Optional[SubtitleEntry]:
    kept_lines = []
    had_dash = []
    for line in entry.text.split("\n"):
        processed = process_line(line)
        if processed.strip():
            kept_lines.append(processed)
            had_dash.append(line.strip().startswith("-"))

    # A dash only marks a speaker change when several lines are left
    if len(kept_lines) > 1:
        kept_lines = [
            DASH_PREFIX + line if dash else line
            for line, dash in zip(kept_lines, had_dash)
        ]

    text = "\n".join(kept_lines)
    if not text.strip():
        return None
    return entry.with_text(text)


def process_line(line: str) -> str:
    without_dash = LEADING_DASH.sub("", line.lstrip(), count=1)
    if sdh_patterns.is_only_sdh_content(without_dash):
        return ""

    cleaned = sdh_patterns.clean_line(without_dash)

    # Lyrics are kept verbatim
    if sdh_patterns.has_music_symbols(line) and cleaned.strip():
        return without_dash
    return cleaned
