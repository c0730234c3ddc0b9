from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from charset_detector import detect_charset_with_fallback
from settings import DEFAULT_FALLBACK_ENCODING, OUTPUT_ENCODING
from subtitle_entry import SubtitleEntry

logger = logging.getLogger("subtitle_sync")

BOM = "\ufeff"
INDEX_PATTERN = re.compile(r"[0-9]+")
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


class SubtitleFileError(OSError):
    pass


def read_srt_lines(
    path: Union[str, Path], fallback_encoding: str = DEFAULT_FALLBACK_ENCODING
) -> List[str]:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SubtitleFileError(f"Cannot read subtitle file {path}: {exc}") from exc
    encoding = detect_charset_with_fallback(path, fallback_encoding)
    try:
        content = raw.decode(encoding)
    except UnicodeDecodeError as exc:
        logger.warning(
            f"[PARSER] {path.name} is not valid {encoding} ({exc.reason}), "
            f"decoding as {fallback_encoding}"
        )
        try:
            content = raw.decode(fallback_encoding, errors="replace")
        except LookupError as lookup_exc:
            raise SubtitleFileError(
                f"Unknown fallback encoding '{fallback_encoding}'"
            ) from lookup_exc
    except LookupError as exc:
        raise SubtitleFileError(f"Unknown encoding '{encoding}' for {path}") from exc
    return split_lines(content)


def split_lines(content: str) -> List[str]:
    lines = LINE_BREAK_PATTERN.split(content)
    # A trailing newline does not start another line
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_srt(
    path: Union[str, Path],
    fallback_encoding: str = DEFAULT_FALLBACK_ENCODING,
    strict: bool = False,
) -> List[SubtitleEntry]:
    lines = read_srt_lines(path, fallback_encoding)
    entries = parse_srt_lines(lines, strict=strict)
    logger.info(f"[PARSER] Parsed {len(entries)} entries from {Path(path).name}")
    return entries


def parse_srt_text(text: str, strict: bool = False) -> List[SubtitleEntry]:
    return parse_srt_lines(split_lines(text), strict=strict)


def parse_srt_lines(lines: Sequence[str], strict: bool = False) -> List[SubtitleEntry]:
    """
    Turn decoded SRT lines into entries, in file order.

    A pure-digit line opens a block; the next line is its timeline and the
    following non-blank lines are its text. Anything else between blocks is
    skipped. In lenient mode bad timelines become zero timestamps; with
    ``strict`` an InvalidSubtitleError is raised instead.
    """
    entries: List[SubtitleEntry] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if i == 0 and line.startswith(BOM):
            line = line[len(BOM):]
        line = line.strip()

        if not INDEX_PATTERN.fullmatch(line):
            if line:
                logger.debug(f"[PARSER] Skipping stray line {i + 1}: {line[:40]!r}")
            i += 1
            continue

        index = int(line)
        i += 1
        time_line = lines[i].strip() if i < len(lines) else ""
        i += 1
        text_lines = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i])
            i += 1
        text = "\n".join(text_lines).strip()

        if strict:
            entries.append(SubtitleEntry.parse_strict(index, time_line, text))
        else:
            entries.append(SubtitleEntry.parse(index, time_line, text))
    return entries


def entries_to_srt_text(entries: Iterable[SubtitleEntry]) -> str:
    return "".join(f"{entry.to_srt_block()}\n\n" for entry in entries)


def write_srt(
    path: Union[str, Path], entries: Iterable[SubtitleEntry], encoding: str = OUTPUT_ENCODING
) -> Path:
    path = Path(path)
    content = entries_to_srt_text(entries)
    try:
        with path.open("w", encoding=encoding, newline="\n") as handle:
            handle.write(content)
    except OSError as exc:
        raise SubtitleFileError(f"Cannot write subtitle file {path}: {exc}") from exc
    logger.info(f"[WRITER] Wrote {path}")
    return path
