"""Rules for spotting and stripping SDH annotations in a single caption line.

Two ordered rule tables drive the cleaner:

* ``SDH_ONLY_RULES`` - predicates. A line (italic tags removed, trimmed)
  matching any of them carries no dialogue and is dropped.
* ``REWRITE_RULES`` - substitutions applied one after another to the lines
  that survive. A rule may be skipped by its ``unless`` guard.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern

MUSIC_SYMBOLS = "♪♫"

ITALIC_TAGS = re.compile(r"</?i>", re.IGNORECASE)
SONG_INFO_MARKERS = ('"', " by ", "playing")


@dataclass(frozen=True)
class SdhRule:
    name: str
    pattern: Pattern[str]
    replacement: str = ""
    # 0 replaces every match, 1 only the first
    count: int = 1
    unless: Optional[Callable[[str], bool]] = None

    def matches(self, line: str) -> bool:
        return self.pattern.match(line) is not None

    def apply(self, line: str) -> str:
        if self.unless is not None and self.unless(line):
            return line
        return self.pattern.sub(self.replacement, line, count=self.count)


def remove_italic_tags(text: str) -> str:
    return ITALIC_TAGS.sub("", text)


def contains_song_info(line: str) -> bool:
    cleaned = remove_italic_tags(line)
    return any(marker in cleaned for marker in SONG_INFO_MARKERS)


def has_music_symbols(line: str) -> bool:
    return any(symbol in line for symbol in MUSIC_SYMBOLS)


SDH_ONLY_RULES: List[SdhRule] = [
    # "(door slams)", also doubled "((whispers))"
    SdhRule("sound_description_parens", re.compile(r"^\s*\(?\s*\([^)]+\)\s*\)?\s*$")),
    # "[thunder rumbling]"
    SdhRule("sound_description_brackets", re.compile(r"^\s*\[\s*[^\]]+\s*\]\s*$")),
    # "♪ ♪"
    SdhRule("only_music_symbols", re.compile(rf"^[\s{MUSIC_SYMBOLS}]+$")),
]

REWRITE_RULES: List[SdhRule] = [
    # "JOHN: Hi", "MAN (over radio): Copy"
    SdhRule("speaker_name", re.compile(r"^[A-Z][A-Z\s]+(?:\([^)]+\))?:\s*")),
    # "[John] Hi"
    SdhRule("speaker_name_brackets", re.compile(r"^\[[^\]]+\]\s*")),
    # "[sighs] Fine" - lowercase tag left after the speaker rules
    SdhRule("sound_in_brackets", re.compile(r"^\s*\[\s*[a-z][^\]]*\]\s*")),
    # "Fine (sighs) whatever"; parentheses stay in song credits
    SdhRule(
        "sound_in_parens",
        re.compile(r"\s*\([^)]+\)\s*"),
        replacement=" ",
        count=0,
        unless=contains_song_info,
    ),
]


def matching_sdh_rule(line: str) -> Optional[str]:
    """Name of the rule that marks ``line`` as SDH-only, or None."""
    cleaned = remove_italic_tags(line).strip()
    if not cleaned:
        return "blank"
    for rule in SDH_ONLY_RULES:
        if rule.matches(cleaned):
            return rule.name
    return None


def is_only_sdh_content(line: str) -> bool:
    return matching_sdh_rule(line) is not None


def clean_line(line: str) -> str:
    result = line
    for rule in REWRITE_RULES:
        result = rule.apply(result)
    return result.strip()
