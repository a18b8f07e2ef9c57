"""Regex compilation and channel filtering.

A channel matches when the pattern is found anywhere in its name, topic or
purpose (each tested on its own). Flags follow the usual single-letter
convention: ``i`` case-insensitive, ``m`` multiline anchors, ``s`` dot matches
newline. ``g``, ``u`` and ``y`` are accepted and have no effect on a
found/not-found test.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from backend.app.errors import InvalidPattern
from backend.app.models.channel import Channel, MatchResult

_FLAG_MAP: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": re.NOFLAG,
    "u": re.NOFLAG,
    "y": re.NOFLAG,
}


def parse_flags(flags: str) -> re.RegexFlag:
    """Translate a flag string into ``re`` flags, rejecting unknown or repeated letters."""
    compiled = re.NOFLAG
    seen: set[str] = set()
    for letter in flags:
        if letter not in _FLAG_MAP:
            raise InvalidPattern(f"Invalid regex flags '{flags}': unsupported flag '{letter}'")
        if letter in seen:
            raise InvalidPattern(f"Invalid regex flags '{flags}': duplicate flag '{letter}'")
        seen.add(letter)
        compiled |= _FLAG_MAP[letter]
    return compiled


def compile_pattern(pattern: str, flags: str = "i") -> re.Pattern[str]:
    """Compile ``pattern`` under ``flags`` or raise InvalidPattern with the compiler message."""
    re_flags = parse_flags(flags)
    try:
        return re.compile(pattern, re_flags)
    except re.error as exc:
        raise InvalidPattern(f"Invalid regex pattern: {exc}") from exc


def channel_matches(regex: re.Pattern[str], channel: Channel) -> bool:
    return any(regex.search(text) for text in channel.searchable_fields)


def filter_channels(regex: re.Pattern[str], channels: Iterable[Channel]) -> list[Channel]:
    """Keep matching channels in their original order."""
    return [ch for ch in channels if channel_matches(regex, ch)]


def match_channels(
    pattern: str,
    flags: str,
    regex: re.Pattern[str],
    channels: list[Channel],
) -> MatchResult:
    matched = filter_channels(regex, channels)
    return MatchResult(
        pattern=pattern,
        flags=flags,
        total_channels=len(channels),
        matched_channels=len(matched),
        channels=matched,
    )
