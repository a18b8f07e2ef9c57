"""Unit tests for regex compilation and channel filtering."""

import re

import pytest

from backend.app.errors import InvalidPattern
from backend.app.models.channel import Channel
from backend.app.services.pattern_matcher import (
    channel_matches,
    compile_pattern,
    filter_channels,
    match_channels,
    parse_flags,
)

CHANNELS = [
    Channel(id="C1", name="dev-team"),
    Channel(id="C2", name="marketing"),
    Channel(id="C3", name="dev-ops", topic="archive"),
]


def test_default_flags_are_case_insensitive():
    regex = compile_pattern("^DEV")
    assert regex.flags & re.IGNORECASE
    assert channel_matches(regex, CHANNELS[0])


def test_empty_flags_are_case_sensitive():
    regex = compile_pattern("^DEV", "")
    assert not channel_matches(regex, CHANNELS[0])


def test_unbalanced_parenthesis_is_invalid():
    with pytest.raises(InvalidPattern) as excinfo:
        compile_pattern("(", "i")
    assert "Invalid regex pattern" in excinfo.value.message
    # The compiler's own message is kept for diagnosis
    assert "missing )" in excinfo.value.message


@pytest.mark.parametrize("flags", ["q", "ii", "ix"])
def test_unknown_or_repeated_flags_are_invalid(flags):
    with pytest.raises(InvalidPattern, match="Invalid regex flags"):
        compile_pattern("dev", flags)


def test_global_and_unicode_flags_are_accepted():
    assert parse_flags("gu") == re.NOFLAG
    assert parse_flags("ims") == re.IGNORECASE | re.MULTILINE | re.DOTALL


def test_multiline_flag_anchors_each_line():
    channel = Channel(id="C1", name="general", purpose="first line\ndev stuff")
    assert not channel_matches(compile_pattern("^dev", "i"), channel)
    assert channel_matches(compile_pattern("^dev", "im"), channel)


def test_match_in_topic_alone_is_enough():
    channel = Channel(id="C9", name="random", topic="Deploys for dev")
    assert channel_matches(compile_pattern("dev$"), channel)


def test_match_in_purpose_alone_is_enough():
    channel = Channel(id="C9", name="random", purpose="Sandbox")
    assert channel_matches(compile_pattern("sandbox"), channel)


def test_filter_preserves_source_order():
    regex = compile_pattern("^dev")
    assert [ch.name for ch in filter_channels(regex, CHANNELS)] == ["dev-team", "dev-ops"]


def test_match_channels_counts():
    regex = compile_pattern("^dev")
    result = match_channels("^dev", "i", regex, CHANNELS)
    assert result.pattern == "^dev"
    assert result.flags == "i"
    assert result.total_channels == 3
    assert result.matched_channels == 2
    assert result.channel_names == ["dev-team", "dev-ops"]


def test_every_channel_is_classified_correctly():
    regex = compile_pattern("arch|ops")
    result = match_channels("arch|ops", "i", regex, CHANNELS)
    matched_ids = {ch.id for ch in result.channels}
    for channel in CHANNELS:
        hit = any(regex.search(text) for text in (channel.name, channel.topic, channel.purpose))
        assert (channel.id in matched_ids) == hit
