"""Tests for the channel grouping service."""

import pytest
from conftest import FakeSlackClient, make_service, slack_channel

from backend.app.errors import GroupNotFound, InvalidPattern, SavedGroupsDisabled, SourceUnavailable
from backend.app.services.channel_grouper import ChannelGrouperService, build_service
from backend.app.services.channel_source import SlackChannelSource
from backend.app.services.suggestions import SUGGESTIONS


async def test_group_by_prefix(service: ChannelGrouperService):
    result = await service.group_by_regex("^dev")

    assert result.pattern == "^dev"
    assert result.flags == "i"
    assert result.total_channels == 6
    assert result.matched_channels == 2
    assert result.channel_names == ["dev-team", "dev-ops"]


async def test_matches_topic_and_purpose(service: ChannelGrouperService):
    by_topic = await service.group_by_regex("archive")
    assert by_topic.channel_names == ["dev-ops"]

    by_purpose = await service.group_by_regex("leads only")
    assert by_purpose.channel_names == ["eng-leads"]


async def test_archived_channels_are_included(service: ChannelGrouperService):
    result = await service.group_by_regex("dev")
    assert result.channel_names == ["dev-team", "dev-ops", "old-dev"]


async def test_case_sensitive_with_empty_flags(service: ChannelGrouperService):
    result = await service.group_by_regex("^DEV", "")
    assert result.matched_channels == 0
    assert result.total_channels == 6


async def test_no_match_returns_empty_result(service: ChannelGrouperService):
    result = await service.group_by_regex("^zzz")
    assert result.channels == []
    assert result.total_channels == 6


async def test_invalid_pattern_fails_before_fetching(
    service: ChannelGrouperService, slack_client: FakeSlackClient
):
    with pytest.raises(InvalidPattern):
        await service.group_by_regex("(")
    assert slack_client.calls == []


async def test_example_workspace():
    service = make_service(
        [
            [
                slack_channel("C1", "dev-team"),
                slack_channel("C2", "marketing"),
                slack_channel("C3", "dev-ops", topic="archive"),
            ]
        ]
    )
    result = await service.group_by_regex("^dev", "i")
    assert (result.total_channels, result.matched_channels) == (3, 2)
    assert result.channel_names == ["dev-team", "dev-ops"]


async def test_source_failure_propagates():
    service = make_service([[]], error=ConnectionError("down"))
    with pytest.raises(SourceUnavailable):
        await service.group_by_regex("^dev")


async def test_fetch_all_channels(service: ChannelGrouperService):
    channels = await service.fetch_all_channels()
    assert len(channels) == 6


def test_save_rejects_invalid_pattern(service: ChannelGrouperService):
    with pytest.raises(InvalidPattern):
        service.save_group("U1", "broken", "[a-")
    assert service.list_groups("U1") == []


def test_save_and_list(service: ChannelGrouperService):
    group = service.save_group("U1", "dev", "^dev")
    assert group.name == "dev"
    assert group.flags == "i"
    assert service.list_groups("U1") == [group]
    assert service.list_groups("U2") == []


async def test_apply_equals_fresh_search(service: ChannelGrouperService):
    service.save_group("U1", "dev", "^dev", "i")

    applied = await service.apply_group("U1", "dev")
    searched = await service.group_by_regex("^dev", "i")

    assert applied == searched


async def test_apply_uses_live_channel_list(store):
    client = FakeSlackClient([[slack_channel("C1", "dev-a")]])
    service = ChannelGrouperService(SlackChannelSource(client=client), store)
    service.save_group("U1", "dev", "^dev")
    assert (await service.apply_group("U1", "dev")).matched_channels == 1

    client.pages = [[slack_channel("C1", "dev-a"), slack_channel("C2", "dev-b")]]
    assert (await service.apply_group("U1", "dev")).matched_channels == 2


async def test_apply_unknown_group(service: ChannelGrouperService, slack_client: FakeSlackClient):
    with pytest.raises(GroupNotFound) as excinfo:
        await service.apply_group("U1", "missing")
    assert excinfo.value.message == "Group 'missing' not found"
    assert slack_client.calls == []


def test_delete_then_list(service: ChannelGrouperService):
    service.save_group("U1", "dev", "^dev")
    assert service.delete_group("U1", "dev") is True
    assert service.delete_group("U1", "dev") is False
    assert service.list_groups("U1") == []


async def test_saved_groups_disabled(slack_client: FakeSlackClient):
    service = ChannelGrouperService(SlackChannelSource(client=slack_client))
    assert not service.saved_groups_enabled

    with pytest.raises(SavedGroupsDisabled):
        service.save_group("U1", "dev", "^dev")
    with pytest.raises(SavedGroupsDisabled):
        service.list_groups("U1")
    with pytest.raises(SavedGroupsDisabled):
        service.delete_group("U1", "dev")
    with pytest.raises(SavedGroupsDisabled):
        await service.apply_group("U1", "dev")

    # Searching still works without a store
    assert (await service.group_by_regex("^dev")).matched_channels == 2


def test_suggestions(service: ChannelGrouperService):
    suggestions = service.get_suggestions()
    assert len(suggestions) == 5
    assert suggestions == list(SUGGESTIONS)
    assert all(s.name and s.pattern and s.description for s in suggestions)


async def test_suggestions_compile_and_run(service: ChannelGrouperService):
    for suggestion in service.get_suggestions():
        await service.group_by_regex(suggestion.pattern)


async def test_format_for_display(service: ChannelGrouperService):
    result = await service.group_by_regex("e")
    payload = service.format_for_display(result, 2)

    assert payload.shown == 2
    assert payload.remaining == result.matched_channels - 2
    assert payload.truncated


def test_build_service_respects_saved_groups_setting(monkeypatch):
    from backend.app.config import settings

    monkeypatch.setattr(settings, "saved_groups_enabled", False)
    assert not build_service(settings).saved_groups_enabled

    monkeypatch.setattr(settings, "saved_groups_enabled", True)
    assert build_service(settings).saved_groups_enabled
