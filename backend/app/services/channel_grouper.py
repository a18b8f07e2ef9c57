"""Channel grouping service. Every front end calls this one API.

Composes the Slack channel source, the pattern matcher, the group store, the
result formatter and the suggestion catalog. Front ends never touch those
directly.
"""

from __future__ import annotations

from loguru import logger

from backend.app.config import Settings
from backend.app.errors import GroupNotFound, SavedGroupsDisabled
from backend.app.models.channel import Channel, DisplayPayload, MatchResult
from backend.app.models.group import DEFAULT_FLAGS, SavedGroup, Suggestion
from backend.app.services import suggestions
from backend.app.services.channel_source import ChannelSource, SlackChannelSource
from backend.app.services.group_store import GroupStore
from backend.app.services.pattern_matcher import compile_pattern, match_channels
from backend.app.services.result_formatter import DEFAULT_DISPLAY_LIMIT, format_for_display


class ChannelGrouperService:
    """Groups Slack channels by regex and manages per-user saved groups.

    ``store`` is None in deployments without saved-group support; every
    saved-group operation then raises SavedGroupsDisabled.
    """

    def __init__(self, source: ChannelSource, store: GroupStore | None = None) -> None:
        self.source = source
        self.store = store

    @property
    def saved_groups_enabled(self) -> bool:
        return self.store is not None

    def _require_store(self) -> GroupStore:
        if self.store is None:
            raise SavedGroupsDisabled()
        return self.store

    async def fetch_all_channels(self) -> list[Channel]:
        return await self.source.fetch_all_channels()

    async def group_by_regex(self, pattern: str, flags: str = DEFAULT_FLAGS) -> MatchResult:
        """Return the channels whose name, topic or purpose match ``pattern``.

        The pattern is compiled before any request to Slack, so a malformed
        pattern fails fast with InvalidPattern.
        """
        regex = compile_pattern(pattern, flags)
        channels = await self.source.fetch_all_channels()
        result = match_channels(pattern, flags, regex, channels)
        logger.info(
            "Pattern '{}' (flags={}) matched {}/{} channels",
            pattern,
            flags,
            result.matched_channels,
            result.total_channels,
        )
        return result

    def save_group(
        self, user_id: str, group_name: str, pattern: str, flags: str = DEFAULT_FLAGS
    ) -> SavedGroup:
        store = self._require_store()
        compile_pattern(pattern, flags)
        return store.save(user_id, group_name, pattern, flags)

    def list_groups(self, user_id: str) -> list[SavedGroup]:
        return self._require_store().list(user_id)

    def delete_group(self, user_id: str, group_name: str) -> bool:
        return self._require_store().delete(user_id, group_name)

    async def apply_group(self, user_id: str, group_name: str) -> MatchResult:
        """Re-run a saved pattern against the current channel list."""
        group = self._require_store().get(user_id, group_name)
        if group is None:
            raise GroupNotFound(group_name)
        return await self.group_by_regex(group.pattern, group.flags)

    def get_suggestions(self) -> list[Suggestion]:
        return suggestions.get_suggestions()

    def format_for_display(
        self, result: MatchResult, limit: int = DEFAULT_DISPLAY_LIMIT
    ) -> DisplayPayload:
        return format_for_display(result, limit)


def build_service(settings: Settings) -> ChannelGrouperService:
    """Wire the Slack source and (optionally) the group store from settings."""
    if not settings.slack_configured:
        logger.warning("SLACK_BOT_TOKEN is not set, channel listing will fail")

    source = SlackChannelSource(
        settings.slack_bot_token,
        page_size=settings.slack_page_size,
        timeout=settings.slack_timeout,
    )
    store = GroupStore() if settings.saved_groups_enabled else None
    return ChannelGrouperService(source, store)
