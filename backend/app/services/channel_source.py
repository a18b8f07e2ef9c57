"""Slack channel listing.

Wraps ``conversations.list`` and turns the paged response into a flat list of
Channel snapshots. Nothing is cached: every call hits Slack.
"""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from backend.app.config import SLACK_MAX_PAGE_SIZE
from backend.app.errors import SourceUnavailable
from backend.app.models.channel import Channel

CHANNEL_TYPES = "public_channel,private_channel"


class ChannelSource(Protocol):
    async def fetch_all_channels(self) -> list[Channel]: ...


class SlackChannelSource:
    """Fetches every public and private channel visible to the bot token."""

    def __init__(
        self,
        token: str = "",
        *,
        client: AsyncWebClient | None = None,
        page_size: int = SLACK_MAX_PAGE_SIZE,
        timeout: int = 30,
    ) -> None:
        self._client = client or AsyncWebClient(token=token, timeout=timeout)
        self._page_size = max(1, min(page_size, SLACK_MAX_PAGE_SIZE))

    async def fetch_all_channels(self) -> list[Channel]:
        """Follow pagination cursors until Slack reports no further pages.

        Any failure aborts the whole fetch; partial pages are discarded.
        """
        channels: list[Channel] = []
        cursor: str | None = None
        pages = 0

        try:
            while True:
                kwargs: dict[str, Any] = {"types": CHANNEL_TYPES, "limit": self._page_size}
                if cursor:
                    kwargs["cursor"] = cursor

                response = await self._client.conversations_list(**kwargs)
                pages += 1
                channels.extend(Channel.from_slack(raw) for raw in response.get("channels") or [])

                cursor = (response.get("response_metadata") or {}).get("next_cursor")
                if not cursor:
                    break
        except SlackApiError as exc:
            error = (exc.response.get("error") if exc.response is not None else None) or "unknown_error"
            logger.error("Slack conversations.list failed: {}", error)
            raise SourceUnavailable(f"Failed to fetch channels: {error}") from exc
        except Exception as exc:
            logger.exception("Error fetching channels")
            raise SourceUnavailable("Failed to fetch channels") from exc

        logger.debug("Fetched {} channels in {} page(s)", len(channels), pages)
        return channels
