"""Shared test fixtures for Channel Grouper tests.

Provides a fake Slack Web API client with paged responses, a service wired to
it with an isolated group store per test, and an async HTTP client bound to
the real ASGI app with that service injected.
"""

import time
from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import urlencode

import pytest
from httpx import ASGITransport, AsyncClient
from slack_sdk.signature import SignatureVerifier

from backend.app.api.deps import get_service
from backend.app.config import settings
from backend.app.main import app
from backend.app.services.channel_grouper import ChannelGrouperService
from backend.app.services.channel_source import SlackChannelSource
from backend.app.services.group_store import GroupStore

API_KEY = "test-api-key"
SIGNING_SECRET = "test-signing-secret"

# ---------------------------------------------------------------------------
# Fake Slack client
# ---------------------------------------------------------------------------


def slack_channel(
    channel_id: str,
    name: str,
    *,
    private: bool = False,
    archived: bool = False,
    topic: str | None = None,
    purpose: str | None = None,
) -> dict[str, Any]:
    """Build a raw conversations.list record the way Slack returns it."""
    raw: dict[str, Any] = {
        "id": channel_id,
        "name": name,
        "is_private": private,
        "is_archived": archived,
    }
    if topic is not None:
        raw["topic"] = {"value": topic, "creator": "U0", "last_set": 0}
    if purpose is not None:
        raw["purpose"] = {"value": purpose, "creator": "U0", "last_set": 0}
    return raw


class FakeSlackClient:
    """Stands in for AsyncWebClient.conversations_list.

    Serves ``pages`` in order, linking them with cursors, so every fetch
    walks the whole workspace. When ``error`` is set it is raised on call
    number ``fail_on_call`` (0-based) and after.
    """

    def __init__(
        self,
        pages: list[list[dict[str, Any]]],
        *,
        error: Exception | None = None,
        fail_on_call: int = 0,
    ) -> None:
        self.pages = pages
        self.error = error
        self.fail_on_call = fail_on_call
        self.calls: list[dict[str, Any]] = []

    async def conversations_list(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self.error is not None and len(self.calls) > self.fail_on_call:
            raise self.error

        cursor = kwargs.get("cursor")
        index = int(cursor.removeprefix("cursor-")) if cursor else 0
        page = self.pages[index] if index < len(self.pages) else []
        next_cursor = f"cursor-{index + 1}" if index + 1 < len(self.pages) else ""
        return {"ok": True, "channels": page, "response_metadata": {"next_cursor": next_cursor}}


WORKSPACE_PAGES = [
    [
        slack_channel("C001", "dev-team", purpose="Engineering chat"),
        slack_channel("C002", "marketing", topic="Campaigns"),
        slack_channel("C003", "dev-ops", topic="archive"),
    ],
    [
        slack_channel("G004", "eng-leads", private=True, purpose="Leads only"),
        slack_channel("C005", "random", topic="project-x water cooler"),
        slack_channel("C006", "old-dev", archived=True),
    ],
]


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def slack_client() -> FakeSlackClient:
    return FakeSlackClient(WORKSPACE_PAGES)


@pytest.fixture
def store() -> GroupStore:
    return GroupStore()


@pytest.fixture
def service(slack_client: FakeSlackClient, store: GroupStore) -> ChannelGrouperService:
    return ChannelGrouperService(SlackChannelSource(client=slack_client), store)


def make_service(pages: list[list[dict[str, Any]]], **kwargs: Any) -> ChannelGrouperService:
    return ChannelGrouperService(
        SlackChannelSource(client=FakeSlackClient(pages, **kwargs)), GroupStore()
    )


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def configured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give the app an API key and a Slack signing secret."""
    monkeypatch.setattr(settings, "api_secret_key", API_KEY)
    monkeypatch.setattr(settings, "slack_signing_secret", SIGNING_SECRET)


@pytest.fixture
async def client(
    service: ChannelGrouperService, configured: None
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with the test service injected into the FastAPI app."""
    app.dependency_overrides[get_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers={"X-API-Key": API_KEY}
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def signed_form(fields: dict[str, str], *, secret: str = SIGNING_SECRET) -> tuple[str, dict[str, str]]:
    """Encode a Slack form body and the signature headers Slack would send with it."""
    body = urlencode(fields)
    timestamp = str(int(time.time()))
    signature = SignatureVerifier(secret).generate_signature(timestamp=timestamp, body=body)
    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": signature,
    }
    return body, headers
