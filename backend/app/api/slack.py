"""Slack slash command and interactive action endpoints.

Both endpoints receive form-encoded bodies signed with the app's signing
secret. Searches (slash command or button) are acknowledged immediately and
their result is posted to the request's ``response_url``; the other slash
commands are answered inline.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from loguru import logger
from slack_sdk.signature import SignatureVerifier

from backend.app.api.deps import get_service
from backend.app.config import settings
from backend.app.errors import ChannelGrouperError, InvalidPattern
from backend.app.services import slack_blocks
from backend.app.services.channel_grouper import ChannelGrouperService
from backend.app.services.commands import CommandKind, CommandUsageError, SlashCommand, parse_command
from backend.app.services.pattern_matcher import compile_pattern

router = APIRouter(prefix="/slack", tags=["slack"])

IN_CHANNEL = "in_channel"
EPHEMERAL = "ephemeral"

# Commands that fetch the whole channel list
DEFERRED_KINDS = frozenset({CommandKind.SEARCH, CommandKind.APPLY})


async def _verified_form(request: Request) -> dict[str, str]:
    """Check the Slack request signature and decode the form body."""
    if not settings.slack_signing_secret:
        raise HTTPException(status_code=500, detail="SLACK_SIGNING_SECRET not configured")

    body = await request.body()
    verifier = SignatureVerifier(settings.slack_signing_secret)
    if not verifier.is_valid_request(body, dict(request.headers)):
        logger.warning("[SLACK] Rejected request with invalid signature on {}", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid Slack request signature")

    parsed = parse_qs(body.decode("utf-8"), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def _respond(message: dict[str, Any], response_type: str = EPHEMERAL) -> dict[str, Any]:
    return {**message, "response_type": response_type}


async def execute_command(
    service: ChannelGrouperService,
    user_id: str,
    command: SlashCommand,
    display_limit: int,
) -> dict[str, Any]:
    """Run a parsed slash command and build the Slack response message."""
    kind = command.kind

    if kind is CommandKind.SEARCH:
        result = await service.group_by_regex(command.pattern)
        payload = service.format_for_display(result, display_limit)
        return _respond(slack_blocks.render_match(payload), IN_CHANNEL)

    if kind is CommandKind.SAVE:
        group = service.save_group(user_id, command.group_name, command.pattern)
        return _respond(
            slack_blocks.render_text(f'✅ Group "{group.name}" saved with pattern: `{group.pattern}`')
        )

    if kind is CommandKind.LIST:
        return _respond(slack_blocks.render_group_list(service.list_groups(user_id)))

    if kind is CommandKind.DELETE:
        if service.delete_group(user_id, command.group_name):
            return _respond(slack_blocks.render_text(f'✅ Group "{command.group_name}" has been deleted.'))
        return _respond(slack_blocks.render_error(f'Group "{command.group_name}" not found.'))

    if kind is CommandKind.APPLY:
        result = await service.apply_group(user_id, command.group_name)
        payload = service.format_for_display(result, display_limit)
        return _respond(slack_blocks.render_match(payload), IN_CHANNEL)

    if kind is CommandKind.SUGGESTIONS:
        return _respond(slack_blocks.render_suggestions(service.get_suggestions()))

    return _respond(slack_blocks.render_text(slack_blocks.HELP_TEXT))


async def run_command(
    service: ChannelGrouperService, user_id: str, command: SlashCommand, display_limit: int
) -> dict[str, Any]:
    """Execute a command, turning service failures into ephemeral error messages."""
    try:
        return await execute_command(service, user_id, command, display_limit)
    except ChannelGrouperError as exc:
        logger.warning("[SLACK] Command {} failed for {}: {}", command.kind, user_id, exc.message)
        return _respond(slack_blocks.render_error(exc.message))


def _acknowledgement(command: SlashCommand) -> dict[str, Any]:
    if command.kind is CommandKind.APPLY:
        return _respond(slack_blocks.render_text(f'🔍 Applying group "{command.group_name}"...'))
    return _respond(slack_blocks.render_text(f"🔍 Searching channels matching `{command.pattern}`..."))


async def _deliver_command(
    service: ChannelGrouperService,
    user_id: str,
    command: SlashCommand,
    display_limit: int,
    response_url: str,
) -> None:
    message = await run_command(service, user_id, command, display_limit)
    await post_to_response_url(response_url, message)


@router.post("/commands")
async def slash_command(
    request: Request,
    background_tasks: BackgroundTasks,
    service: ChannelGrouperService = Depends(get_service),
) -> dict:
    """Answer a slash command.

    Search and apply list every channel in the workspace, which can outlast
    Slack's 3 second reply window, so they are acknowledged at once and their
    result is posted to the command's ``response_url``. Everything else is
    answered inline.
    """
    form = await _verified_form(request)
    user_id = form.get("user_id", "")
    text = form.get("text", "")
    try:
        command = parse_command(text)
    except CommandUsageError as exc:
        return _respond(slack_blocks.render_error(str(exc)))

    logger.info("[SLACK] User {} executed command: {} ({})", user_id, command.kind, text)
    response_url = form.get("response_url")
    if command.kind in DEFERRED_KINDS and response_url:
        if command.kind is CommandKind.SEARCH:
            # Malformed patterns are reported inline without touching Slack
            try:
                compile_pattern(command.pattern)
            except InvalidPattern as exc:
                return _respond(slack_blocks.render_error(exc.message))
        background_tasks.add_task(
            _deliver_command, service, user_id, command, settings.display_limit, response_url
        )
        return _acknowledgement(command)

    return await run_command(service, user_id, command, settings.display_limit)


async def post_to_response_url(
    response_url: str,
    message: dict[str, Any],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Deliver a delayed response to Slack. Delivery failures are logged, not raised."""
    try:
        async with httpx.AsyncClient(timeout=10, transport=transport) as client:
            resp = await client.post(response_url, json=message)
            resp.raise_for_status()
    except httpx.HTTPError:
        logger.exception("[SLACK] Failed to post to response_url")


async def _run_action(
    service: ChannelGrouperService,
    user_id: str,
    action: dict[str, Any],
    response_url: str,
) -> None:
    action_id = action.get("action_id", "")
    value = action.get("value", "")

    try:
        if action_id.startswith(slack_blocks.APPLY_ACTION_PREFIX):
            result = await service.apply_group(user_id, value)
        elif action_id == slack_blocks.TRY_PATTERN_ACTION:
            result = await service.group_by_regex(value)
        else:
            logger.debug("[SLACK] Ignoring unknown action {}", action_id)
            return
        payload = service.format_for_display(result, settings.display_limit)
        message = {**_respond(slack_blocks.render_match(payload), IN_CHANNEL), "replace_original": False}
    except ChannelGrouperError as exc:
        logger.warning("[SLACK] Action {} failed for {}: {}", action_id, user_id, exc.message)
        message = _respond(slack_blocks.render_error(f"Error: {exc.message}"))

    await post_to_response_url(response_url, message)


@router.post("/interactive")
async def interactive_action(
    request: Request,
    background_tasks: BackgroundTasks,
    service: ChannelGrouperService = Depends(get_service),
) -> Response:
    form = await _verified_form(request)
    try:
        payload = json.loads(form.get("payload", ""))
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid interactive payload") from None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid interactive payload")

    actions = payload.get("actions") or []
    response_url = payload.get("response_url")
    user_id = (payload.get("user") or {}).get("id", "")
    if actions and response_url:
        background_tasks.add_task(_run_action, service, user_id, actions[0], response_url)

    # Ack within Slack's 3 second window; the real answer goes to response_url
    return Response(status_code=200)
