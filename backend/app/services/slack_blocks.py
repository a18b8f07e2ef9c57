"""Slack Block Kit rendering for slash command and interactive responses.

Every function returns a message dict (``text`` + ``blocks``) ready to be
returned from the slash command endpoint or posted to a ``response_url``.
"""

from __future__ import annotations

from typing import Any

from backend.app.models.channel import Channel, DisplayPayload
from backend.app.models.group import SavedGroup, Suggestion
from backend.app.services.commands import COMMAND_NAME

APPLY_ACTION_PREFIX = "apply_group_"
TRY_PATTERN_ACTION = "try_pattern"

HELP_TEXT = f"""
*🤖 Channel Grouper Bot Help*

*Basic Commands:*
• `{COMMAND_NAME} search <regex>` - Find channels matching a regex pattern
• `{COMMAND_NAME} suggestions` - View common grouping patterns

*Saved Groups:*
• `{COMMAND_NAME} save "<name>" <regex>` - Save a regex pattern with a name
• `{COMMAND_NAME} list` - View your saved groups
• `{COMMAND_NAME} apply "<name>"` - Apply a saved group
• `{COMMAND_NAME} delete "<name>"` - Delete a saved group

*Examples:*
• `{COMMAND_NAME} search ^dev` - Find channels starting with "dev"
• `{COMMAND_NAME} search team-` - Find channels containing "team-"
• `{COMMAND_NAME} save "dev-channels" ^(dev|eng|api)` - Save a pattern for development channels
• `{COMMAND_NAME} apply "dev-channels"` - Use your saved "dev-channels" pattern

*Regex Tips:*
• `^` - Start of channel name
• `$` - End of channel name
• `|` - OR operator
• `()` - Grouping
• `[]` - Character sets
"""


def _section(text: str, accessory: dict[str, Any] | None = None) -> dict[str, Any]:
    block: dict[str, Any] = {"type": "section", "text": {"type": "mrkdwn", "text": text}}
    if accessory:
        block["accessory"] = accessory
    return block


def _button(label: str, action_id: str, value: str) -> dict[str, Any]:
    return {
        "type": "button",
        "text": {"type": "plain_text", "text": label},
        "action_id": action_id,
        "value": value,
    }


_DIVIDER = {"type": "divider"}


def _channel_line(channel: Channel) -> str:
    suffix = " (archived)" if channel.is_archived else ""
    # Private channels can't be linked for users outside them
    if channel.is_private:
        return f"• #{channel.name}{suffix}"
    return f"• <#{channel.id}|{channel.name}>{suffix}"


def render_match(payload: DisplayPayload) -> dict[str, Any]:
    if payload.is_empty:
        return {"text": payload.summary, "blocks": []}

    blocks: list[dict[str, Any]] = [
        _section(f"*Found {payload.matched_channels} channels matching pattern:* `{payload.pattern}`"),
        _DIVIDER,
    ]
    if payload.public_channels:
        lines = "\n".join(_channel_line(ch) for ch in payload.public_channels)
        blocks.append(_section(f"*Public Channels ({len(payload.public_channels)}):*\n{lines}"))
    if payload.private_channels:
        lines = "\n".join(_channel_line(ch) for ch in payload.private_channels)
        blocks.append(_section(f"*Private Channels ({len(payload.private_channels)}):*\n{lines}"))
    if payload.truncated:
        blocks.append(
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": (
                            f"_Showing first {payload.shown} channels. "
                            f"{payload.remaining} more channels match this pattern._"
                        ),
                    }
                ],
            }
        )

    return {
        "text": f"Found {payload.matched_channels} channels matching pattern: {payload.pattern}",
        "blocks": blocks,
    }


def render_group_list(groups: list[SavedGroup]) -> dict[str, Any]:
    if not groups:
        return {
            "text": (
                "📝 You have no saved channel groups. "
                f"Use `{COMMAND_NAME} save` to create one."
            )
        }

    blocks: list[dict[str, Any]] = [_section("*Your Saved Channel Groups:*"), _DIVIDER]
    for group in groups:
        blocks.append(
            _section(
                f"*{group.name}*\nPattern: `{group.pattern}`\n"
                f"Created: {group.created_at.strftime('%Y-%m-%d')}",
                accessory=_button("Apply", f"{APPLY_ACTION_PREFIX}{group.name}", group.name),
            )
        )
    return {"text": "Your saved channel groups", "blocks": blocks}


def render_suggestions(suggestions: list[Suggestion]) -> dict[str, Any]:
    blocks: list[dict[str, Any]] = [_section("*🔍 Suggested Channel Grouping Patterns:*"), _DIVIDER]
    for suggestion in suggestions:
        blocks.append(
            _section(
                f"*{suggestion.name}*\n`{suggestion.pattern}`\n_{suggestion.description}_",
                accessory=_button("Try Pattern", TRY_PATTERN_ACTION, suggestion.pattern),
            )
        )
    return {"text": "Channel grouping suggestions", "blocks": blocks}


def render_text(text: str) -> dict[str, Any]:
    return {"text": text}


def render_error(message: str) -> dict[str, Any]:
    return {"text": f"❌ {message}"}
