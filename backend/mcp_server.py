"""Channel Grouper MCP Server - AI-tool interface.

Exposes the channel grouping service as MCP tools.
Can run standalone (stdio) or be mounted on FastAPI (streamable-http at /mcp).

The FastAPI lifespan binds its own service instance with `bind_service` so
saved groups are shared between REST, Slack and MCP callers. Standalone runs
build one lazily from settings on the first tool call.
"""

from fastmcp import FastMCP
from loguru import logger

from backend.app.config import settings
from backend.app.errors import ChannelGrouperError
from backend.app.services.channel_grouper import ChannelGrouperService, build_service

mcp = FastMCP(
    "slack-channel-grouper",
    instructions=(
        "Find Slack channels by regular expression. Patterns are matched against "
        "channel name, topic and purpose. Use get_pattern_suggestions for ideas, "
        "and save_channel_group to keep a pattern under a name for a user."
    ),
)

_service: ChannelGrouperService | None = None


def bind_service(service: ChannelGrouperService | None) -> None:
    """Use ``service`` for every tool call (None resets to lazy construction)."""
    global _service
    _service = service


def _get_service() -> ChannelGrouperService:
    global _service
    if _service is None:
        _service = build_service(settings)
    return _service


def _error(exc: ChannelGrouperError) -> dict:
    return {"error": exc.message}


# ---------------------------------------------------------------------------
# Tool implementations (plain coroutines, registered below)
# ---------------------------------------------------------------------------


async def tool_group_channels(pattern: str, flags: str = "i") -> dict:
    if not pattern:
        return {"error": "Pattern is required"}
    logger.info("[MCP] group_channels_by_regex(): pattern={} flags={}", pattern, flags)
    try:
        result = await _get_service().group_by_regex(pattern, flags)
    except ChannelGrouperError as exc:
        logger.warning("[MCP] group_channels_by_regex() failed: {}", exc.message)
        return _error(exc)
    return {"success": True, **result.model_dump(mode="json", by_alias=True)}


async def tool_get_all_channels() -> dict:
    try:
        channels = await _get_service().fetch_all_channels()
    except ChannelGrouperError as exc:
        return _error(exc)
    return {
        "success": True,
        "totalChannels": len(channels),
        "channels": [ch.model_dump(mode="json") for ch in channels],
    }


async def tool_save_group(user_id: str, group_name: str, pattern: str, flags: str = "i") -> dict:
    if not user_id or not group_name or not pattern:
        return {"error": "user_id, group_name and pattern are required"}
    try:
        group = _get_service().save_group(user_id, group_name, pattern, flags)
    except ChannelGrouperError as exc:
        return _error(exc)
    return {
        "success": True,
        "message": f'Group "{group.name}" saved successfully',
        "group": group.model_dump(mode="json", by_alias=True),
    }


async def tool_get_user_groups(user_id: str) -> dict:
    try:
        groups = _get_service().list_groups(user_id)
    except ChannelGrouperError as exc:
        return _error(exc)
    return {
        "success": True,
        "userId": user_id,
        "groups": [group.model_dump(mode="json", by_alias=True) for group in groups],
    }


async def tool_apply_group(user_id: str, group_name: str) -> dict:
    try:
        result = await _get_service().apply_group(user_id, group_name)
    except ChannelGrouperError as exc:
        return _error(exc)
    return {"success": True, "groupName": group_name, **result.model_dump(mode="json", by_alias=True)}


async def tool_delete_group(user_id: str, group_name: str) -> dict:
    try:
        deleted = _get_service().delete_group(user_id, group_name)
    except ChannelGrouperError as exc:
        return _error(exc)
    if not deleted:
        return {"error": f"Group '{group_name}' not found"}
    return {"success": True, "message": f'Group "{group_name}" deleted successfully'}


async def tool_get_suggestions() -> dict:
    return {
        "success": True,
        "suggestions": [s.model_dump(mode="json") for s in _get_service().get_suggestions()],
    }


# ---------------------------------------------------------------------------
# MCP tools
# ---------------------------------------------------------------------------


@mcp.tool()
async def group_channels_by_regex(pattern: str, flags: str = "i") -> dict:
    """Group Slack channels using a regex pattern.

    Args:
        pattern: Regex pattern to match channel names, topics, or purposes
        flags: Regex flags (default "i" for case-insensitive; "m" and "s" also supported)
    """
    return await tool_group_channels(pattern, flags)


@mcp.tool()
async def get_all_channels() -> dict:
    """Get all channels in the Slack workspace."""
    return await tool_get_all_channels()


@mcp.tool()
async def save_channel_group(user_id: str, group_name: str, pattern: str, flags: str = "i") -> dict:
    """Save a named channel group with a regex pattern.

    Args:
        user_id: User ID to associate the group with
        group_name: Name for the saved group
        pattern: Regex pattern for the group
        flags: Regex flags (default "i")
    """
    return await tool_save_group(user_id, group_name, pattern, flags)


@mcp.tool()
async def get_user_groups(user_id: str) -> dict:
    """Get all saved groups for a user.

    Args:
        user_id: User ID to get groups for
    """
    return await tool_get_user_groups(user_id)


@mcp.tool()
async def apply_saved_group(user_id: str, group_name: str) -> dict:
    """Apply a saved group pattern to find matching channels.

    The pattern runs against the live channel list, not a stored snapshot.

    Args:
        user_id: User ID who owns the group
        group_name: Name of the saved group to apply
    """
    return await tool_apply_group(user_id, group_name)


@mcp.tool()
async def delete_saved_group(user_id: str, group_name: str) -> dict:
    """Delete a saved channel group.

    Args:
        user_id: User ID who owns the group
        group_name: Name of the group to delete
    """
    return await tool_delete_group(user_id, group_name)


@mcp.tool()
async def get_pattern_suggestions() -> dict:
    """Get suggested regex patterns for common channel groupings."""
    return await tool_get_suggestions()


def run_stdio() -> None:
    """Run the MCP server over stdio (logs go to stderr)."""
    from backend.app.log import setup_logging

    setup_logging(file_sink=False)
    logger.info("Starting MCP server over stdio")
    mcp.run()


if __name__ == "__main__":
    run_stdio()
