"""Turn a MatchResult into a DisplayPayload."""

from backend.app.models.channel import DisplayPayload, MatchResult

DEFAULT_DISPLAY_LIMIT = 20


def format_for_display(result: MatchResult, display_limit: int = DEFAULT_DISPLAY_LIMIT) -> DisplayPayload:
    """Split the first ``display_limit`` matches into public and private lists.

    Order is kept as fetched. ``remaining`` counts the matches cut off by the
    limit.
    """
    if display_limit < 1:
        raise ValueError("display_limit must be at least 1")
    if result.matched_channels != len(result.channels):
        raise ValueError("match result counts are inconsistent")

    if result.matched_channels == 0:
        return DisplayPayload(
            pattern=result.pattern,
            flags=result.flags,
            summary=f"No channels found matching pattern: `{result.pattern}`",
            total_channels=result.total_channels,
            matched_channels=0,
            display_limit=display_limit,
        )

    shown = result.channels[:display_limit]
    remaining = len(result.channels) - len(shown)
    return DisplayPayload(
        pattern=result.pattern,
        flags=result.flags,
        summary=f"Found {result.matched_channels} channels matching pattern: `{result.pattern}`",
        total_channels=result.total_channels,
        matched_channels=result.matched_channels,
        display_limit=display_limit,
        public_channels=[ch for ch in shown if not ch.is_private],
        private_channels=[ch for ch in shown if ch.is_private],
        shown=len(shown),
        remaining=remaining,
        truncated=remaining > 0,
    )
