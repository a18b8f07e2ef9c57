"""Error taxonomy for the channel grouping service.

Every error carries the HTTP status the REST front end answers with. The
Slack and MCP front ends only use the message.
"""


class ChannelGrouperError(Exception):
    """Base class for errors surfaced to front ends."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPattern(ChannelGrouperError):
    """The pattern or flags do not compile as a regular expression."""

    status_code = 400


class GroupNotFound(ChannelGrouperError):
    """The user has no saved group with the requested name."""

    status_code = 404

    def __init__(self, group_name: str) -> None:
        super().__init__(f"Group '{group_name}' not found")
        self.group_name = group_name


class SourceUnavailable(ChannelGrouperError):
    """Listing channels from Slack failed."""

    status_code = 502


class SavedGroupsDisabled(ChannelGrouperError):
    """This deployment runs without a group store."""

    status_code = 501

    def __init__(self) -> None:
        super().__init__("Saved groups are not available in this deployment")
