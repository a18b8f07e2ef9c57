from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.models.channel import Channel, DisplayPayload, MatchResult
from backend.app.models.group import DEFAULT_FLAGS


class GroupChannelsRequest(BaseModel):
    pattern: str = Field(min_length=1, description="Regex matched against channel name, topic and purpose")
    flags: str = Field(DEFAULT_FLAGS, max_length=6, description='Regex flags (default "i")')
    limit: int | None = Field(
        default=None, ge=1, le=1000, description="When set, also return a display summary"
    )


class ChannelListData(BaseModel):
    """Every channel, or the matching subset when a regex was given."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_channels: int
    channels: list[Channel]
    pattern: str | None = None
    flags: str | None = None
    matched_channels: int | None = None


class GroupChannelsData(MatchResult):
    """A match result, optionally with its display summary."""

    display: DisplayPayload | None = None
