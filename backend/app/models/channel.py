"""Channel snapshot and match result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Channel(BaseModel):
    """A read-only snapshot of one Slack channel, built fresh on every fetch."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    is_private: bool = False
    is_archived: bool = False
    topic: str = ""
    purpose: str = ""

    @classmethod
    def from_slack(cls, raw: dict[str, Any]) -> Channel:
        """Normalize a raw ``conversations.list`` record.

        Missing or null topic/purpose become empty strings so matching can
        treat all three text fields the same way.
        """
        topic = raw.get("topic") or {}
        purpose = raw.get("purpose") or {}
        return cls(
            id=raw["id"],
            name=raw.get("name") or "",
            is_private=bool(raw.get("is_private", False)),
            is_archived=bool(raw.get("is_archived", False)),
            topic=topic.get("value") or "",
            purpose=purpose.get("value") or "",
        )

    @property
    def searchable_fields(self) -> tuple[str, str, str]:
        return (self.name, self.topic, self.purpose)


class MatchResult(BaseModel):
    """Channels matching one pattern, in source order."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    pattern: str
    flags: str
    total_channels: int = Field(ge=0)
    matched_channels: int = Field(ge=0)
    channels: list[Channel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_counts(self) -> MatchResult:
        if self.matched_channels != len(self.channels):
            raise ValueError("matched_channels must equal the number of channels")
        if self.matched_channels > self.total_channels:
            raise ValueError("matched_channels cannot exceed total_channels")
        return self

    @property
    def channel_names(self) -> list[str]:
        return [ch.name for ch in self.channels]


class DisplayPayload(BaseModel):
    """Transport-neutral summary of a match result.

    Each front end renders this into its own wire format (Slack blocks, JSON,
    terminal table).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pattern: str
    flags: str
    summary: str
    total_channels: int
    matched_channels: int
    display_limit: int
    public_channels: list[Channel] = Field(default_factory=list)
    private_channels: list[Channel] = Field(default_factory=list)
    shown: int = 0
    remaining: int = 0
    truncated: bool = False

    @property
    def is_empty(self) -> bool:
        return self.matched_channels == 0
