"""Saved group and suggestion models."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_FLAGS = "i"


def utcnow() -> datetime:
    return datetime.now(UTC)


class SavedGroup(BaseModel):
    """A user's named pattern. Re-saving the same name replaces it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    pattern: str
    flags: str = DEFAULT_FLAGS
    created_at: datetime = Field(default_factory=utcnow)


class Suggestion(BaseModel):
    """A curated example pattern."""

    model_config = ConfigDict(frozen=True)

    name: str
    pattern: str
    description: str
