from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.models.group import DEFAULT_FLAGS, SavedGroup, Suggestion


class SaveGroupRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    group_name: str = Field(min_length=1, max_length=80)
    pattern: str = Field(min_length=1)
    flags: str = Field(DEFAULT_FLAGS, max_length=6)


class GroupListData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    groups: list[SavedGroup]


class SavedGroupData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    group_name: str
    pattern: str
    flags: str


class MessageData(BaseModel):
    message: str


class SuggestionListData(BaseModel):
    suggestions: list[Suggestion]
