"""Curated example patterns shown to users looking for a starting point."""

from backend.app.models.group import Suggestion

SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion(
        name="Engineering Channels",
        pattern=r"^(dev|eng|engineering|tech|api|backend|frontend)",
        description="Channels starting with development-related keywords",
    ),
    Suggestion(
        name="Project Channels",
        pattern=r"project-|proj-",
        description="Channels containing project prefixes",
    ),
    Suggestion(
        name="Team Channels",
        pattern=r"team-|^(sales|marketing|hr|design|product)",
        description="Team-specific channels",
    ),
    Suggestion(
        name="Temporary Channels",
        pattern=r"(temp|tmp|test|sandbox)",
        description="Temporary or testing channels",
    ),
    Suggestion(
        name="Date-based Channels",
        pattern=r"\d{4}|202[0-9]|q[1-4]",
        description="Channels with years or quarters",
    ),
)


def get_suggestions() -> list[Suggestion]:
    return list(SUGGESTIONS)
