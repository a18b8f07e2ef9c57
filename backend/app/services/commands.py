"""Slash command parsing.

``/group-channels <verb> <args...>`` is resolved once into a SlashCommand
whose ``kind`` is one of a closed set of CommandKind values. Aliases
(``group`` for ``search``, ``remove`` for ``delete``...) are folded here so the
dispatcher only ever sees canonical kinds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CommandKind(StrEnum):
    SEARCH = "search"
    SAVE = "save"
    LIST = "list"
    DELETE = "delete"
    APPLY = "apply"
    SUGGESTIONS = "suggestions"
    HELP = "help"


_ALIASES: dict[str, CommandKind] = {
    "search": CommandKind.SEARCH,
    "group": CommandKind.SEARCH,
    "save": CommandKind.SAVE,
    "list": CommandKind.LIST,
    "delete": CommandKind.DELETE,
    "remove": CommandKind.DELETE,
    "apply": CommandKind.APPLY,
    "use": CommandKind.APPLY,
    "suggestions": CommandKind.SUGGESTIONS,
    "suggest": CommandKind.SUGGESTIONS,
    "help": CommandKind.HELP,
}

COMMAND_NAME = "/group-channels"

_USAGE: dict[CommandKind, str] = {
    CommandKind.SEARCH: f"Please provide a regex pattern. Example: `{COMMAND_NAME} search ^dev`",
    CommandKind.SAVE: (
        "Please provide a group name and regex pattern. "
        f'Example: `{COMMAND_NAME} save "dev-channels" ^dev`'
    ),
    CommandKind.DELETE: (
        f'Please provide a group name to delete. Example: `{COMMAND_NAME} delete "dev-channels"`'
    ),
    CommandKind.APPLY: (
        f'Please provide a group name to apply. Example: `{COMMAND_NAME} apply "dev-channels"`'
    ),
}


class CommandUsageError(ValueError):
    """A recognized command was missing its arguments."""

    def __init__(self, kind: CommandKind) -> None:
        super().__init__(_USAGE[kind])
        self.kind = kind


@dataclass(frozen=True)
class SlashCommand:
    kind: CommandKind
    pattern: str | None = None
    group_name: str | None = None


def _strip_quotes(value: str) -> str:
    return value.replace('"', "").replace("“", "").replace("”", "").strip()


def parse_command(text: str) -> SlashCommand:
    """Parse slash command text. Unknown verbs and empty text mean help."""
    args = text.split()
    if not args:
        return SlashCommand(CommandKind.HELP)

    kind = _ALIASES.get(args[0].lower(), CommandKind.HELP)
    params = args[1:]

    if kind is CommandKind.SEARCH:
        if not params:
            raise CommandUsageError(kind)
        return SlashCommand(kind, pattern=" ".join(params))

    if kind is CommandKind.SAVE:
        if len(params) < 2:
            raise CommandUsageError(kind)
        return SlashCommand(kind, group_name=_strip_quotes(params[0]), pattern=" ".join(params[1:]))

    if kind in (CommandKind.DELETE, CommandKind.APPLY):
        group_name = _strip_quotes(" ".join(params))
        if not group_name:
            raise CommandUsageError(kind)
        return SlashCommand(kind, group_name=group_name)

    return SlashCommand(kind)
