"""In-memory registry of saved channel groups, partitioned by user.

Owned by the service and constructed once per process. Nothing survives a
restart.
"""

from __future__ import annotations

from loguru import logger

from backend.app.models.group import DEFAULT_FLAGS, SavedGroup


class GroupStore:
    """Maps user_id -> {group name -> SavedGroup}.

    Safe for async usage within a single event loop: every mutation is one
    synchronous step, so concurrent saves for the same name are last-writer-wins.
    """

    def __init__(self) -> None:
        self._groups: dict[str, dict[str, SavedGroup]] = {}

    @property
    def user_count(self) -> int:
        return len(self._groups)

    def save(
        self, user_id: str, group_name: str, pattern: str, flags: str = DEFAULT_FLAGS
    ) -> SavedGroup:
        """Store a group, replacing any existing group of the same name.

        The caller is responsible for validating ``pattern`` first.
        """
        group = SavedGroup(name=group_name, pattern=pattern, flags=flags)
        self._groups.setdefault(user_id, {})[group_name] = group
        logger.info("Group '{}' saved for user {}", group_name, user_id)
        return group

    def get(self, user_id: str, group_name: str) -> SavedGroup | None:
        return self._groups.get(user_id, {}).get(group_name)

    def list(self, user_id: str) -> list[SavedGroup]:
        """Return the user's groups in the order they were first saved."""
        return list(self._groups.get(user_id, {}).values())

    def delete(self, user_id: str, group_name: str) -> bool:
        """Remove a group. Returns False if it did not exist."""
        user_groups = self._groups.get(user_id)
        if not user_groups or group_name not in user_groups:
            return False

        del user_groups[group_name]
        if not user_groups:
            del self._groups[user_id]

        logger.info("Group '{}' deleted for user {}", group_name, user_id)
        return True
