"""Unit tests for the in-memory saved group store."""

from backend.app.services.group_store import GroupStore


def test_list_for_unknown_user_is_empty(store: GroupStore):
    assert store.list("U404") == []
    assert store.get("U404", "anything") is None


def test_save_and_list(store: GroupStore):
    store.save("U1", "dev", "^dev")
    store.save("U1", "eng", "^eng", "")

    groups = store.list("U1")
    assert [g.name for g in groups] == ["dev", "eng"]
    assert groups[0].flags == "i"
    assert groups[1].flags == ""
    assert groups[0].created_at.tzinfo is not None


def test_resave_overwrites_in_place(store: GroupStore):
    store.save("U1", "dev", "^dev")
    store.save("U1", "other", "x")
    store.save("U1", "dev", "^develop", "m")

    groups = store.list("U1")
    assert [g.name for g in groups] == ["dev", "other"]
    assert store.get("U1", "dev").pattern == "^develop"
    assert store.get("U1", "dev").flags == "m"


def test_users_are_isolated(store: GroupStore):
    store.save("U1", "dev", "^dev")
    store.save("U2", "dev", "^ops")

    assert store.get("U1", "dev").pattern == "^dev"
    assert store.get("U2", "dev").pattern == "^ops"
    assert store.user_count == 2


def test_delete_twice_returns_true_then_false(store: GroupStore):
    store.save("U1", "g", "^dev")
    assert store.delete("U1", "g") is True
    assert store.delete("U1", "g") is False


def test_delete_unknown_user_or_group(store: GroupStore):
    store.save("U1", "g", "^dev")
    assert store.delete("U2", "g") is False
    assert store.delete("U1", "missing") is False
    assert store.user_count == 1


def test_deleting_last_group_reclaims_user(store: GroupStore):
    store.save("U1", "a", "a")
    store.save("U1", "b", "b")

    store.delete("U1", "a")
    assert store.user_count == 1

    store.delete("U1", "b")
    assert store.user_count == 0
    assert store.list("U1") == []
