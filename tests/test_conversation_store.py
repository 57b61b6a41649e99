"""Tests for agentrelay.memory.store.ConversationStore."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from agentrelay.llm.types import Message, Role
from agentrelay.memory.store import ConversationStore


class TestAppendAndHistory:
    def test_unknown_key_is_empty(self):
        store = ConversationStore(max_history=3)
        assert store.history("nope") == []

    def test_append_preserves_order(self):
        store = ConversationStore(max_history=5)
        store.append("t", Role.USER, "one")
        store.append("t", Role.ASSISTANT, "two")
        store.append("t", "user", "three")

        msgs = store.history("t")
        assert [m.content for m in msgs] == ["one", "two", "three"]
        assert [m.role for m in msgs] == [Role.USER, Role.ASSISTANT, Role.USER]

    def test_messages_are_timestamped_in_order(self):
        store = ConversationStore(max_history=5)
        store.append("t", Role.USER, "a")
        store.append("t", Role.USER, "b")
        first, second = store.history("t")
        assert first.created_at <= second.created_at
        assert first.created_at.tzinfo is not None

    def test_unknown_role_rejected(self):
        store = ConversationStore()
        with pytest.raises(ValueError):
            store.append("t", "tool", "nope")

    def test_messages_are_immutable(self):
        store = ConversationStore()
        store.append("t", Role.USER, "hi")
        msg = store.history("t")[0]
        with pytest.raises(FrozenInstanceError):
            msg.content = "changed"  # type: ignore[misc]


class TestEviction:
    @pytest.mark.parametrize("extra", [0, 1, 4, 17])
    def test_keeps_most_recent_max_history(self, extra):
        max_history = 4
        store = ConversationStore(max_history=max_history)
        total = max_history + extra
        for i in range(total):
            store.append("t", Role.USER, f"m{i}")

        msgs = store.history("t")
        assert len(msgs) == max_history
        assert [m.content for m in msgs] == [f"m{i}" for i in range(extra, total)]

    def test_fewer_than_bound_kept_in_full(self):
        store = ConversationStore(max_history=10)
        for i in range(3):
            store.append("t", Role.USER, f"m{i}")
        assert len(store.history("t")) == 3

    def test_bound_of_one(self):
        store = ConversationStore(max_history=1)
        store.append("t", Role.USER, "old")
        store.append("t", Role.ASSISTANT, "new")
        assert [m.content for m in store.history("t")] == ["new"]

    def test_invalid_bound(self):
        with pytest.raises(ValueError, match="max_history"):
            ConversationStore(max_history=0)


class TestIsolation:
    def test_keys_are_independent(self):
        store = ConversationStore(max_history=2)
        store.append("a", Role.USER, "a1")
        for i in range(5):
            store.append("b", Role.USER, f"b{i}")

        assert [m.content for m in store.history("a")] == ["a1"]
        assert [m.content for m in store.history("b")] == ["b3", "b4"]

    def test_returned_history_is_a_copy(self):
        store = ConversationStore()
        store.append("t", Role.USER, "hi")

        snapshot = store.history("t")
        snapshot.append(Message(role=Role.USER, content="injected"))
        snapshot.clear()

        assert [m.content for m in store.history("t")] == ["hi"]

    def test_snapshot_unaffected_by_later_appends(self):
        store = ConversationStore()
        store.append("t", Role.USER, "first")
        snapshot = store.history("t")
        store.append("t", Role.USER, "second")
        assert len(snapshot) == 1


class TestClearAndEnumerate:
    def test_clear_empties_history(self):
        store = ConversationStore()
        store.append("t", Role.USER, "x")
        store.clear("t")
        assert store.history("t") == []
        assert "t" not in store.keys()

    def test_clear_absent_key_is_noop(self):
        store = ConversationStore()
        store.clear("ghost")
        store.clear("ghost")
        assert store.count() == 0

    def test_clear_only_affects_one_key(self):
        store = ConversationStore()
        store.append("a", Role.USER, "x")
        store.append("b", Role.USER, "y")
        store.clear("a")
        assert store.keys() == {"b"}
        assert [m.content for m in store.history("b")] == ["y"]

    def test_keys_and_count(self):
        store = ConversationStore()
        assert store.keys() == set()
        assert store.count() == 0

        store.append("a", Role.USER, "x")
        store.append("b", Role.USER, "y")
        store.append("a", Role.ASSISTANT, "z")

        assert store.keys() == {"a", "b"}
        assert store.count() == 2

    def test_history_read_does_not_create_key(self):
        store = ConversationStore()
        store.history("phantom")
        assert store.count() == 0
