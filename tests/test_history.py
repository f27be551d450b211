"""Tests for lineedit.history -- bounded store and Up/Down navigation."""

from __future__ import annotations

import pytest

from lineedit.errors import OutOfRangeError
from lineedit.history import DEFAULT_HISTORY_SIZE, HistoryNavigator, HistoryStore
from lineedit.line_buffer import LineBuffer


def make_history(*lines: str, max_size: int = DEFAULT_HISTORY_SIZE) -> HistoryStore:
    history = HistoryStore(max_size)
    for line in lines:
        history.append(line)
    return history


class TestHistoryStoreAppend:
    def test_append_adds_entry(self) -> None:
        history = HistoryStore()
        assert history.append("ls") is True
        assert history.entries == ["ls"]
        assert history.count() == 1

    def test_empty_line_is_ignored(self) -> None:
        history = HistoryStore()
        assert history.append("") is False
        assert len(history) == 0

    def test_consecutive_duplicate_is_ignored(self) -> None:
        history = make_history("ls")
        assert history.append("ls") is False
        assert history.entries == ["ls"]

    def test_non_adjacent_duplicate_is_kept(self) -> None:
        history = make_history("ls", "pwd", "ls")
        assert history.entries == ["ls", "pwd", "ls"]

    def test_whitespace_lines_are_kept_verbatim(self) -> None:
        history = make_history("  ls  ")
        assert history.entries == ["  ls  "]

    def test_eviction_keeps_last_n(self) -> None:
        history = make_history("a", "b", "c", "d", max_size=3)
        assert history.entries == ["b", "c", "d"]

    def test_eviction_drops_oldest_first(self) -> None:
        history = make_history(*[f"cmd{i}" for i in range(11)], max_size=10)
        assert history.count() == 10
        assert history.entry_at(0) == "cmd1"
        assert history.entry_at(9) == "cmd10"

    def test_invalid_size_rejected(self) -> None:
        with pytest.raises(ValueError):
            HistoryStore(0)

    def test_iteration_is_oldest_first(self) -> None:
        history = make_history("a", "b")
        assert list(history) == ["a", "b"]

    def test_clear(self) -> None:
        history = make_history("a", "b")
        history.clear()
        assert history.count() == 0


class TestHistoryStoreLookup:
    def test_entry_at_out_of_range(self) -> None:
        history = make_history("a")
        with pytest.raises(OutOfRangeError):
            history.entry_at(1)
        with pytest.raises(OutOfRangeError):
            history.entry_at(-1)

    def test_search_backward_finds_most_recent(self) -> None:
        history = make_history("make build", "make test", "git status")
        assert history.search_backward("mak", 3) == 1
        assert history.search_backward("mak", 1) == 0
        assert history.search_backward("mak", 0) is None

    def test_search_backward_no_match(self) -> None:
        history = make_history("ls")
        assert history.search_backward("zzz", 1) is None

    def test_search_backward_bad_start(self) -> None:
        history = make_history("ls")
        with pytest.raises(OutOfRangeError):
            history.search_backward("ls", 2)


class TestHistoryNavigator:
    def test_up_up_down_down_scenario(self) -> None:
        history = make_history("ls -la", "cd /tmp", "echo test")
        nav = HistoryNavigator(history)
        buf = LineBuffer()

        nav.previous(buf)
        assert buf.to_string() == "echo test"
        nav.previous(buf)
        assert buf.to_string() == "cd /tmp"
        nav.next(buf)
        assert buf.to_string() == "echo test"
        nav.next(buf)
        assert buf.to_string() == ""
        assert not nav.is_browsing

    def test_loaded_entry_puts_cursor_at_end(self) -> None:
        history = make_history("cd /tmp")
        nav = HistoryNavigator(history)
        buf = LineBuffer()
        nav.previous(buf)
        assert buf.cursor == len("cd /tmp")

    def test_live_line_snapshot_restored(self) -> None:
        history = make_history("a", "b")
        nav = HistoryNavigator(history)
        buf = LineBuffer("half typed")
        buf.move_to(4)

        nav.previous(buf)
        nav.previous(buf)
        nav.next(buf)
        nav.next(buf)
        assert buf.to_string() == "half typed"
        assert nav.saved_line == "half typed"

    def test_up_at_oldest_is_noop(self) -> None:
        history = make_history("only")
        nav = HistoryNavigator(history)
        buf = LineBuffer()
        assert nav.previous(buf) is True
        assert nav.previous(buf) is False
        assert buf.to_string() == "only"
        assert nav.position == 0

    def test_down_on_live_line_is_noop(self) -> None:
        history = make_history("a")
        nav = HistoryNavigator(history)
        buf = LineBuffer("typing")
        assert nav.next(buf) is False
        assert buf.to_string() == "typing"

    def test_empty_history_navigation_is_noop(self) -> None:
        nav = HistoryNavigator(HistoryStore())
        buf = LineBuffer("abc")
        assert nav.previous(buf) is False
        assert nav.next(buf) is False
        assert buf.to_string() == "abc"
        assert nav.saved_line is None

    @pytest.mark.parametrize("steps", [0, 1, 2, 3, 5])
    def test_up_then_equal_downs_restores_live_line(self, steps: int) -> None:
        history = make_history("one", "two", "three")
        nav = HistoryNavigator(history)
        buf = LineBuffer("live")
        ups = sum(nav.previous(buf) for _ in range(steps))
        for _ in range(ups):
            nav.next(buf)
        assert buf.to_string() == "live"

    def test_reset_returns_to_live_position(self) -> None:
        history = make_history("a", "b")
        nav = HistoryNavigator(history)
        buf = LineBuffer()
        nav.previous(buf)
        nav.reset()
        assert nav.position == history.count()
        assert nav.saved_line is None
        assert not nav.is_browsing
