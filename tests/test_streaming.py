"""Tests for follow-mode diffing and streaming."""

from conftest import FakePane
from panetap.pane.streaming import FollowEvent, diff_lines, diff_lines_by_count, follow


def _lines(events):
    return [e.line for e in events]


def test_diff_lines_appended():
    assert diff_lines(["a", "b", "c"], ["a", "b", "c", "d"]) == ["d"]


def test_diff_lines_scrolled():
    assert diff_lines(["a", "b", "c"], ["b", "c", "d", "e"]) == ["d", "e"]


def test_diff_lines_unchanged():
    assert diff_lines(["a", "b"], ["a", "b"]) == []


def test_diff_lines_no_overlap_emits_all():
    assert diff_lines(["a", "b"], ["x", "y"]) == ["x", "y"]
    assert diff_lines([], ["x"]) == ["x"]


def test_diff_lines_by_count():
    assert diff_lines_by_count(["a", "b", "c"], 2) == (["c"], 3)
    assert diff_lines_by_count(["a"], 0) == (["a"], 1)
    # buffer shrank: emit again in full
    assert diff_lines_by_count(["z"], 3) == (["z"], 1)


def test_follow_once_from_start(clock):
    pane = FakePane("x\ny\n")
    events = list(follow(pane, once=True, from_start=True, clock=clock, sleep=clock.sleep, timestamp=lambda: "T"))

    assert _lines(events) == ["x", "y"]
    assert events[0] == FollowEvent(time="T", line="x")
    assert events[0].to_dict() == {"time": "T", "line": "x"}


def test_follow_once_skips_existing_buffer(clock):
    pane = FakePane("x\ny\n")
    assert list(follow(pane, once=True, clock=clock, sleep=clock.sleep)) == []


def test_follow_emits_new_lines_until_duration(clock):
    pane = FakePane("a\nb\nc\n", "a\nb\nc\nd\n")
    events = list(follow(pane, lines=200, interval=1.0, duration=1.5, clock=clock, sleep=clock.sleep))

    assert _lines(events) == ["d"]
    assert clock.sleeps == [1.0, 1.0]
    assert pane.capture_calls == [200, 200, 200]


def test_follow_unlimited_capture_diffs_by_count(clock):
    pane = FakePane("a\n", "a\nb\n", "z\n")
    events = list(follow(pane, lines=0, interval=1.0, duration=2.5, clock=clock, sleep=clock.sleep))

    assert _lines(events) == ["b", "z"]


def test_follow_non_positive_interval_defaults(clock):
    pane = FakePane("a\n")
    list(follow(pane, interval=0, duration=1.5, clock=clock, sleep=clock.sleep))
    assert clock.sleeps == [1.0, 1.0]
