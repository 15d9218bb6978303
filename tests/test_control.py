"""Tests for signals and the stop workflow."""

import signal

import pytest

from conftest import FakePane, TickingPane
from panetap.errors import SignalError
from panetap.pane import control
from panetap.pane.control import parse_signal, send_signal, stop_pane


@pytest.mark.parametrize(
    "raw,expected,name",
    [
        (None, signal.SIGTERM, "SIGTERM"),
        ("", signal.SIGTERM, "SIGTERM"),
        ("int", signal.SIGINT, "SIGINT"),
        ("SIGKILL", signal.SIGKILL, "SIGKILL"),
        (" hup ", signal.SIGHUP, "SIGHUP"),
        ("15", signal.SIGTERM, "SIGTERM"),
        ("9", signal.SIGKILL, "SIGKILL"),
    ],
)
def test_parse_signal(raw, expected, name):
    assert parse_signal(raw) == (expected, name)


@pytest.mark.parametrize("raw", ["BOGUS", "999", "SIG"])
def test_parse_signal_rejects(raw):
    with pytest.raises(SignalError) as exc_info:
        parse_signal(raw)
    assert exc_info.value.code == "ERR_SIGNAL_UNSUPPORTED"


def test_send_signal(monkeypatch):
    sent = []
    monkeypatch.setattr(control.os, "kill", lambda pid, sig: sent.append((pid, sig)))

    send_signal(4242, signal.SIGINT)
    assert sent == [(4242, signal.SIGINT)]

    with pytest.raises(SignalError):
        send_signal(0)


def test_stop_pane_settles(clock):
    pane = FakePane("^C\n$ \n")
    result = stop_pane(pane, idle=1.0, timeout=5.0, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    assert pane.interrupted == 1
    assert not pane.killed
    assert result.to_dict() == {"pane_id": "dev:0.0", "interrupted": True, "killed": False, "timed_out": False}


def test_stop_pane_kills_on_timeout(clock):
    pane = TickingPane()
    result = stop_pane(pane, idle=1.0, timeout=2.0, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    assert pane.killed
    assert result.killed and result.timed_out
    assert "ERR_IDLE_TIMEOUT" in result.to_dict()["wait_error"]


def test_stop_pane_without_kill(clock):
    pane = TickingPane()
    result = stop_pane(pane, idle=1.0, timeout=2.0, kill_on_timeout=False, clock=clock, sleep=clock.sleep)

    assert not pane.killed
    assert result.timed_out and not result.killed
