"""Tests for the run workflow."""

import typing as t

import pytest

from conftest import FakePane
from panetap.errors import CommandExitError, IdleTimeoutError
from panetap.pane.execution import clamp_timeout, resolve_outcome, run_command
from panetap.types import RunResult

WINDOW = "__PANETAP_RUN_START:abc__\nbuilding\n__PANETAP_EXIT:7\n__PANETAP_RUN_END:abc__\n"


def _run(pane, clock, command="make", **kwargs):
    kwargs.setdefault("idle", 0.0)
    kwargs.setdefault("timeout", 5.0)
    return run_command(pane, command, clock=clock, sleep=clock.sleep, run_id="abc", **kwargs)


def test_plain_run_returns_capture(clock):
    pane = FakePane("$ ls\nREADME\n")
    session = _run(pane, clock, command="ls", enter_delay=0.5)

    assert pane.sent == [("ls", True, 0.5)]
    assert session.result.output == "$ ls\nREADME\n"
    assert session.result.exit_found is False
    assert session.wait_error is None
    assert not session.uses_sentinels


def test_exit_code_run_extracts_window(clock):
    pane = FakePane("$ sh -lc '...'\n" + WINDOW + "$ \n")
    session = _run(pane, clock, exit_code=True)

    sent = pane.sent[0][0]
    assert sent.startswith("sh -lc ")
    assert "__PANETAP_RUN_START:abc__" in sent
    assert session.result.output == "building\n"
    assert session.result.exit_code == 7
    assert session.result.exit_found is True


def test_exit_propagation_surfaces_code(clock):
    pane = FakePane(WINDOW)
    session = _run(pane, clock, exit_code=True)

    err = resolve_outcome(session.result, session.wait_error, propagate=True, exit_requested=True)
    assert isinstance(err, CommandExitError)
    assert err.exit_code == 7
    assert "7" in str(err)
    assert session.result.to_dict()["exit_code"] == 7
    assert session.result.to_dict()["exit_found"] is True


def test_segment_without_exit_code(clock):
    pane = FakePane(WINDOW)
    session = _run(pane, clock, segment=True)

    assert session.exit_tag is None
    assert "__PANETAP_EXIT" not in pane.sent[0][0]
    # exit line is left alone when no code was requested
    assert session.result.output == "building\n__PANETAP_EXIT:7\n"


def test_recaptures_full_buffer_when_start_scrolled_off(clock):
    pane = FakePane("tail only\n", full="early\n" + WINDOW)
    session = _run(pane, clock, exit_code=True, lines=50)

    assert pane.capture_calls == [200, 50, 0]
    assert session.capture == "early\n" + WINDOW
    assert session.result.output == "building\n"
    assert session.result.exit_code == 7


def test_missing_window_keeps_limited_capture(clock):
    pane = FakePane("noise\n__PANETAP_EXIT:3\n", full="noise\n__PANETAP_EXIT:3\n")
    session = _run(pane, clock, exit_code=True, lines=50)

    assert session.result.output == "noise\n"
    assert session.result.exit_code == 3
    assert session.result.exit_found is True


def test_no_recapture_when_unlimited(clock):
    pane = FakePane("no markers\n")
    session = _run(pane, clock, segment=True, lines=0)

    assert pane.capture_calls == [200, 0]
    assert session.result.output == "no markers\n"


def test_idle_timeout_is_recorded_not_raised(clock):
    pane = FakePane("a", "b", "c", "final\n")
    session = _run(pane, clock, idle=2.0, timeout=1.0, poll_interval=0.5)

    assert isinstance(session.wait_error, IdleTimeoutError)
    assert session.result.output == "final\n"
    assert "ERR_IDLE_TIMEOUT" in session.result.wait_error
    assert resolve_outcome(session.result, session.wait_error, False, False) is session.wait_error


class OutcomeFixture(t.NamedTuple):
    test_id: str
    result: RunResult
    wait_error: t.Optional[Exception]
    propagate: bool
    exit_requested: bool
    expected: t.Optional[type]


OUTCOME_FIXTURES = [
    OutcomeFixture("success", RunResult("", 0, True), None, True, True, None),
    OutcomeFixture("nonzero_no_propagate", RunResult("", 2, True), None, False, True, None),
    OutcomeFixture("nonzero_propagate", RunResult("", 2, True), None, True, True, CommandExitError),
    OutcomeFixture("missing_code_propagate", RunResult(""), None, True, True, CommandExitError),
    OutcomeFixture("missing_code_no_propagate", RunResult(""), None, False, True, None),
    OutcomeFixture("timeout_wins", RunResult("", 2, True), IdleTimeoutError(), True, True, IdleTimeoutError),
    OutcomeFixture("propagate_without_request", RunResult(""), None, True, False, None),
]


@pytest.mark.parametrize(OutcomeFixture._fields, OUTCOME_FIXTURES, ids=[f.test_id for f in OUTCOME_FIXTURES])
def test_resolve_outcome(test_id, result, wait_error, propagate, exit_requested, expected):
    err = resolve_outcome(result, wait_error, propagate, exit_requested)
    if expected is None:
        assert err is None
    else:
        assert isinstance(err, expected)


def test_clamp_timeout():
    assert clamp_timeout(None, 60.0) == 60.0
    assert clamp_timeout(0, 60.0) == 60.0
    assert clamp_timeout(-3, 60.0) == 60.0
    assert clamp_timeout(5.5, 60.0) == 5.5
