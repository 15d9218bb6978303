"""Tests for coded errors and shared types."""

import pytest

from panetap.errors import (
    CodedError,
    CommandExitError,
    IdleTimeoutError,
    SignalError,
    TargetError,
)
from panetap.tmux.exceptions import NoServerError
from panetap.types import PaneIdentifier, RunResult, is_pane_id, is_session_window_pane


def test_coded_error_format():
    err = CodedError("boom", code="ERR_X")
    assert str(err) == "ERR_X: boom"
    assert err.to_dict() == {"code": "ERR_X", "message": "boom"}


def test_coded_error_with_cause():
    err = TargetError("bad pane", cause=ValueError("nope"))
    assert str(err) == "ERR_INVALID_PANE: bad pane: nope"
    assert err.to_dict()["cause"] == "nope"


def test_default_codes():
    assert SignalError("x").code == "ERR_SIGNAL_UNSUPPORTED"
    assert CommandExitError("x", exit_code=3).exit_code == 3
    assert NoServerError("x").code == "ERR_TMUX"
    assert IdleTimeoutError().message == "timeout waiting for idle"


def test_pane_identifier_parse():
    ident = PaneIdentifier.parse("dev:1.2")
    assert (ident.session, ident.window, ident.pane) == ("dev", 1, 2)
    assert ident.swp == "dev:1.2"

    with pytest.raises(ValueError):
        PaneIdentifier.parse("dev:1")


def test_target_predicates():
    assert is_pane_id("%42")
    assert not is_pane_id("%x")
    assert is_session_window_pane("dev:0.0")
    assert not is_session_window_pane("@api")


def test_run_result_to_dict_omits_absent_fields():
    assert RunResult("out").to_dict() == {"output": "out", "exit_found": False}
    assert RunResult("out", 0, True, "ERR_IDLE_TIMEOUT: t").to_dict() == {
        "output": "out",
        "exit_code": 0,
        "exit_found": True,
        "wait_error": "ERR_IDLE_TIMEOUT: t",
    }
