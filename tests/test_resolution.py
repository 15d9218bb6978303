"""Tests for target resolution with an injected context."""

import pytest

from panetap.errors import TargetError
from panetap.tmux.pane import PaneInfo
from panetap.tmux.resolution import (
    TargetContext,
    resolve_pane,
    resolve_session_target,
    resolve_target,
    validate_target,
)

PANES = [
    PaneInfo("work", 1, 0, True, "vim", "editor"),
    PaneInfo("dev", 0, 1, True, "bash", "shell"),
    PaneInfo("dev", 0, 0, False, "bash", "shell"),
]


def make_ctx(environ=None, current="dev:1.2", panes=PANES, aliases=None):
    return TargetContext(
        environ={"TMUX": "/tmp/tmux-1000/default,1,0"} if environ is None else environ,
        current_pane=lambda: current,
        list_panes=lambda: list(panes),
        pane_swp=lambda pane_id: {"%3": "dev:0.1"}[pane_id],
        aliases=lambda: {"api": "work:2.0"} if aliases is None else aliases,
        managed_session=lambda: "panetap",
    )


def _code(exc_info):
    return exc_info.value.code


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_empty_target_required(raw):
    with pytest.raises(TargetError) as exc_info:
        resolve_target(raw, make_ctx())
    assert _code(exc_info) == "ERR_PANE_REQUIRED"


def test_canonical_target_passthrough():
    assert resolve_target(" dev:0.1 ", make_ctx()) == "dev:0.1"


def test_pane_id_lookup():
    assert resolve_target("%3", make_ctx()) == "dev:0.1"


def test_current_inside_tmux():
    assert resolve_target("@current", make_ctx()) == "dev:1.2"


def test_current_outside_tmux():
    with pytest.raises(TargetError) as exc_info:
        resolve_target("@current", make_ctx(environ={}))
    assert _code(exc_info) == "ERR_NOT_IN_TMUX"


def test_current_unknown():
    with pytest.raises(TargetError) as exc_info:
        resolve_target("@current", make_ctx(current=None))
    assert _code(exc_info) == "ERR_NO_CURRENT_PANE"


def test_active_picks_first_sorted():
    assert resolve_target("@active", make_ctx()) == "dev:0.1"


def test_active_none():
    with pytest.raises(TargetError) as exc_info:
        resolve_target("@active", make_ctx(panes=[PaneInfo("dev", 0, 0, False, "bash", "")]))
    assert _code(exc_info) == "ERR_NO_ACTIVE_PANE"


@pytest.mark.parametrize("raw", ["@api", "@API"])
def test_alias(raw):
    assert resolve_target(raw, make_ctx()) == "work:2.0"


def test_unknown_alias():
    with pytest.raises(TargetError) as exc_info:
        resolve_target("@nope", make_ctx())
    assert _code(exc_info) == "ERR_UNKNOWN_SELECTOR"


@pytest.mark.parametrize("target", ["dev", "dev:0", "dev.0", "dev:a.1", ":0.1", "a:b:0.1", "dev:0.1.2", "dev:0."])
def test_validate_target_rejects(target):
    with pytest.raises(TargetError) as exc_info:
        validate_target(target)
    assert _code(exc_info) == "ERR_INVALID_PANE"


def test_validate_target_accepts():
    validate_target("my-session:10.3")


def test_resolve_pane_validates_alias_target():
    with pytest.raises(TargetError) as exc_info:
        resolve_pane("@bad", make_ctx(aliases={"bad": "not-a-pane"}))
    assert _code(exc_info) == "ERR_INVALID_PANE"


def test_resolve_session_target():
    ctx = make_ctx()
    assert resolve_session_target(None, ctx) is None
    assert resolve_session_target("work", ctx) == "work"
    assert resolve_session_target("@current", ctx) == "dev"
    assert resolve_session_target("@managed", ctx) == "panetap"

    with pytest.raises(TargetError) as exc_info:
        resolve_session_target("@bogus", ctx)
    assert _code(exc_info) == "ERR_UNKNOWN_SELECTOR"
