"""Tests for pane snapshots, process trees and locate matching."""

import hashlib
import re

import pytest

from conftest import FakeClock, FakePane
from panetap.commands.locate import Field, build_matcher, field_values, fuzzy_match
from panetap.pane import inspection
from panetap.pane.idle import content_hash
from panetap.pane.inspection import ProcessNode, build_process_tree, parse_process_list, snapshot_pane
from panetap.tmux.pane import PaneDetails


def details(activity=None, title="server"):
    return PaneDetails(
        session="dev",
        window_index=1,
        window_name="api",
        window_active=True,
        pane_index=2,
        pane_id="%9",
        is_active=False,
        command="node",
        title=title,
        path="/srv/api",
        pid=4242,
        activity=activity,
    )


def test_content_hash_is_sha1():
    assert content_hash("abc\n") == hashlib.sha1(b"abc\n").hexdigest()


def test_snapshot_idle_from_activity():
    pane = FakePane("listening on :8080\n", target="dev:1.2")
    snap = snapshot_pane(pane, details(activity=990.0), idle=5, lines=50, clock=FakeClock(1000.0))

    assert snap.idle_seconds == 10.0
    assert snap.idle is True
    assert snap.status == "idle"
    assert snap.output_hash == content_hash("listening on :8080\n")
    assert snap.lines_checked == 50
    assert snap.activity_at == "1970-01-01T00:16:30+00:00"
    assert pane.capture_calls == [50]


def test_snapshot_busy_and_default_idle():
    snap = snapshot_pane(FakePane("x"), details(activity=999.0), idle=0, lines=0, clock=FakeClock(1000.0))
    # idle <= 0 falls back to 2 seconds
    assert snap.idle is False
    assert snap.status == "busy"


def test_snapshot_without_activity_is_never_idle():
    snap = snapshot_pane(FakePane("x"), details(), idle=1, lines=10, clock=FakeClock())
    data = snap.to_dict()

    assert data["idle_seconds"] is None
    assert data["idle"] is False
    assert data["activity_at"] is None
    assert data["pane_id"] == "dev:0.0"


PS_OUTPUT = """\
    1     0 /sbin/init
  100     1 tmux new-session -d
  200   100 -zsh
  201   200 npm run dev
  202   201 node server.js --port 8080
  203   200 tail -f log
  300     1 sshd
garbage line
"""


def test_parse_process_list():
    procs = parse_process_list(PS_OUTPUT)
    assert len(procs) == 7
    assert procs[4] == ProcessNode(202, 201, "node server.js --port 8080")


def test_build_process_tree_depth_first():
    tree = build_process_tree(200, parse_process_list(PS_OUTPUT))

    assert [(n.pid, n.depth) for n in tree] == [(200, 0), (201, 1), (202, 2), (203, 1)]
    assert tree[0].command == "-zsh"


def test_build_process_tree_unknown_root():
    assert build_process_tree(999, parse_process_list(PS_OUTPUT)) == []


def test_process_tree_runs_ps(monkeypatch):
    calls = []

    class Result:
        returncode = 0
        stdout = PS_OUTPUT
        stderr = ""

    def fake_run(cmd, capture_output=True, text=True):
        calls.append(cmd)
        return Result()

    monkeypatch.setattr(inspection.subprocess, "run", fake_run)

    assert [n.pid for n in inspection.process_tree(201)] == [201, 202]
    assert calls == [["ps", "-o", "pid=,ppid=,command=", "-A"]]
    assert inspection.process_tree(0) == []
    assert len(calls) == 1


def test_process_tree_ps_failure(monkeypatch):
    class Result:
        returncode = 1
        stdout = ""
        stderr = "ps: illegal option"

    monkeypatch.setattr(inspection.subprocess, "run", lambda *args, **kwargs: Result())
    with pytest.raises(OSError):
        inspection.process_tree(200)


@pytest.mark.parametrize(
    "value,query,expected",
    [
        ("npm run dev-server", "ndsrv", True),
        ("node", "NOD", True),
        ("node", "den", False),
        ("anything", "", True),
        ("ab", "abc", False),
    ],
)
def test_fuzzy_match(value, query, expected):
    assert fuzzy_match(value, query) is expected


def test_build_matcher_modes():
    assert build_matcher("VIM")("nvim")
    assert not build_matcher("emacs")("nvim")
    assert build_matcher(r"^n?vim$", regex=True)("nvim")
    assert not build_matcher(r"^vim$", regex=True)("nvim")
    assert build_matcher("nv", fuzzy=True)("neovim")


def test_build_matcher_bad_regex():
    with pytest.raises(re.error):
        build_matcher("(", regex=True)


def test_field_values():
    pane = details()
    assert field_values(pane, Field.any) == ["node", "server", "/srv/api"]
    assert field_values(pane, Field.path) == ["/srv/api"]
