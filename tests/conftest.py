"""Shared fixtures: pane doubles, a manual clock and a scripted tmux binary."""

import subprocess

import pytest

from panetap.config import reset_config_manager


class FakeClock:
    """Manual epoch clock; sleep() advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, secs: float) -> None:
        self.sleeps.append(secs)
        self.now += secs


class FakePane:
    """Pane double. Captures play back frames in order and the last frame repeats.

    When full is given it is returned for unlimited captures (lines == 0).
    """

    def __init__(self, *frames, target="dev:0.0", full=None):
        self.target = target
        self.frames = list(frames) or [""]
        self.full = full
        self.capture_calls = []
        self.sent = []
        self.keys = []
        self.interrupted = 0
        self.killed = False

    def capture(self, lines=0):
        self.capture_calls.append(lines)
        if lines == 0 and self.full is not None:
            return self.full
        if len(self.frames) > 1:
            return self.frames.pop(0)
        return self.frames[0]

    def send(self, text, enter=True, delay=0.0):
        self.sent.append((text, enter, delay))

    def send_keys(self, keys):
        self.keys.extend(keys)

    def interrupt(self):
        self.interrupted += 1

    def escape(self):
        self.keys.append("Escape")

    def kill(self):
        self.killed = True


class TickingPane(FakePane):
    """Pane whose output changes on every capture."""

    def capture(self, lines=0):
        self.capture_calls.append(lines)
        return f"tick {len(self.capture_calls)}\n"


class ActivityPane(FakePane):
    """Pane that also reports tmux activity timestamps (last one repeats)."""

    def __init__(self, *frames, activity=(), target="dev:0.0"):
        super().__init__(*frames, target=target)
        self.activity = list(activity)

    def last_activity(self):
        if len(self.activity) > 1:
            return self.activity.pop(0)
        return self.activity[0] if self.activity else None


class FakeTmux:
    """Stands in for subprocess.run; answers per tmux subcommand."""

    def __init__(self):
        self.calls = []
        self.responses = {}

    def respond(self, subcommand, stdout="", returncode=0, stderr=""):
        self.responses[subcommand] = (returncode, stdout, stderr)

    def __call__(self, cmd, capture_output=True, text=True, input=None):
        self.calls.append(list(cmd[1:]))
        returncode, stdout, stderr = self.responses.get(cmd[1], (0, "", ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    @property
    def subcommands(self):
        return [call[0] for call in self.calls]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the user's config, aliases and tmux client."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in ("PANETAP_ALIASES", "PANETAP_SESSION", "TMUX"):
        monkeypatch.delenv(name, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_tmux(monkeypatch):
    fake = FakeTmux()
    monkeypatch.setattr("panetap.tmux.core.subprocess.run", fake)
    return fake
