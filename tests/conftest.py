"""pytest configuration and shared fixtures for validate-branch tests."""

import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest

from validate_branch.exceptions import ExternalCommandError
from validate_branch.models.configuration import Configuration
from validate_branch.patterns.registry import PatternRegistry
from validate_branch.services.interfaces import (
    CommandRunner,
    Notifier,
    Prompter,
    SettingsOpener,
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
requires_sh = pytest.mark.skipif(
    shutil.which("sh") is None or shutil.which("grep") is None,
    reason="a POSIX sh with grep is required to execute hook scripts",
)


class RecordingNotifier(Notifier):
    """Notifier that records every message and answers with scripted actions."""

    def __init__(self, choice: Optional[str] = None):
        self.choice = choice
        self.messages: List[Tuple[str, str, Tuple[str, ...]]] = []

    def _record(self, level: str, message: str, actions: Tuple[str, ...]) -> Optional[str]:
        self.messages.append((level, message, actions))
        return self.choice if self.choice in actions else None

    def info(self, message: str, *actions: str) -> Optional[str]:
        return self._record("info", message, actions)

    def warning(self, message: str, *actions: str) -> Optional[str]:
        return self._record("warning", message, actions)

    def error(self, message: str, *actions: str) -> Optional[str]:
        return self._record("error", message, actions)

    def of_level(self, level: str) -> List[str]:
        return [message for lvl, message, _ in self.messages if lvl == level]


class ScriptedPrompter(Prompter):
    """Prompter returning queued answers; None simulates a dismissed prompt."""

    def __init__(self, *answers: Optional[str]):
        self.answers = list(answers)
        self.prompts: List[Tuple[str, str]] = []

    def prompt(self, message: str, placeholder: str = "") -> Optional[str]:
        self.prompts.append((message, placeholder))
        return self.answers.pop(0) if self.answers else None


class FakeRunner(CommandRunner):
    """CommandRunner returning canned output per command."""

    def __init__(self, outputs: Optional[Dict[Tuple[str, ...], Union[str, Exception]]] = None):
        self.outputs = outputs or {}
        self.calls: List[Tuple[List[str], str]] = []

    def run(self, args: Sequence[str], cwd: Union[str, Path]) -> str:
        self.calls.append((list(args), str(cwd)))
        result = self.outputs.get(tuple(args), "")
        if isinstance(result, Exception):
            raise result
        return result


class RecordingOpener(SettingsOpener):
    def __init__(self):
        self.sections: List[str] = []

    def open_settings(self, section: str) -> None:
        self.sections.append(section)


@pytest.fixture
def registry():
    """A fresh registry of the builtin conventions."""
    return PatternRegistry()


@pytest.fixture
def default_config():
    return Configuration()


@pytest.fixture
def workspace(tmp_path):
    """A workspace folder with an empty .git directory (no git needed)."""
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def git_repo(tmp_path):
    """A real git repository created with ``git init``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    root = tmp_path / "git-repo"
    root.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=root, check=True)
    subprocess.run(["git", "config", "user.email", "dev@example.com"], cwd=root, check=True)
    subprocess.run(["git", "config", "user.name", "Dev"], cwd=root, check=True)
    return root


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def opener():
    return RecordingOpener()


@pytest.fixture
def external_error():
    """Factory for git failures as the runner reports them."""
    def _make(stderr: str, command: Sequence[str] = ("git",)) -> ExternalCommandError:
        return ExternalCommandError(stderr, command=command, returncode=128, stderr=stderr)
    return _make
