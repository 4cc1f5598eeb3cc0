"""Interfaces of the external collaborators the core depends on.

The editor (or the CLI) supplies implementations of these: where live
configuration comes from, how git is executed, how messages and prompts reach
the human and how the settings UI is opened.
"""

import abc
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union


class ConfigProvider(abc.ABC):
    """Source of live configuration values (keys without the section prefix)."""

    @abc.abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value of key, or default when it is unset."""


class CommandRunner(abc.ABC):
    """Executes version-control commands."""

    @abc.abstractmethod
    def run(self, args: Sequence[str], cwd: Union[str, Path]) -> str:
        """Run a command and return its stripped standard output.

        Raises:
            ExternalCommandError: If the command fails or cannot be started
        """


class Notifier(abc.ABC):
    """Surfaces messages to the human, optionally with action choices."""

    @abc.abstractmethod
    def info(self, message: str, *actions: str) -> Optional[str]:
        """Show an informational message; return the chosen action, if any."""

    @abc.abstractmethod
    def warning(self, message: str, *actions: str) -> Optional[str]:
        """Show a warning; return the chosen action, if any."""

    @abc.abstractmethod
    def error(self, message: str, *actions: str) -> Optional[str]:
        """Show an error; return the chosen action, if any."""


class Prompter(abc.ABC):
    """Asks the human for a line of input."""

    @abc.abstractmethod
    def prompt(self, message: str, placeholder: str = "") -> Optional[str]:
        """Return the entered text, or None if the prompt was dismissed."""


class SettingsOpener(abc.ABC):
    """Opens the settings UI at a given section."""

    @abc.abstractmethod
    def open_settings(self, section: str) -> None:
        """Show the settings for section."""


class DictConfigProvider(ConfigProvider):
    """ConfigProvider backed by a plain mapping."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._values[key] = value


__all__ = [
    "ConfigProvider",
    "CommandRunner",
    "Notifier",
    "Prompter",
    "SettingsOpener",
    "DictConfigProvider",
]
