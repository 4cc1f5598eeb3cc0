"""Configuration resolution for validate-branch.

Two independent configuration sources exist:

- the live configuration, read from a ConfigProvider and used by in-process
  validation;
- the snapshot persisted in the workspace settings file, used when rendering
  hook scripts.

The snapshot becomes stale as soon as the live configuration changes and stays
stale until the hooks are installed again. Nothing here reinstalls hooks
automatically.

Both sources resolve into a fully populated Configuration: every unset or
wrong-typed key takes its default.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..exceptions import FilesystemError
from ..models.configuration import (
    CONFIG_SECTION,
    LEGACY_SETTING_KEYS,
    SETTING_KEYS,
    Configuration,
)
from ..utils.file_operations import read_json_file
from ..utils.logging import get_logger
from .interfaces import ConfigProvider

logger = get_logger(__name__)

# Workspace settings file holding the snapshot, relative to the workspace root
SNAPSHOT_SETTINGS_PATH = Path(".vscode") / "settings.json"

_UNSET = object()


def _lookup(get: Callable[[str], Any], field_name: str, prefix: str = "") -> Any:
    """Find a field's value under its current key, then under its legacy key."""
    value = get(prefix + SETTING_KEYS[field_name])
    if value is _UNSET and field_name in LEGACY_SETTING_KEYS:
        value = get(prefix + LEGACY_SETTING_KEYS[field_name])
    return value


def configuration_from_settings(settings: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from a settings object with ``validateBranch.`` keys."""
    prefix = CONFIG_SECTION + "."
    values: Dict[str, Any] = {}
    for field_name in SETTING_KEYS:
        value = _lookup(lambda key: settings.get(key, _UNSET), field_name, prefix)
        if value is not _UNSET:
            values[field_name] = value
    return Configuration.from_values(values)


def load_workspace_settings(workspace: Union[str, Path]) -> Dict[str, Any]:
    """Load the workspace settings file as a dict.

    Returns an empty dict when the file is missing, unreadable, not valid JSON
    or not a JSON object.
    """
    path = Path(workspace) / SNAPSHOT_SETTINGS_PATH
    if not path.is_file():
        logger.debug("No settings file at %s, using defaults", path)
        return {}

    try:
        settings = read_json_file(path)
    except (FilesystemError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable settings file %s: %s", path, e)
        return {}

    if not isinstance(settings, dict):
        logger.debug("Ignoring settings file %s: not a JSON object", path)
        return {}
    return settings


class ConfigResolver:
    """Resolves live and snapshot configurations.

    Attributes:
        provider: Source of the live configuration
    """

    def __init__(self, provider: ConfigProvider):
        self.provider = provider

    def live_config(self) -> Configuration:
        """Read the live configuration, substituting defaults for unset keys."""
        values: Dict[str, Any] = {}
        for field_name in SETTING_KEYS:
            value = _lookup(self._provider_value, field_name)
            if value is not _UNSET:
                values[field_name] = value
        return Configuration.from_values(values)

    def _provider_value(self, key: str) -> Any:
        value = self.provider.get(key, None)
        return _UNSET if value is None else value

    @staticmethod
    def snapshot_path(workspace: Union[str, Path]) -> Path:
        return Path(workspace) / SNAPSHOT_SETTINGS_PATH

    def snapshot_config(self, workspace: Optional[Union[str, Path]]) -> Configuration:
        """Read the configuration snapshot of a workspace.

        A missing, unreadable or malformed settings file yields the default
        configuration; hook scripts must stay renderable regardless.
        """
        if workspace is None:
            return Configuration()
        return configuration_from_settings(load_workspace_settings(workspace))


__all__ = [
    "SNAPSHOT_SETTINGS_PATH",
    "ConfigResolver",
    "configuration_from_settings",
    "load_workspace_settings",
]
