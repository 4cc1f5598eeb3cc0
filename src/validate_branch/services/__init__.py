"""Services package for validate-branch.

This package contains the business logic: in-process validation, hook script
generation, hook lifecycle management, configuration resolution and the
interactive command surface.
"""

from .commands import CommandSurface, StatusState, StatusSummary
from .config_resolver import (
    ConfigResolver,
    configuration_from_settings,
    load_workspace_settings,
)
from .hook_manager import HookLifecycleManager
from .interfaces import (
    CommandRunner,
    ConfigProvider,
    DictConfigProvider,
    Notifier,
    Prompter,
    SettingsOpener,
)
from .script_generator import HookScriptSynthesizer
from .validator import (
    check,
    commit_subject_line,
    explain,
    validate,
    validate_branch_name,
    validate_commit_message,
)

__all__ = [
    'CommandSurface',
    'StatusState',
    'StatusSummary',
    'ConfigResolver',
    'configuration_from_settings',
    'load_workspace_settings',
    'HookLifecycleManager',
    'CommandRunner',
    'ConfigProvider',
    'DictConfigProvider',
    'Notifier',
    'Prompter',
    'SettingsOpener',
    'HookScriptSynthesizer',
    'check',
    'commit_subject_line',
    'explain',
    'validate',
    'validate_branch_name',
    'validate_commit_message',
]
