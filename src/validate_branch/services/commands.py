"""Interactive command surface of validate-branch.

Each command runs to completion before the next one starts. The only points
where a command waits are git invocations through the CommandRunner and
prompts through the Prompter; a dismissed prompt ends the command without side
effects.

Commands never let domain errors escape: configuration problems, filesystem
problems and git failures are reported through the Notifier and the command
returns False.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import (
    ConfigurationError,
    ExternalCommandError,
    FilesystemError,
)
from ..models.configuration import CONFIG_SECTION, Configuration
from ..models.validation import ValidationOutcome
from ..patterns.registry import PatternRegistry, get_pattern_registry
from ..types.enums import HookFileState, HookKind, SubjectKind
from ..utils.logging import get_logger
from ..utils.permissions import is_executable
from .config_resolver import ConfigResolver
from .hook_manager import HookLifecycleManager
from .interfaces import CommandRunner, Notifier, Prompter, SettingsOpener
from .validator import check, commit_subject_line

logger = get_logger(__name__)

# Action labels offered with notifications
OPEN_SETTINGS = "Open Settings"
TEST_BRANCH_CREATION = "Test Branch Creation"
TEST_COMMIT = "Test Commit"

Workspace = Optional[Union[str, Path]]


class StatusState(str, Enum):
    """Overall state shown by the status indicator."""
    NO_WORKSPACE = "no-workspace"
    ACTIVE = "active"
    READY = "ready"


@dataclass
class StatusSummary:
    """Status view derived on demand from configuration and hook files.

    Attributes:
        state: Overall state
        text: Short status text
        tooltip: Longer description
        config: Live configuration at the time of the query
        hooks: State of each hook file
        outdated_hooks: Managed hooks whose content differs from what the
            current settings snapshot would render (reinstall to update)
        non_executable_hooks: Managed hooks git will not run
    """
    state: StatusState
    text: str
    tooltip: str
    config: Configuration
    hooks: Dict[HookKind, HookFileState] = field(default_factory=dict)
    outdated_hooks: List[HookKind] = field(default_factory=list)
    non_executable_hooks: List[HookKind] = field(default_factory=list)


class CommandSurface:
    """The validate-branch commands, wired to their collaborators."""

    def __init__(
        self,
        resolver: ConfigResolver,
        runner: CommandRunner,
        notifier: Notifier,
        prompter: Prompter,
        opener: SettingsOpener,
        registry: Optional[PatternRegistry] = None,
        hook_manager: Optional[HookLifecycleManager] = None,
    ):
        self.resolver = resolver
        self.runner = runner
        self.notifier = notifier
        self.prompter = prompter
        self.opener = opener
        self.registry = registry or get_pattern_registry()
        self.hook_manager = hook_manager or HookLifecycleManager()

    # ----- commands -----

    def validate_current(self, workspace: Workspace) -> bool:
        """Validate the currently checked-out branch."""
        if not self._require_workspace(workspace):
            return False

        try:
            current_branch = self.runner.run(["git", "branch", "--show-current"], workspace)
            config = self.resolver.live_config()
            rule, examples = self.registry.resolve_for(SubjectKind.BRANCH, config)
        except ExternalCommandError as e:
            self.notifier.error(f"Error: {e}")
            return False
        except ConfigurationError as e:
            self._report_configuration_error(e)
            return False

        if not current_branch:
            self.notifier.warning("HEAD is detached; there is no current branch to validate.")
            return False

        outcome = check(current_branch, rule, examples)
        if outcome.ok:
            self.notifier.info(outcome.format_message())
            return True
        self._report_failure(outcome)
        return False

    def create_branch(self, workspace: Workspace, name: Optional[str] = None) -> bool:
        """Prompt for a branch name, validate it and create the branch."""
        if not self._require_workspace(workspace):
            return False

        config = self.resolver.live_config()
        if not config.branch_validation_enabled:
            self.notifier.info("Branch validation is disabled")
            return False

        try:
            rule, examples = self.registry.resolve_for(SubjectKind.BRANCH, config)
        except ConfigurationError as e:
            self._report_configuration_error(e)
            return False

        if name is None:
            name = self.prompter.prompt(
                f"Enter branch name ({rule.convention_id} convention)",
                placeholder=examples[0] if examples else "",
            )
        if not name:
            logger.debug("Branch creation cancelled")
            return False

        outcome = check(name, rule, examples)
        if not outcome.ok:
            self._report_failure(outcome)
            return False

        try:
            self.runner.run(["git", "checkout", "-b", name], workspace)
        except ExternalCommandError as e:
            self.notifier.error(f"Failed to create branch: {e}")
            return False

        self.notifier.info(f"✅ Branch \"{name}\" created successfully!")
        return True

    def create_commit(self, workspace: Workspace, message: Optional[str] = None) -> bool:
        """Prompt for a commit message, validate it and commit the staged changes."""
        if not self._require_workspace(workspace):
            return False

        config = self.resolver.live_config()
        if not config.commit_validation_enabled:
            self.notifier.info("Commit validation is disabled")
            return False

        try:
            rule, examples = self.registry.resolve_for(SubjectKind.COMMIT, config)
        except ConfigurationError as e:
            self._report_configuration_error(e)
            return False

        if message is None:
            message = self.prompter.prompt(
                f"Enter commit message ({rule.convention_id} convention)",
                placeholder=examples[0] if examples else "",
            )
        if not message:
            logger.debug("Commit creation cancelled")
            return False

        outcome = check(commit_subject_line(message), rule, examples)
        if not outcome.ok:
            outcome.subject = message
            self._report_failure(outcome)
            return False

        try:
            self.runner.run(["git", "commit", "-m", message], workspace)
        except ExternalCommandError as e:
            self.notifier.error(f"Failed to commit: {e}")
            return False

        self.notifier.info("✅ Commit created successfully!")
        return True

    def install_hooks(self, workspace: Workspace) -> bool:
        """Install the managed hooks rendered from the workspace settings snapshot."""
        if not self._require_workspace(workspace):
            return False

        config = self.resolver.snapshot_config(workspace)
        try:
            self.hook_manager.install(workspace, config)
        except ConfigurationError as e:
            self._report_configuration_error(e)
            return False
        except FilesystemError as e:
            self.notifier.error(f"Failed to install git hooks: {e}")
            return False

        choice = self.notifier.info(
            "✅ Git hooks installed successfully! Terminal git commands will now be validated.",
            TEST_BRANCH_CREATION,
            TEST_COMMIT,
        )
        if choice == TEST_BRANCH_CREATION:
            self.notifier.info(
                "Try: git checkout -b Hello\n"
                "You'll see a warning, and commits/pushes will be blocked until renamed."
            )
        elif choice == TEST_COMMIT:
            valid = self.registry.examples_for(SubjectKind.COMMIT, config.commit_convention)
            hint = "Try: git commit -m \"invalid message\""
            if valid:
                hint += f"\nThen: git commit -m \"{valid[0]}\""
            self.notifier.info(hint)
        return True

    def remove_hooks(self, workspace: Workspace) -> bool:
        """Remove the managed hooks, leaving user-authored hooks untouched."""
        if not self._require_workspace(workspace):
            return False

        try:
            removed = self.hook_manager.remove(workspace)
        except FilesystemError as e:
            self.notifier.error(f"Failed to remove git hooks: {e}")
            return False

        if removed:
            self.notifier.info(
                "✅ Git hooks removed successfully! Terminal git commands will no longer be validated."
            )
        else:
            self.notifier.info("No validate-branch git hooks were found.")
        return True

    def open_settings(self) -> None:
        self.opener.open_settings(CONFIG_SECTION)

    # ----- derived views -----

    def status(self, workspace: Workspace) -> StatusSummary:
        """Compute the status view; nothing is cached between calls."""
        config = self.resolver.live_config()
        if workspace is None:
            return StatusSummary(
                state=StatusState.NO_WORKSPACE,
                text="VB: No Workspace",
                tooltip="No workspace folder found",
                config=config,
            )

        hooks = self.hook_manager.status(workspace)
        if not self.hook_manager.detect(workspace):
            return StatusSummary(
                state=StatusState.READY,
                text="VB: Ready",
                tooltip="Git hooks not installed - run install-hooks to validate terminal git commands",
                config=config,
                hooks=hooks,
            )

        outdated: List[HookKind] = []
        try:
            expected = self.hook_manager.synthesizer.render_all(self.resolver.snapshot_config(workspace))
        except ConfigurationError as e:
            logger.debug("Cannot render hooks from the settings snapshot: %s", e)
            expected = {}
        for kind, state in hooks.items():
            if state != HookFileState.MANAGED or kind not in expected:
                continue
            path = self.hook_manager.hook_path(workspace, kind)
            try:
                if path.read_text(encoding="utf-8") != expected[kind].rendered_text:
                    outdated.append(kind)
            except (OSError, UnicodeDecodeError):
                outdated.append(kind)

        non_executable = [
            kind for kind, state in hooks.items()
            if state == HookFileState.MANAGED
            and not is_executable(self.hook_manager.hook_path(workspace, kind))
        ]

        return StatusSummary(
            state=StatusState.ACTIVE,
            text="VB: Active",
            tooltip="Git hooks installed - Branch and commit validation active",
            config=config,
            hooks=hooks,
            outdated_hooks=outdated,
            non_executable_hooks=non_executable,
        )

    def deactivate(self, workspaces: Iterable[Union[str, Path]]) -> None:
        """Remove managed hooks from every workspace, e.g. on shutdown."""
        for workspace in workspaces:
            logger.info("Cleaning up git hooks for workspace: %s", workspace)
            try:
                self.hook_manager.remove(workspace)
            except FilesystemError as e:
                logger.error("Failed to remove git hooks from %s: %s", workspace, e)

    # ----- helpers -----

    def _require_workspace(self, workspace: Workspace) -> bool:
        if workspace is None:
            self.notifier.error("No workspace folder found")
            return False
        return True

    def _report_failure(self, outcome: ValidationOutcome) -> None:
        choice = self.notifier.error(outcome.format_message(), OPEN_SETTINGS)
        if choice == OPEN_SETTINGS:
            self.open_settings()

    def _report_configuration_error(self, error: ConfigurationError) -> None:
        logger.debug("Configuration error: %s", error.to_dict())
        choice = self.notifier.error(error.get_user_message(), OPEN_SETTINGS)
        if choice == OPEN_SETTINGS:
            self.open_settings()


__all__ = [
    "OPEN_SETTINGS",
    "TEST_BRANCH_CREATION",
    "TEST_COMMIT",
    "StatusState",
    "StatusSummary",
    "CommandSurface",
]
