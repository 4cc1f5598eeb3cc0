"""Tests for the interactive command surface, using fake collaborators."""

import json
import os
import sys

import pytest

from conftest import FakeRunner, RecordingNotifier, RecordingOpener, ScriptedPrompter
from validate_branch.models.hook_artifact import SIGNATURE_MARKER
from validate_branch.services.commands import (
    OPEN_SETTINGS,
    TEST_BRANCH_CREATION,
    TEST_COMMIT,
    CommandSurface,
    StatusState,
)
from validate_branch.services.config_resolver import ConfigResolver
from validate_branch.services.hook_manager import HookLifecycleManager
from validate_branch.services.interfaces import DictConfigProvider
from validate_branch.types.enums import HookFileState, HookKind

SHOW_CURRENT = ("git", "branch", "--show-current")


def make_surface(registry, settings=None, runner=None, notifier=None, prompter=None, opener=None):
    provider = DictConfigProvider(settings or {})
    surface = CommandSurface(
        resolver=ConfigResolver(provider),
        runner=runner or FakeRunner(),
        notifier=notifier or RecordingNotifier(),
        prompter=prompter or ScriptedPrompter(),
        opener=opener or RecordingOpener(),
        registry=registry,
    )
    return surface, provider


class TestValidateCurrent:
    """校验当前分支"""

    def test_valid_branch(self, registry, workspace):
        runner = FakeRunner({SHOW_CURRENT: "feature/APC-12-login"})
        surface, _ = make_surface(registry, runner=runner)
        assert surface.validate_current(workspace) is True
        assert surface.notifier.of_level("info") == [
            "✅ Branch name \"feature/APC-12-login\" follows the jira convention"
        ]
        assert runner.calls == [(["git", "branch", "--show-current"], str(workspace))]

    def test_invalid_branch_offers_settings(self, registry, workspace):
        runner = FakeRunner({SHOW_CURRENT: "my-feature"})
        notifier = RecordingNotifier(choice=OPEN_SETTINGS)
        opener = RecordingOpener()
        surface, _ = make_surface(registry, runner=runner, notifier=notifier, opener=opener)

        assert surface.validate_current(workspace) is False
        level, message, actions = notifier.messages[0]
        assert level == "error"
        assert "my-feature" in message
        assert "Examples:" in message
        assert actions == (OPEN_SETTINGS,)
        assert opener.sections == ["validateBranch"]

    def test_no_workspace(self, registry):
        runner = FakeRunner()
        surface, _ = make_surface(registry, runner=runner)
        assert surface.validate_current(None) is False
        assert surface.notifier.of_level("error") == ["No workspace folder found"]
        assert runner.calls == []

    def test_git_failure_reported(self, registry, workspace, external_error):
        runner = FakeRunner({SHOW_CURRENT: external_error("fatal: not a git repository")})
        surface, _ = make_surface(registry, runner=runner)
        assert surface.validate_current(workspace) is False
        assert surface.notifier.of_level("error") == ["Error: fatal: not a git repository"]

    def test_detached_head(self, registry, workspace):
        surface, _ = make_surface(registry, runner=FakeRunner({SHOW_CURRENT: ""}))
        assert surface.validate_current(workspace) is False
        assert surface.notifier.of_level("warning")

    def test_invalid_custom_pattern_reported(self, registry, workspace):
        settings = {"branchConvention": "custom", "customBranchPattern": "("}
        runner = FakeRunner({SHOW_CURRENT: "x"})
        surface, _ = make_surface(registry, settings=settings, runner=runner)
        assert surface.validate_current(workspace) is False
        level, message, actions = surface.notifier.messages[0]
        assert level == "error"
        assert "validateBranch.customBranchPattern" in message
        assert actions == (OPEN_SETTINGS,)

    def test_uses_live_configuration(self, registry, workspace):
        runner = FakeRunner({SHOW_CURRENT: "login-fix"})
        surface, provider = make_surface(registry, runner=runner)
        assert surface.validate_current(workspace) is False
        provider.update("branchConvention", "simple")
        assert surface.validate_current(workspace) is True


class TestCreateBranch:
    """创建分支"""

    def test_prompted_name_is_validated_and_created(self, registry, workspace):
        prompter = ScriptedPrompter("feature/APC-1-login")
        runner = FakeRunner()
        surface, _ = make_surface(registry, runner=runner, prompter=prompter)

        assert surface.create_branch(workspace) is True
        assert prompter.prompts == [("Enter branch name (jira convention)", "feature/APC-2876-user-auth")]
        assert runner.calls == [(["git", "checkout", "-b", "feature/APC-1-login"], str(workspace))]
        assert surface.notifier.of_level("info") == ["✅ Branch \"feature/APC-1-login\" created successfully!"]

    def test_cancelled_prompt_has_no_side_effects(self, registry, workspace):
        runner = FakeRunner()
        surface, _ = make_surface(registry, runner=runner, prompter=ScriptedPrompter(None))
        assert surface.create_branch(workspace) is False
        assert runner.calls == []
        assert surface.notifier.messages == []

    def test_invalid_name_not_created(self, registry, workspace):
        runner = FakeRunner()
        surface, _ = make_surface(registry, runner=runner)
        assert surface.create_branch(workspace, "Hello") is False
        assert runner.calls == []
        assert "Hello" in surface.notifier.of_level("error")[0]

    def test_name_with_shell_metacharacters_passed_as_one_argument(self, registry, workspace):
        runner = FakeRunner()
        settings = {"branchConvention": "custom", "customBranchPattern": ".+"}
        surface, _ = make_surface(registry, settings=settings, runner=runner)
        name = "x; rm -rf ~"
        assert surface.create_branch(workspace, name) is True
        assert runner.calls[0][0] == ["git", "checkout", "-b", name]

    def test_git_error_shown_verbatim(self, registry, workspace, external_error):
        name = "feature/APC-1-login"
        runner = FakeRunner({
            ("git", "checkout", "-b", name): external_error("fatal: a branch named 'feature/APC-1-login' already exists"),
        })
        surface, _ = make_surface(registry, runner=runner)
        assert surface.create_branch(workspace, name) is False
        assert surface.notifier.of_level("error") == [
            "Failed to create branch: fatal: a branch named 'feature/APC-1-login' already exists"
        ]

    def test_disabled_validation(self, registry, workspace):
        runner = FakeRunner()
        surface, _ = make_surface(registry, settings={"branchValidationEnabled": False}, runner=runner)
        assert surface.create_branch(workspace, "anything") is False
        assert surface.notifier.of_level("info") == ["Branch validation is disabled"]
        assert runner.calls == []

    def test_no_workspace(self, registry):
        surface, _ = make_surface(registry)
        assert surface.create_branch(None, "feature/APC-1-x") is False
        assert surface.notifier.of_level("error") == ["No workspace folder found"]


class TestCreateCommit:
    """提交"""

    def test_valid_message_committed(self, registry, workspace):
        runner = FakeRunner()
        message = "[ABC-12] feat(auth): add login"
        surface, _ = make_surface(registry, runner=runner)
        assert surface.create_commit(workspace, message) is True
        assert runner.calls == [(["git", "commit", "-m", message], str(workspace))]

    def test_invalid_message_rejected(self, registry, workspace):
        runner = FakeRunner()
        surface, _ = make_surface(registry, runner=runner)
        assert surface.create_commit(workspace, "fix login") is False
        assert runner.calls == []
        message = surface.notifier.of_level("error")[0]
        assert message.startswith("❌ Commit message doesn't follow the jira convention.")

    def test_cancelled_prompt(self, registry, workspace):
        runner = FakeRunner()
        prompter = ScriptedPrompter("")
        surface, _ = make_surface(registry, runner=runner, prompter=prompter)
        assert surface.create_commit(workspace) is False
        assert runner.calls == []
        assert prompter.prompts[0][1] == "[APC-2356] feat(auth): Add Login Functionality"

    def test_git_failure(self, registry, workspace, external_error):
        message = "Add user authentication flow"
        runner = FakeRunner({("git", "commit", "-m", message): external_error("nothing to commit")})
        surface, _ = make_surface(registry, settings={"commitConvention": "simple"}, runner=runner)
        assert surface.create_commit(workspace, message) is False
        assert surface.notifier.of_level("error") == ["Failed to commit: nothing to commit"]

    def test_disabled_validation(self, registry, workspace):
        surface, _ = make_surface(registry, settings={"commitValidationEnabled": False})
        assert surface.create_commit(workspace, "whatever") is False
        assert surface.notifier.of_level("info") == ["Commit validation is disabled"]


class TestInstallAndRemoveHooks:
    """安装和移除钩子"""

    def test_install_writes_all_hooks(self, registry, workspace):
        surface, _ = make_surface(registry)
        assert surface.install_hooks(workspace) is True
        for kind in HookKind:
            assert SIGNATURE_MARKER in (workspace / ".git" / "hooks" / kind.value).read_text()
        level, message, actions = surface.notifier.messages[0]
        assert level == "info"
        assert message.startswith("✅ Git hooks installed successfully!")
        assert actions == (TEST_BRANCH_CREATION, TEST_COMMIT)

    def test_install_uses_settings_snapshot_not_live_config(self, registry, workspace):
        settings_dir = workspace / ".vscode"
        settings_dir.mkdir()
        (settings_dir / "settings.json").write_text(json.dumps({"validateBranch.branchConvention": "gitflow"}))
        surface, _ = make_surface(registry, settings={"branchConvention": "simple"})
        surface.install_hooks(workspace)
        text = (workspace / ".git" / "hooks" / "pre-commit").read_text()
        assert "CONVENTION=gitflow" in text

    @pytest.mark.parametrize("choice,expected", [
        (TEST_BRANCH_CREATION, "git checkout -b Hello"),
        (TEST_COMMIT, "[APC-2356] feat(auth): Add Login Functionality"),
    ])
    def test_follow_up_hints(self, registry, workspace, choice, expected):
        notifier = RecordingNotifier(choice=choice)
        surface, _ = make_surface(registry, notifier=notifier)
        surface.install_hooks(workspace)
        assert expected in notifier.messages[1][1]

    def test_install_without_git_dir_reports_error(self, registry, tmp_path):
        surface, _ = make_surface(registry)
        assert surface.install_hooks(tmp_path) is False
        assert surface.notifier.of_level("error")[0].startswith("Failed to install git hooks:")
        assert not (tmp_path / ".git").exists()

    def test_install_with_invalid_custom_pattern(self, registry, workspace):
        settings_dir = workspace / ".vscode"
        settings_dir.mkdir()
        (settings_dir / "settings.json").write_text(json.dumps({
            "validateBranch.commitConvention": "custom",
            "validateBranch.customCommitPattern": "",
        }))
        surface, _ = make_surface(registry)
        assert surface.install_hooks(workspace) is False
        assert not (workspace / ".git" / "hooks" / "pre-commit").exists()
        assert surface.notifier.messages[0][2] == (OPEN_SETTINGS,)

    def test_remove_hooks(self, registry, workspace):
        surface, _ = make_surface(registry)
        surface.install_hooks(workspace)
        assert surface.remove_hooks(workspace) is True
        assert surface.notifier.messages[-1][1].startswith("✅ Git hooks removed successfully!")
        assert not any((workspace / ".git" / "hooks" / kind.value).exists() for kind in HookKind)

    def test_remove_when_nothing_installed(self, registry, workspace):
        surface, _ = make_surface(registry)
        assert surface.remove_hooks(workspace) is True
        assert surface.notifier.of_level("info") == ["No validate-branch git hooks were found."]

    def test_no_workspace(self, registry):
        surface, _ = make_surface(registry)
        assert surface.install_hooks(None) is False
        assert surface.remove_hooks(None) is False
        assert surface.notifier.of_level("error") == ["No workspace folder found"] * 2


class TestStatus:
    """状态视图"""

    def test_no_workspace(self, registry):
        surface, _ = make_surface(registry)
        assert surface.status(None).state == StatusState.NO_WORKSPACE

    def test_ready_then_active_then_ready(self, registry, workspace):
        surface, _ = make_surface(registry)
        assert surface.status(workspace).state == StatusState.READY
        surface.install_hooks(workspace)
        summary = surface.status(workspace)
        assert summary.state == StatusState.ACTIVE
        assert summary.text == "VB: Active"
        assert set(summary.hooks.values()) == {HookFileState.MANAGED}
        assert summary.outdated_hooks == []
        surface.remove_hooks(workspace)
        assert surface.status(workspace).state == StatusState.READY

    def test_outdated_hooks_after_settings_change(self, registry, workspace):
        surface, _ = make_surface(registry)
        surface.install_hooks(workspace)
        settings_dir = workspace / ".vscode"
        settings_dir.mkdir()
        (settings_dir / "settings.json").write_text(json.dumps({"validateBranch.commitConvention": "angular"}))
        summary = surface.status(workspace)
        assert summary.outdated_hooks == [HookKind.COMMIT_MSG]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    def test_non_executable_hooks_reported(self, registry, workspace):
        surface, _ = make_surface(registry)
        surface.install_hooks(workspace)
        os.chmod(workspace / ".git" / "hooks" / "pre-push", 0o644)
        assert surface.status(workspace).non_executable_hooks == [HookKind.PRE_PUSH]


class TestDeactivate:

    def test_removes_hooks_from_every_workspace(self, registry, tmp_path):
        workspaces = []
        for name in ("a", "b"):
            root = tmp_path / name
            (root / ".git").mkdir(parents=True)
            workspaces.append(root)
        surface, _ = make_surface(registry)
        manager = HookLifecycleManager()
        for root in workspaces:
            surface.install_hooks(root)
            assert manager.detect(root)

        surface.deactivate(workspaces)
        assert not any(manager.detect(root) for root in workspaces)


def test_open_settings(registry):
    opener = RecordingOpener()
    surface, _ = make_surface(registry, opener=opener)
    surface.open_settings()
    assert opener.sections == ["validateBranch"]
