"""CLI argument parser for validate-branch commands.

This module provides the argparse-based CLI framework for the validate-branch
command surface. It creates a unified parser with one subcommand per
operation.

Supported commands:
- validate: Validate the current branch name
- create-branch: Create a branch after validating its name
- commit: Commit staged changes after validating the message
- install-hooks: Install the managed git hooks
- remove-hooks: Remove the managed git hooks
- settings: Show the settings file and effective configuration
- status: Show hook installation status
- check: Validate a branch name or commit message without side effects
- list-conventions: List builtin conventions with patterns and examples

Usage:
    from validate_branch.cli.argument_parser import parse_args

    args = parse_args(["check", "branch", "feature/APC-1-login"])
    print(f"Command: {args.subcommand}")
"""

import argparse
import sys
from typing import List, Optional

from .. import __version__
from ..types.enums import SubjectKind

SUBJECT_KINDS = [kind.value for kind in SubjectKind]

# Valid output formats
OUTPUT_FORMATS = ["text", "json"]


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    """Add the output format argument."""
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )


def _create_validate_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for validate command."""
    parser = subparsers.add_parser(
        "validate",
        help="Validate the current branch name",
        description="Validate the name of the currently checked-out branch against "
                   "the configured branch convention."
    )
    return parser


def _create_create_branch_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for create-branch command."""
    parser = subparsers.add_parser(
        "create-branch",
        help="Create a new branch with a validated name",
        description="Validate a branch name and run 'git checkout -b' with it. "
                   "Prompts for the name when it is not given."
    )
    parser.add_argument(
        "name",
        nargs="?",
        help="Branch name (prompted for when omitted)"
    )
    return parser


def _create_commit_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for commit command."""
    parser = subparsers.add_parser(
        "commit",
        help="Commit staged changes with a validated message",
        description="Validate a commit message and run 'git commit -m' with it. "
                   "Prompts for the message when it is not given."
    )
    parser.add_argument(
        "-m", "--message",
        help="Commit message (prompted for when omitted)"
    )
    return parser


def _create_install_hooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for install-hooks command."""
    parser = subparsers.add_parser(
        "install-hooks",
        help="Install git hooks that validate terminal git commands",
        description="Install pre-commit, commit-msg, pre-push and post-checkout hooks "
                   "rendered from the workspace settings file. Existing hook files "
                   "are overwritten. Reinstall after changing settings."
    )
    return parser


def _create_remove_hooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for remove-hooks command."""
    parser = subparsers.add_parser(
        "remove-hooks",
        help="Remove the git hooks installed by validate-branch",
        description="Remove the managed git hooks. Hooks written by anyone else "
                   "are left untouched."
    )
    return parser


def _create_settings_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for settings command."""
    parser = subparsers.add_parser(
        "settings",
        help="Show the settings file and effective configuration",
        description="Show where the validateBranch settings live, the effective "
                   "configuration and the available conventions."
    )
    return parser


def _create_status_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for status command."""
    parser = subparsers.add_parser(
        "status",
        help="Show hook installation status",
        description="Show whether the managed hooks are installed, the state of "
                   "each hook file and the active conventions."
    )
    _add_format_argument(parser)
    return parser


def _create_check_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for check command."""
    parser = subparsers.add_parser(
        "check",
        help="Validate a branch name or commit message",
        description="Validate a subject against the configured convention without "
                   "touching the repository. Exits with status 1 when it does not match."
    )
    parser.add_argument(
        "kind",
        choices=SUBJECT_KINDS,
        help="What the subject is"
    )
    parser.add_argument(
        "subject",
        help="Branch name or commit message to validate"
    )
    parser.add_argument(
        "--show-pattern",
        action="store_true",
        help="Include the regular expression in the failure message"
    )
    _add_format_argument(parser)
    return parser


def _create_list_conventions_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for list-conventions command."""
    parser = subparsers.add_parser(
        "list-conventions",
        help="List builtin conventions",
        description="List the builtin branch and commit conventions with their "
                   "patterns and examples."
    )
    parser.add_argument(
        "--kind",
        choices=SUBJECT_KINDS,
        help="Only list conventions of this kind"
    )
    _add_format_argument(parser)
    return parser


def _validate_arguments(args: argparse.Namespace) -> None:
    """Validate parsed arguments.

    Args:
        args: Parsed command line arguments

    Raises:
        SystemExit: If validation fails
    """
    if getattr(args, "subject", None) == "":
        print("错误: subject 不能为空", file=sys.stderr)
        sys.exit(2)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="validate-branch",
        description="validate-branch - 分支名和提交信息命名规范校验工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 校验当前分支
  validate-branch validate

  # 创建符合规范的分支
  validate-branch create-branch feature/APC-2876-user-auth

  # 安装git钩子，终端中的git命令也会被校验
  validate-branch install-hooks

  # 在CI中校验提交信息
  validate-branch check commit "[APC-2356] feat(auth): Add Login Functionality"

环境变量:
  VALIDATE_BRANCH_DEBUG        启用调试模式 (true/false)
  VALIDATE_BRANCH_LOG_LEVEL    设置日志级别 (DEBUG/INFO/WARNING/ERROR)
  VALIDATE_BRANCH_<SETTING>    覆盖设置文件中的配置项
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--workspace", "-C",
        default=None,
        help="Root of the git working copy (default: current directory)"
    )

    subparsers = parser.add_subparsers(
        dest="subcommand",
        help="可用命令",
        metavar="COMMAND"
    )

    _create_validate_parser(subparsers)
    _create_create_branch_parser(subparsers)
    _create_commit_parser(subparsers)
    _create_install_hooks_parser(subparsers)
    _create_remove_hooks_parser(subparsers)
    _create_settings_parser(subparsers)
    _create_status_parser(subparsers)
    _create_check_parser(subparsers)
    _create_list_conventions_parser(subparsers)

    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments with validation.

    Args:
        args: List of arguments to parse. If None, uses sys.argv

    Returns:
        Parsed and validated arguments namespace

    Raises:
        SystemExit: If parsing or validation fails, or no command was given
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # If no command specified, show help
    if not parsed_args.subcommand:
        parser.print_help()
        sys.exit(0)

    _validate_arguments(parsed_args)
    return parsed_args
