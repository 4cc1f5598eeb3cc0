"""CLI package for validate-branch.

This package contains the command-line interface implementation including
argument parsing, console implementations of the command surface
collaborators and command dispatch.

Key modules:
- argument_parser: argparse-based parser with all subcommands
- console: terminal Notifier/Prompter/SettingsOpener, git runner and
  environment-aware configuration provider
- main: entry point (console script ``validate-branch``)
"""

from .argument_parser import create_parser, parse_args

__all__ = [
    "parse_args",
    "create_parser"
]
