"""validate-branch: branch name and commit message convention checks.

This package validates branch names and commit messages against a configured
naming convention, both in-process and through git hooks it installs into a
working copy so that plain terminal git commands are checked too.

Basic Usage:
    from validate_branch import Configuration, validate_branch_name

    config = Configuration(branch_convention="gitflow")
    outcome = validate_branch_name("feature/user-auth", config)
    if not outcome:
        print(outcome.format_message())

Hook management:
    from validate_branch import HookLifecycleManager

    manager = HookLifecycleManager()
    manager.install("/path/to/repo", config)
    assert manager.detect("/path/to/repo")
    manager.remove("/path/to/repo")
"""

__version__ = "1.0.0"

from .exceptions import (
    ConfigurationError,
    ExternalCommandError,
    FilesystemError,
    InvalidPatternError,
    ValidateBranchError,
)
from .models import (
    SIGNATURE_MARKER,
    Configuration,
    HookArtifact,
    MatchingRule,
    ValidationOutcome,
)
from .patterns import PatternRegistry, get_pattern_registry
from .services import (
    CommandSurface,
    ConfigResolver,
    HookLifecycleManager,
    HookScriptSynthesizer,
    validate_branch_name,
    validate_commit_message,
)
from .types import HookKind, SubjectKind

__all__ = [
    "__version__",
    # Exceptions
    "ValidateBranchError",
    "ConfigurationError",
    "InvalidPatternError",
    "FilesystemError",
    "ExternalCommandError",
    # Models
    "SIGNATURE_MARKER",
    "Configuration",
    "HookArtifact",
    "MatchingRule",
    "ValidationOutcome",
    # Conventions
    "PatternRegistry",
    "get_pattern_registry",
    # Services
    "CommandSurface",
    "ConfigResolver",
    "HookLifecycleManager",
    "HookScriptSynthesizer",
    "validate_branch_name",
    "validate_commit_message",
    # Types
    "HookKind",
    "SubjectKind",
]
