"""Enumerations for branch and commit convention enforcement.

All enums inherit from str and Enum to support JSON serialization and
provide utility methods for validation and parsing.
"""

from enum import Enum
from typing import List


class SubjectKind(str, Enum):
    """The two kinds of text this package validates.

    Values:
        BRANCH: A git branch name
        COMMIT: A git commit message
    """
    BRANCH = "branch"
    COMMIT = "commit"

    @classmethod
    def from_string(cls, value: str) -> "SubjectKind":
        """Parse subject kind from string.

        Raises:
            ValueError: If value is not a valid subject kind
        """
        try:
            return cls(value)
        except ValueError:
            valid_values = [kind.value for kind in cls]
            raise ValueError(f"Invalid subject kind '{value}'. Valid values: {valid_values}")

    @property
    def label(self) -> str:
        """Human readable label used in diagnostics."""
        return "Branch name" if self == SubjectKind.BRANCH else "Commit message"


class HookKind(str, Enum):
    """Git lifecycle points where a managed hook script is installed.

    The enum value is the file name git expects under ``.git/hooks``.

    Values:
        PRE_COMMIT: Validates the checked-out branch before a commit
        COMMIT_MSG: Validates the proposed commit message
        PRE_PUSH: Validates every branch being pushed
        POST_CHECKOUT: Warns about an invalid branch after checkout, never blocks
    """
    PRE_COMMIT = "pre-commit"
    COMMIT_MSG = "commit-msg"
    PRE_PUSH = "pre-push"
    POST_CHECKOUT = "post-checkout"

    @classmethod
    def from_string(cls, value: str) -> "HookKind":
        """Parse hook kind from string.

        Raises:
            ValueError: If value is not a valid hook kind
        """
        try:
            return cls(value)
        except ValueError:
            valid_values = [kind.value for kind in cls]
            raise ValueError(f"Invalid hook kind '{value}'. Valid values: {valid_values}")

    @classmethod
    def get_all_values(cls) -> List[str]:
        return [kind.value for kind in cls]

    @property
    def file_name(self) -> str:
        return self.value

    @property
    def subject_kind(self) -> SubjectKind:
        """Which subject this hook validates."""
        if self == HookKind.COMMIT_MSG:
            return SubjectKind.COMMIT
        return SubjectKind.BRANCH

    def can_block(self) -> bool:
        """Check if git honours a nonzero exit from this hook.

        Returns:
            False for post-checkout, True for every other hook
        """
        return self != HookKind.POST_CHECKOUT

    @property
    def description(self) -> str:
        descriptions = {
            HookKind.PRE_COMMIT: "validates the current branch name before allowing commits",
            HookKind.COMMIT_MSG: "validates commit messages",
            HookKind.PRE_PUSH: "validates branch names before they are pushed to a remote",
            HookKind.POST_CHECKOUT: "warns about invalid branch names after checkout or branch creation",
        }
        return descriptions[self]


class BranchConvention(str, Enum):
    """Branch naming conventions.

    Values:
        GITFLOW: feature/bugfix/hotfix/release prefixes with a kebab-case name
        CONVENTIONAL: Conventional Commits type prefixes (feat/, fix/, ...)
        JIRA: Type prefix plus a ticket key, e.g. feature/APC-2876-user-auth
        SIMPLE: A single kebab-case name
        CUSTOM: User supplied regular expression
    """
    GITFLOW = "gitflow"
    CONVENTIONAL = "conventional"
    JIRA = "jira"
    SIMPLE = "simple"
    CUSTOM = "custom"

    @classmethod
    def get_all_values(cls) -> List[str]:
        return [convention.value for convention in cls]


class CommitConvention(str, Enum):
    """Commit message conventions.

    Values:
        CONVENTIONAL: Conventional Commits, e.g. ``feat(auth): add login``
        ANGULAR: Angular commit types, e.g. ``build: update webpack``
        JIRA: Ticket key plus conventional type, e.g. ``[APC-1] fix(ui): ...``
        SIMPLE: Any message of 10 to 72 characters
        CUSTOM: User supplied regular expression
    """
    CONVENTIONAL = "conventional"
    ANGULAR = "angular"
    JIRA = "jira"
    SIMPLE = "simple"
    CUSTOM = "custom"

    @classmethod
    def get_all_values(cls) -> List[str]:
        return [convention.value for convention in cls]


CUSTOM_CONVENTION = "custom"


class HookFileState(str, Enum):
    """State of a single hook file on disk."""
    MISSING = "missing"
    MANAGED = "managed"
    FOREIGN = "foreign"
