"""Data models for validate-branch."""

from .configuration import (
    CONFIG_SECTION,
    DEFAULT_BRANCH_CONVENTION,
    DEFAULT_COMMIT_CONVENTION,
    LEGACY_SETTING_KEYS,
    SETTING_KEYS,
    Configuration,
)
from .hook_artifact import SIGNATURE_MARKER, HookArtifact, is_managed_text
from .validation import ExampleSet, MatchingRule, ValidationOutcome

__all__ = [
    "CONFIG_SECTION",
    "DEFAULT_BRANCH_CONVENTION",
    "DEFAULT_COMMIT_CONVENTION",
    "LEGACY_SETTING_KEYS",
    "SETTING_KEYS",
    "Configuration",
    "SIGNATURE_MARKER",
    "HookArtifact",
    "is_managed_text",
    "ExampleSet",
    "MatchingRule",
    "ValidationOutcome",
]
