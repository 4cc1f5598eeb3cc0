"""Configuration model shared by in-process validation and hook rendering.

Every key carries an explicit default so that consumers always see a fully
populated value, whichever source it came from.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping

from ..types.enums import SubjectKind

# Settings section shared with the editor configuration store.
CONFIG_SECTION = "validateBranch"

DEFAULT_BRANCH_CONVENTION = "jira"
DEFAULT_COMMIT_CONVENTION = "jira"

# Dataclass field -> settings key (without the section prefix)
SETTING_KEYS: Dict[str, str] = {
    "branch_convention": "branchConvention",
    "commit_convention": "commitConvention",
    "branch_validation_enabled": "branchValidationEnabled",
    "commit_validation_enabled": "commitValidationEnabled",
    "custom_branch_pattern": "customBranchPattern",
    "custom_commit_pattern": "customCommitPattern",
}

# Key names used by earlier releases of the editor extension
LEGACY_SETTING_KEYS: Dict[str, str] = {
    "branch_convention": "branchPattern",
    "commit_convention": "commitPattern",
    "branch_validation_enabled": "enableBranchValidation",
    "commit_validation_enabled": "enableCommitValidation",
}


@dataclass(frozen=True)
class Configuration:
    """Resolved validate-branch configuration.

    Attributes:
        branch_convention: Convention id applied to branch names
        commit_convention: Convention id applied to commit messages
        branch_validation_enabled: Whether branch names are checked at all
        commit_validation_enabled: Whether commit messages are checked at all
        custom_branch_pattern: Regular expression used when branch_convention is "custom"
        custom_commit_pattern: Regular expression used when commit_convention is "custom"
    """
    branch_convention: str = DEFAULT_BRANCH_CONVENTION
    commit_convention: str = DEFAULT_COMMIT_CONVENTION
    branch_validation_enabled: bool = True
    commit_validation_enabled: bool = True
    custom_branch_pattern: str = ""
    custom_commit_pattern: str = ""

    def convention_for(self, kind: SubjectKind) -> str:
        if kind == SubjectKind.BRANCH:
            return self.branch_convention
        return self.commit_convention

    def custom_pattern_for(self, kind: SubjectKind) -> str:
        if kind == SubjectKind.BRANCH:
            return self.custom_branch_pattern
        return self.custom_commit_pattern

    def is_enabled(self, kind: SubjectKind) -> bool:
        if kind == SubjectKind.BRANCH:
            return self.branch_validation_enabled
        return self.commit_validation_enabled

    @staticmethod
    def setting_name(field_name: str) -> str:
        """Fully qualified settings key for a dataclass field."""
        return f"{CONFIG_SECTION}.{SETTING_KEYS[field_name]}"

    def with_changes(self, **changes: Any) -> Configuration:
        """Return a new configuration; selecting a new value is a full reconfiguration."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_settings(self) -> Dict[str, Any]:
        """Convert to the prefixed key layout of the workspace settings file."""
        return {self.setting_name(name): value for name, value in asdict(self).items()}

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> Configuration:
        """Build a configuration from field values, defaulting anything unset or wrong-typed."""
        defaults = cls()
        resolved: Dict[str, Any] = {}
        for name in SETTING_KEYS:
            default = getattr(defaults, name)
            value = values.get(name, default)
            if isinstance(default, bool):
                resolved[name] = value if isinstance(value, bool) else default
            elif name.endswith("_convention"):
                # An empty convention id means "unset"
                resolved[name] = value if isinstance(value, str) and value else default
            else:
                resolved[name] = value if isinstance(value, str) else default
        return cls(**resolved)
