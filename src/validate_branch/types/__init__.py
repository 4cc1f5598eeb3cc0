"""Type definitions for validate-branch."""

from .enums import (
    CUSTOM_CONVENTION,
    BranchConvention,
    CommitConvention,
    HookFileState,
    HookKind,
    SubjectKind,
)

__all__ = [
    "CUSTOM_CONVENTION",
    "BranchConvention",
    "CommitConvention",
    "HookFileState",
    "HookKind",
    "SubjectKind",
]
