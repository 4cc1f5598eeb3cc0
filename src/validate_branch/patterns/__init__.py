"""Builtin branch and commit conventions."""

from .registry import (
    BUILTIN_CONVENTIONS,
    PATTERN_TABLE_VERSION,
    ConventionDefinition,
    PatternRegistry,
    get_pattern_registry,
    portability_warnings,
)

__all__ = [
    "BUILTIN_CONVENTIONS",
    "PATTERN_TABLE_VERSION",
    "ConventionDefinition",
    "PatternRegistry",
    "get_pattern_registry",
    "portability_warnings",
]
