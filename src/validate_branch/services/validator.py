"""Validator service for branch names and commit messages.

Validation is a pure regular-expression search over the whole subject. No
trimming is applied: leading or trailing whitespace is part of the subject and
normally causes a mismatch. A subject containing a line feed never matches;
Python's ``$`` would otherwise accept a trailing line feed, and the hooks
only ever see single lines.

A subject that does not match is a normal negative ValidationOutcome. The only
exceptional case is a custom pattern that is empty or does not compile, which
surfaces as InvalidPatternError from the PatternRegistry.
"""

from typing import Optional

from ..models.configuration import Configuration
from ..models.validation import ExampleSet, MatchingRule, ValidationOutcome
from ..patterns.registry import PatternRegistry, get_pattern_registry
from ..types.enums import SubjectKind


def validate(subject: str, rule: MatchingRule) -> bool:
    """Check if subject satisfies rule."""
    if "\n" in subject:
        return False
    return rule.regex.search(subject) is not None


def explain(subject: str, rule: MatchingRule, examples: ExampleSet, ok: bool = False) -> ValidationOutcome:
    """Package a validation result for presentation.

    Args:
        subject: The validated branch name or commit message
        rule: Rule the subject was checked against
        examples: Examples of the convention
        ok: Validation result, failures by default

    Returns:
        ValidationOutcome carrying the convention id, literal pattern and examples
    """
    return ValidationOutcome(
        ok=ok,
        subject=subject,
        kind=rule.kind,
        convention_id=rule.convention_id,
        pattern=rule.pattern,
        examples=tuple(examples),
    )


def check(subject: str, rule: MatchingRule, examples: ExampleSet) -> ValidationOutcome:
    """Validate subject and package the outcome."""
    return explain(subject, rule, examples, ok=validate(subject, rule))


def commit_subject_line(message: str) -> str:
    """Return the line of a commit message that conventions apply to.

    That is the first line not starting with ``#`` (git comment lines). The
    commit-msg hook extracts the same line before matching.
    """
    for line in message.split("\n"):
        if not line.startswith("#"):
            return line
    return ""


def validate_branch_name(name: str, config: Configuration,
                         registry: Optional[PatternRegistry] = None) -> ValidationOutcome:
    """Validate a branch name against the configured branch convention.

    Raises:
        InvalidPatternError: If the custom branch pattern is empty or invalid
    """
    registry = registry or get_pattern_registry()
    rule, examples = registry.resolve_for(SubjectKind.BRANCH, config)
    return check(name, rule, examples)


def validate_commit_message(message: str, config: Configuration,
                            registry: Optional[PatternRegistry] = None) -> ValidationOutcome:
    """Validate the subject line of a commit message against the configured commit convention.

    Raises:
        InvalidPatternError: If the custom commit pattern is empty or invalid
    """
    registry = registry or get_pattern_registry()
    rule, examples = registry.resolve_for(SubjectKind.COMMIT, config)
    outcome = check(commit_subject_line(message), rule, examples)
    outcome.subject = message
    return outcome


__all__ = [
    "validate",
    "explain",
    "check",
    "commit_subject_line",
    "validate_branch_name",
    "validate_commit_message",
]
