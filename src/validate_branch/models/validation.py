"""Validation models: matching rules and validation outcomes.

A MatchingRule is the concrete regular expression behind a convention. A
ValidationOutcome is the ephemeral result of checking one subject against a
rule; a negative outcome is a normal result carrying diagnostics, not an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Pattern, Tuple

from ..types.enums import SubjectKind

# Ordered literal examples, each satisfying the associated rule
ExampleSet = Tuple[str, ...]


@dataclass(frozen=True)
class MatchingRule:
    """A compiled regular expression and the convention it was derived from.

    Attributes:
        kind: Subject kind the rule applies to
        convention_id: Effective convention id (after any fallback)
        pattern: Literal pattern text, as shown to the user and embedded in hooks
        regex: Compiled pattern used for in-process matching
        requested_id: Convention id that was asked for, differs from
            convention_id when an unknown id fell back to the default
    """
    kind: SubjectKind
    convention_id: str
    pattern: str
    regex: Pattern[str] = field(compare=False, repr=False)
    requested_id: str = ""

    @classmethod
    def compile(cls, kind: SubjectKind, convention_id: str, pattern: str,
                requested_id: str = "") -> MatchingRule:
        """Compile pattern text into a rule.

        Raises:
            re.error: If the pattern does not compile
        """
        return cls(
            kind=kind,
            convention_id=convention_id,
            pattern=pattern,
            regex=re.compile(pattern),
            requested_id=requested_id or convention_id,
        )

    @property
    def is_fallback(self) -> bool:
        return self.requested_id != self.convention_id


@dataclass
class ValidationOutcome:
    """Result of validating one subject.

    Attributes:
        ok: True if the subject satisfies the rule
        subject: The branch name or commit message that was checked
        kind: Subject kind
        convention_id: Convention the subject was checked against
        pattern: Literal pattern text of the rule
        examples: Examples shown to the user on failure
    """
    ok: bool
    subject: str
    kind: SubjectKind
    convention_id: str
    pattern: str
    examples: ExampleSet = ()

    def __bool__(self) -> bool:
        return self.ok

    def format_message(self, include_pattern: bool = False) -> str:
        """Format the outcome for presentation to the user."""
        if self.ok:
            return f"✅ {self.kind.label} \"{self.subject}\" follows the {self.convention_id} convention"

        if self.kind == SubjectKind.BRANCH:
            message = f"❌ Branch name \"{self.subject}\" doesn't follow the {self.convention_id} convention."
        else:
            message = f"❌ Commit message doesn't follow the {self.convention_id} convention."

        if self.examples:
            message += "\n\nExamples:\n" + "\n".join(self.examples)
        if include_pattern:
            message += f"\n\nCurrent pattern: {self.pattern}"
        return message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "ok": self.ok,
            "subject": self.subject,
            "kind": self.kind.value,
            "convention_id": self.convention_id,
            "pattern": self.pattern,
            "examples": list(self.examples),
        }
