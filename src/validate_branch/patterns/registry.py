"""PatternRegistry for branch and commit conventions.

The registry maps a convention id to a matching rule and a short ordered list
of examples that satisfy it. Builtin conventions come from a fixed, versioned
table; the "custom" convention is compiled from user supplied text at
resolution time.

Builtin patterns only use the syntax shared by Python ``re`` and POSIX ERE
(``grep -E``), so the generated hook scripts accept exactly what in-process
validation accepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..exceptions import InvalidPatternError
from ..models.configuration import (
    DEFAULT_BRANCH_CONVENTION,
    DEFAULT_COMMIT_CONVENTION,
    Configuration,
)
from ..models.validation import ExampleSet, MatchingRule
from ..types.enums import (
    CUSTOM_CONVENTION,
    BranchConvention,
    CommitConvention,
    SubjectKind,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Bump when a builtin pattern or example changes
PATTERN_TABLE_VERSION = "2"


@dataclass(frozen=True)
class ConventionDefinition:
    """A builtin convention.

    Attributes:
        convention_id: Identifier used in settings (e.g. "jira")
        kind: Subject kind the convention applies to
        pattern: Regular expression text
        examples: Ordered examples, each matching pattern
        description: One line description for listings
    """
    convention_id: str
    kind: SubjectKind
    pattern: str
    examples: ExampleSet
    description: str = ""

    def __post_init__(self) -> None:
        if not self.convention_id:
            raise ValueError("convention_id cannot be empty")
        if not self.examples:
            raise ValueError(f"Convention '{self.convention_id}' needs at least one example")


BUILTIN_CONVENTIONS: Tuple[ConventionDefinition, ...] = (
    # Branch conventions
    ConventionDefinition(
        convention_id=BranchConvention.GITFLOW.value,
        kind=SubjectKind.BRANCH,
        pattern=r"^(feature|bugfix|hotfix|release)/[a-z0-9-]+$",
        examples=(
            "feature/user-authentication",
            "bugfix/login-error",
            "hotfix/security-patch",
            "release/v1-2-0",
        ),
        description="Git Flow prefixes with a lowercase kebab-case name",
    ),
    ConventionDefinition(
        convention_id=BranchConvention.CONVENTIONAL.value,
        kind=SubjectKind.BRANCH,
        pattern=r"^(feat|fix|docs|style|refactor|test|chore)/[a-z0-9-]+$",
        examples=(
            "feat/user-authentication",
            "fix/login-bug",
            "docs/readme-update",
            "chore/dependency-update",
        ),
        description="Conventional Commits type prefix with a lowercase kebab-case name",
    ),
    ConventionDefinition(
        convention_id=BranchConvention.JIRA.value,
        kind=SubjectKind.BRANCH,
        pattern=r"^(feature|bugfix|hotfix|release|chore)/[A-Z]+-[0-9]+-[a-z0-9-]+$",
        examples=(
            "feature/APC-2876-user-auth",
            "bugfix/APC-1234-login-fix",
            "hotfix/APC-5678-security-patch",
            "release/APC-9999-v2-release",
            "chore/APC-1111-update-deps",
        ),
        description="Type prefix, ticket key and a lowercase kebab-case summary",
    ),
    ConventionDefinition(
        convention_id=BranchConvention.SIMPLE.value,
        kind=SubjectKind.BRANCH,
        pattern=r"^[a-z0-9-]+$",
        examples=(
            "user-authentication",
            "login-fix",
        ),
        description="A single lowercase kebab-case name",
    ),
    # Commit conventions
    ConventionDefinition(
        convention_id=CommitConvention.CONVENTIONAL.value,
        kind=SubjectKind.COMMIT,
        pattern=r"^(feat|fix|docs|style|refactor|perf|test|chore)(\(.+\))?: .{1,50}",
        examples=(
            "feat: add user authentication",
            "fix(ui): resolve login button issue",
            "docs: update README with setup instructions",
            "refactor(auth): simplify login logic",
        ),
        description="Conventional Commits type, optional scope and a short description",
    ),
    ConventionDefinition(
        convention_id=CommitConvention.ANGULAR.value,
        kind=SubjectKind.COMMIT,
        pattern=r"^(build|ci|docs|feat|fix|perf|refactor|style|test)(\(.+\))?: .{1,50}",
        examples=(
            "feat(auth): add user login functionality",
            "fix(ui): resolve button alignment issue",
            "build: update webpack configuration",
            "ci: add GitHub Actions workflow",
        ),
        description="Angular commit types, optional scope and a short description",
    ),
    ConventionDefinition(
        convention_id=CommitConvention.JIRA.value,
        kind=SubjectKind.COMMIT,
        pattern=r"^\[[A-Z]+-[0-9]+\] (feat|fix|docs|style|refactor|test|chore)\([a-z0-9-]+\): .{1,80}$",
        examples=(
            "[APC-2356] feat(auth): Add Login Functionality",
            "[APC-1234] fix(ui): Resolve button alignment issue",
            "[APC-5678] docs(readme): Update installation guide",
            "[APC-9999] refactor(api): Simplify user service",
        ),
        description="Ticket key, conventional type with scope and a description",
    ),
    ConventionDefinition(
        convention_id=CommitConvention.SIMPLE.value,
        kind=SubjectKind.COMMIT,
        pattern=r"^.{10,72}$",
        examples=(
            "Add user authentication flow",
            "Fix crash when saving an empty profile",
        ),
        description="Any single line of 10 to 72 characters",
    ),
)

# Python-only constructs that POSIX grep -E does not understand. Each suggested
# replacement means the same thing to both engines.
_NON_POSIX_CONSTRUCTS: Tuple[Tuple[str, str], ...] = (
    (r"(?<!\\)\\d", r"\d (use [0-9])"),
    (r"(?<!\\)\\D", r"\D (use [^0-9])"),
    (r"(?<!\\)\\s", r"\s (use a literal space or [ ])"),
    (r"(?<!\\)\\S", r"\S (use [^ ])"),
    (r"(?<!\\)\\w", r"\w (use [A-Za-z0-9_])"),
    (r"(?<!\\)\\W", r"\W (use [^A-Za-z0-9_])"),
    (r"(?<!\\)\(\?", "(?...) groups and lookarounds"),
    (r"(?<!\\)[*+?}]\?", "lazy quantifiers"),
)

# POSIX bracket classes such as [[:lower:]]; Python reads them as a nested set
_POSIX_BRACKET_CLASS = re.compile(r"\[:[A-Za-z]+:\]")

_CUSTOM_SETTINGS = {
    SubjectKind.BRANCH: "validateBranch.customBranchPattern",
    SubjectKind.COMMIT: "validateBranch.customCommitPattern",
}


def portability_warnings(pattern: str) -> List[str]:
    """List constructs in pattern that the shell hooks will not interpret like Python.

    Args:
        pattern: Regular expression text

    Returns:
        Human readable descriptions, empty if the pattern is portable
    """
    return [description for regex, description in _NON_POSIX_CONSTRUCTS
            if re.search(regex, pattern)]


class PatternRegistry:
    """Maps convention ids to matching rules and example sets.

    Resolution rules:
    - a builtin id resolves to its fixed pattern and examples;
    - an unknown id falls back to the default convention for that subject
      kind, so a stale or hand-edited setting never blocks validation;
    - "custom" compiles the supplied text and fails loudly if it is empty,
      invalid or uses a POSIX bracket class Python cannot read.
    """

    def __init__(self, conventions: Tuple[ConventionDefinition, ...] = BUILTIN_CONVENTIONS,
                 defaults: Optional[Dict[SubjectKind, str]] = None):
        self._conventions: Dict[Tuple[SubjectKind, str], ConventionDefinition] = {}
        for definition in conventions:
            key = (definition.kind, definition.convention_id)
            if key in self._conventions:
                raise ValueError(
                    f"Duplicate {definition.kind.value} convention '{definition.convention_id}'"
                )
            self._conventions[key] = definition

        self._defaults = defaults or {
            SubjectKind.BRANCH: DEFAULT_BRANCH_CONVENTION,
            SubjectKind.COMMIT: DEFAULT_COMMIT_CONVENTION,
        }
        for kind, convention_id in self._defaults.items():
            if (kind, convention_id) not in self._conventions:
                raise ValueError(f"Default {kind.value} convention '{convention_id}' is not registered")

        self._rule_cache: Dict[Tuple[SubjectKind, str], MatchingRule] = {}

    @property
    def version(self) -> str:
        return PATTERN_TABLE_VERSION

    def default_convention(self, kind: SubjectKind) -> str:
        return self._defaults[kind]

    def available_conventions(self, kind: SubjectKind) -> List[str]:
        """Builtin convention ids for kind followed by "custom"."""
        ids = [cid for (k, cid) in self._conventions if k == kind]
        return ids + [CUSTOM_CONVENTION]

    def get_definition(self, kind: SubjectKind, convention_id: str) -> Optional[ConventionDefinition]:
        return self._conventions.get((kind, convention_id))

    def is_known(self, kind: SubjectKind, convention_id: str) -> bool:
        return convention_id == CUSTOM_CONVENTION or (kind, convention_id) in self._conventions

    def examples_for(self, kind: SubjectKind, convention_id: str) -> ExampleSet:
        """Examples for a convention; unknown ids get the default's examples, custom gets none."""
        if convention_id == CUSTOM_CONVENTION:
            return ()
        definition = self.get_definition(kind, convention_id)
        if definition is None:
            definition = self._conventions[(kind, self._defaults[kind])]
        return definition.examples

    def resolve(self, kind: SubjectKind, convention_id: str,
                custom_pattern_text: Optional[str] = None) -> Tuple[MatchingRule, ExampleSet]:
        """Resolve a convention id into a matching rule and its examples.

        Args:
            kind: Subject kind
            convention_id: Convention identifier from configuration
            custom_pattern_text: Pattern text, only used for "custom"

        Returns:
            Tuple of (MatchingRule, ExampleSet)

        Raises:
            InvalidPatternError: If convention_id is "custom" and the text is
                empty, does not compile or uses a POSIX bracket class
        """
        if convention_id == CUSTOM_CONVENTION:
            return self._resolve_custom(kind, custom_pattern_text or ""), ()

        definition = self.get_definition(kind, convention_id)
        if definition is None:
            fallback_id = self._defaults[kind]
            logger.warning(
                "Unknown %s convention '%s', falling back to '%s'",
                kind.value, convention_id, fallback_id,
            )
            definition = self._conventions[(kind, fallback_id)]

        cache_key = (kind, definition.convention_id)
        rule = self._rule_cache.get(cache_key)
        if rule is None:
            rule = MatchingRule.compile(kind, definition.convention_id, definition.pattern)
            self._rule_cache[cache_key] = rule

        if rule.requested_id != convention_id:
            rule = MatchingRule(
                kind=rule.kind,
                convention_id=rule.convention_id,
                pattern=rule.pattern,
                regex=rule.regex,
                requested_id=convention_id,
            )
        return rule, definition.examples

    def resolve_for(self, kind: SubjectKind, config: Configuration) -> Tuple[MatchingRule, ExampleSet]:
        """Resolve the rule a configuration selects for kind."""
        return self.resolve(kind, config.convention_for(kind), config.custom_pattern_for(kind))

    def _resolve_custom(self, kind: SubjectKind, pattern_text: str) -> MatchingRule:
        setting = _CUSTOM_SETTINGS[kind]
        if not pattern_text:
            raise InvalidPatternError(
                f"The custom {kind.value} convention is selected but {setting} is empty",
                pattern=pattern_text,
                setting=setting,
            )
        posix_class = _POSIX_BRACKET_CLASS.search(pattern_text)
        if posix_class:
            raise InvalidPatternError(
                f"Custom {kind.value} pattern uses the POSIX class {posix_class.group(0)}, "
                "which Python regular expressions do not support",
                pattern=pattern_text,
                setting=setting,
                suggested_fix=f"Spell the class out in {setting}, e.g. [a-z] for [:lower:] "
                              "or [0-9] for [:digit:].",
            )
        try:
            return MatchingRule.compile(kind, CUSTOM_CONVENTION, pattern_text)
        except re.error as e:
            raise InvalidPatternError(
                f"Invalid custom {kind.value} pattern in settings: {e}",
                pattern=pattern_text,
                setting=setting,
                original_error=e,
            )


_registry: Optional[PatternRegistry] = None


def get_pattern_registry() -> PatternRegistry:
    """Get the shared registry of builtin conventions."""
    global _registry
    if _registry is None:
        _registry = PatternRegistry()
    return _registry
