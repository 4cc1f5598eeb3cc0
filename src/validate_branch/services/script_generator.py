"""Hook script generation for git lifecycle hooks.

This module renders the four POSIX shell scripts installed under
``.git/hooks``. Each script re-implements the configured convention outside the
Python process so that plain ``git commit`` / ``git push`` / ``git checkout``
in a terminal are validated the same way as the validate-branch commands.

Rendering guarantees:
- every script starts with a shebang followed by the SIGNATURE_MARKER comment;
- the pattern, the convention id and every example are embedded through
  shell_quote, never interpolated by hand;
- runtime subjects (branch names, commit messages) are only expanded inside
  double quotes and printed with ``printf '%s'``;
- a disabled check renders a signed script that always succeeds.

Rendering is a pure function of the configuration. The scripts keep the
configuration they were rendered with until the hooks are installed again.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..models.configuration import Configuration
from ..models.hook_artifact import SIGNATURE_MARKER, HookArtifact
from ..models.validation import ExampleSet, MatchingRule
from ..patterns.registry import (
    PATTERN_TABLE_VERSION,
    PatternRegistry,
    get_pattern_registry,
    portability_warnings,
)
from ..types.enums import CUSTOM_CONVENTION, HookKind, SubjectKind
from ..utils.logging import get_logger
from ..utils.shell import shell_quote, shell_words

logger = get_logger(__name__)

_CURRENT_BRANCH_SNIPPET = """\
current_branch=$(git branch --show-current 2>/dev/null)
if [ -z "$current_branch" ]; then
    current_branch=$(git rev-parse --abbrev-ref HEAD 2>/dev/null)
fi
"""

_RENAME_TIPS = """\
        {
            echo ""
            echo "💡 Rename this branch: git branch -m <new-valid-name>"
            echo "💡 Or run 'validate-branch create-branch' for guided branch creation."
        } >&2
"""


class HookScriptSynthesizer:
    """Renders managed hook scripts from a configuration.

    Attributes:
        registry: PatternRegistry used to resolve conventions
    """

    def __init__(self, registry: Optional[PatternRegistry] = None):
        self.registry = registry or get_pattern_registry()

    def render(self, kind: HookKind, config: Configuration) -> HookArtifact:
        """Render the script for one hook.

        Args:
            kind: Hook to render
            config: Configuration to embed

        Returns:
            HookArtifact with the complete script text

        Raises:
            InvalidPatternError: If the selected custom pattern is empty or invalid
            ConfigurationError: If a pattern or example cannot be embedded safely
        """
        subject = kind.subject_kind
        if not config.is_enabled(subject):
            return HookArtifact(kind=kind, rendered_text=self._render_disabled(kind, subject))

        rule, examples = self.registry.resolve_for(subject, config)
        if rule.convention_id == CUSTOM_CONVENTION:
            for warning in portability_warnings(rule.pattern):
                logger.warning(
                    "Custom %s pattern uses %s, which git hooks (grep -E) do not support",
                    subject.value, warning,
                )

        if subject == SubjectKind.BRANCH:
            function = self._branch_function(rule, examples)
        else:
            function = self._commit_function(rule, examples)

        bodies = {
            HookKind.PRE_COMMIT: self._pre_commit_body,
            HookKind.COMMIT_MSG: self._commit_msg_body,
            HookKind.PRE_PUSH: self._pre_push_body,
            HookKind.POST_CHECKOUT: self._post_checkout_body,
        }
        text = self._header(kind) + "\n" + function + "\n" + bodies[kind]()
        return HookArtifact(kind=kind, rendered_text=text)

    def render_all(self, config: Configuration) -> Dict[HookKind, HookArtifact]:
        """Render all four hooks; raises before returning anything if one fails."""
        return {kind: self.render(kind, config) for kind in HookKind}

    # ----- script parts -----

    def _header(self, kind: HookKind) -> str:
        return (
            "#!/bin/sh\n"
            f"{SIGNATURE_MARKER}\n"
            f"# {kind.value} hook: {kind.description}.\n"
            f"# Generated by validate-branch (pattern table v{PATTERN_TABLE_VERSION}).\n"
            "# Reinstall the hooks after changing settings; this script keeps the\n"
            "# configuration it was installed with.\n"
        )

    def _render_disabled(self, kind: HookKind, subject: SubjectKind) -> str:
        return (
            self._header(kind)
            + "\n"
            + f"# {subject.label} validation is disabled in settings.\n"
            + "exit 0\n"
        )

    def _definitions(self, rule: MatchingRule) -> List[str]:
        return [
            f"CONVENTION={shell_quote(rule.convention_id, 'convention id')}",
            f"PATTERN={shell_quote(rule.pattern, 'pattern')}",
        ]

    def _examples_block(self, examples: ExampleSet) -> List[str]:
        if not examples:
            return []
        return [
            '        echo ""',
            '        echo "Examples:"',
            f"        printf '  %s\\n' {shell_words(examples, 'example')}",
        ]

    def _validation_function(self, name: str, failure_line: str,
                             rule: MatchingRule, examples: ExampleSet) -> str:
        lines = self._definitions(rule) + [
            "",
            f"{name}() {{",
            "    if ! printf '%s\\n' \"$1\" | grep -qE -- \"$PATTERN\"; then",
            "        {",
            f"        {failure_line}",
        ]
        lines += self._examples_block(examples)
        lines += [
            '        echo ""',
            "        printf 'Current pattern: %s\\n' \"$PATTERN\"",
            "        } >&2",
            "        return 1",
            "    fi",
            "    return 0",
            "}",
        ]
        return "\n".join(lines) + "\n"

    def _branch_function(self, rule: MatchingRule, examples: ExampleSet) -> str:
        return self._validation_function(
            "validate_branch_name",
            "printf \"❌ Branch name '%s' doesn't follow the %s convention.\\n\" \"$1\" \"$CONVENTION\"",
            rule, examples,
        )

    def _commit_function(self, rule: MatchingRule, examples: ExampleSet) -> str:
        return self._validation_function(
            "validate_commit_message",
            "printf \"❌ Commit message doesn't follow the %s convention.\\n\" \"$CONVENTION\"",
            rule, examples,
        )

    def _pre_commit_body(self) -> str:
        return (
            _CURRENT_BRANCH_SNIPPET
            + "\n"
            + 'if [ -n "$current_branch" ] && [ "$current_branch" != "HEAD" ]; then\n'
            + '    if ! validate_branch_name "$current_branch"; then\n'
            + _RENAME_TIPS
            + "        exit 1\n"
            + "    fi\n"
            + "fi\n"
            + "\n"
            + 'echo "✅ Branch name validation passed"\n'
            + "exit 0\n"
        )

    def _commit_msg_body(self) -> str:
        return (
            "# Conventions apply to the first line that is not a git comment\n"
            "commit_message=$(grep -v '^#' \"$1\" | head -n 1)\n"
            "\n"
            'if ! validate_commit_message "$commit_message"; then\n'
            '    echo "" >&2\n'
            "    echo \"💡 Run 'validate-branch commit' for guided commit creation.\" >&2\n"
            "    exit 1\n"
            "fi\n"
            "\n"
            'echo "✅ Commit message validation passed"\n'
            "exit 0\n"
        )

    def _pre_push_body(self) -> str:
        return (
            "# stdin: <local_ref> <local_sha> <remote_ref> <remote_sha>, one line per ref\n"
            "while read -r local_ref local_sha remote_ref remote_sha; do\n"
            '    if [ "$local_ref" = "(delete)" ]; then\n'
            "        continue\n"
            "    fi\n"
            '    case "$local_ref" in\n'
            "        refs/heads/*) branch_name=${local_ref#refs/heads/} ;;\n"
            "        *) continue ;;\n"
            "    esac\n"
            '    if [ -n "$branch_name" ] && ! validate_branch_name "$branch_name"; then\n'
            "        {\n"
            '            echo ""\n'
            '            echo "💡 Rename your branch before pushing: git branch -m <new-valid-name>"\n'
            "        } >&2\n"
            "        exit 1\n"
            "    fi\n"
            "done\n"
            "\n"
            'echo "✅ Branch name validation passed for push"\n'
            "exit 0\n"
        )

    def _post_checkout_body(self) -> str:
        return (
            "# Arguments: previous_head new_head branch_flag (1 for a branch checkout)\n"
            "# git ignores the exit status of this hook, so it only warns.\n"
            'branch_flag="$3"\n'
            "\n"
            'if [ "$branch_flag" = "1" ]; then\n'
            + "    " + _CURRENT_BRANCH_SNIPPET.replace("\n", "\n    ").rstrip(" ")
            + '    if [ -n "$current_branch" ] && [ "$current_branch" != "HEAD" ]; then\n'
            '        if ! validate_branch_name "$current_branch"; then\n'
            "            {\n"
            '                echo ""\n'
            "                printf \"⚠️  WARNING: Branch name '%s' doesn't follow naming conventions!\\n\" \"$current_branch\"\n"
            '                echo "💡 Commits and pushes from this branch will be blocked until it is renamed."\n'
            '                echo "💡 To rename: git branch -m <new-valid-name>"\n'
            "            } >&2\n"
            "        else\n"
            "            printf '✅ Branch name follows the %s convention\\n' \"$CONVENTION\"\n"
            "        fi\n"
            "    fi\n"
            "fi\n"
            "\n"
            "exit 0\n"
        )


__all__ = ["HookScriptSynthesizer"]
