"""Shell literal helpers for generated hook scripts.

Every value a hook script embeds (pattern text, convention id, examples) must
go through shell_quote so that no configured value can end the enclosing
shell string early and run as code when git later executes the hook.
"""

import shlex
from typing import Iterable

from ..exceptions import ConfigurationError

# Characters that cannot be carried safely: NUL cannot appear in a shell
# word at all, and a line break would split a pattern handed to grep -E into
# several alternative patterns.
_FORBIDDEN_CHARACTERS = {"\0": "NUL", "\n": "line feed", "\r": "carriage return"}


def check_embeddable(value: str, what: str = "value") -> str:
    """Reject values that cannot be embedded in a hook script.

    Raises:
        ConfigurationError: If value contains NUL or a line break
    """
    for char, name in _FORBIDDEN_CHARACTERS.items():
        if char in value:
            raise ConfigurationError(
                f"The {what} contains a {name} character and cannot be embedded in a git hook: {value!r}",
                error_code="USER_VALUE_NOT_EMBEDDABLE",
            )
    return value


def shell_quote(value: str, what: str = "value") -> str:
    """Quote value as a single POSIX shell word.

    The result is a single-quoted literal; embedded single quotes become
    ``'"'"'``. The empty string becomes ``''``.
    """
    return shlex.quote(check_embeddable(value, what))


def shell_words(values: Iterable[str], what: str = "value") -> str:
    """Quote several values and join them with spaces."""
    return " ".join(shell_quote(value, what) for value in values)


__all__ = ["check_embeddable", "shell_quote", "shell_words"]
