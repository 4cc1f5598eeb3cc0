"""Rendered hook script model."""

from __future__ import annotations

from dataclasses import dataclass

from ..types.enums import HookKind

# Comment line identifying a hook file as managed by validate-branch. Removal
# only ever deletes files that contain it.
SIGNATURE_MARKER = "# validate-branch: managed hook"


@dataclass(frozen=True)
class HookArtifact:
    """A rendered hook script ready to be written under ``.git/hooks``.

    Attributes:
        kind: Lifecycle point the script is installed for
        rendered_text: Complete shell script text
        signature_marker: Marker embedded near the top of the script
    """
    kind: HookKind
    rendered_text: str
    signature_marker: str = SIGNATURE_MARKER

    def __post_init__(self) -> None:
        if self.signature_marker not in self.rendered_text:
            raise ValueError(f"{self.kind.value} script is missing its signature marker")

    @property
    def file_name(self) -> str:
        return self.kind.file_name


def is_managed_text(text: str) -> bool:
    """Check if hook file content carries the signature marker."""
    return SIGNATURE_MARKER in text
