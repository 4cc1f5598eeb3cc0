"""Hook lifecycle management: install, detect and remove managed git hooks.

The HookLifecycleManager owns the four hook files under ``.git/hooks``:

- install renders all four scripts first, then writes each one atomically with
  executable permission, always overwriting whatever was there;
- detect reads only ``pre-commit`` and reports whether it carries the
  signature marker; it is a presence indicator for status reporting;
- remove deletes a hook file only if it carries the signature marker, so
  user-authored hooks are never touched.

Filesystem problems are raised as FilesystemError. Installation is not atomic
across the four files; a failure leaves the files written before it in place.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from ..exceptions import FilesystemError
from ..models.configuration import Configuration
from ..models.hook_artifact import is_managed_text
from ..types.enums import HookFileState, HookKind
from ..utils.file_operations import (
    ensure_directory_exists,
    read_text_file,
    safe_delete_file,
    write_text_file,
)
from ..utils.logging import get_logger, log_operation
from ..utils.permissions import HOOK_FILE_MODE
from .script_generator import HookScriptSynthesizer

logger = get_logger(__name__)

GIT_DIR_NAME = ".git"
HOOKS_DIR_NAME = "hooks"


class HookLifecycleManager:
    """Installs, detects and removes validate-branch hooks in a working copy.

    Attributes:
        synthesizer: HookScriptSynthesizer used to render scripts
    """

    def __init__(self, synthesizer: Optional[HookScriptSynthesizer] = None):
        self.synthesizer = synthesizer or HookScriptSynthesizer()

    @staticmethod
    def hooks_dir(workspace: Union[str, Path]) -> Path:
        """Hooks directory of a working copy: ``<workspace>/.git/hooks``."""
        return Path(workspace) / GIT_DIR_NAME / HOOKS_DIR_NAME

    def hook_path(self, workspace: Union[str, Path], kind: HookKind) -> Path:
        return self.hooks_dir(workspace) / kind.file_name

    def install(self, workspace: Union[str, Path], config: Configuration) -> List[Path]:
        """Install all four hooks rendered from config.

        Args:
            workspace: Root of the git working copy
            config: Configuration embedded in the scripts

        Returns:
            Paths of the written hook files

        Raises:
            ConfigurationError: If the scripts cannot be rendered from config
            FilesystemError: If the workspace is not a git working copy or a
                file cannot be written
        """
        workspace = Path(workspace)
        # Render everything before touching the filesystem
        artifacts = self.synthesizer.render_all(config)

        if not workspace.is_dir():
            raise FilesystemError(f"Workspace folder does not exist: {workspace}", path=workspace)
        git_dir = workspace / GIT_DIR_NAME
        if not git_dir.is_dir():
            raise FilesystemError(
                f"Not a git repository (no {GIT_DIR_NAME} directory): {workspace}",
                path=git_dir,
                suggested_fix="Run 'git init' first or open the root folder of the repository.",
            )

        written: List[Path] = []
        with log_operation("install hooks", logger):
            hooks_dir = ensure_directory_exists(self.hooks_dir(workspace))
            for kind, artifact in artifacts.items():
                path = hooks_dir / artifact.file_name
                write_text_file(path, artifact.rendered_text, mode=HOOK_FILE_MODE)
                written.append(path)
                logger.info("Installed git hook: %s", kind.value)
        return written

    def detect(self, workspace: Union[str, Path]) -> bool:
        """Check whether the managed pre-commit hook is present.

        Any problem reading the file counts as "not installed".
        """
        path = self.hook_path(workspace, HookKind.PRE_COMMIT)
        if not path.is_file():
            return False
        try:
            return is_managed_text(read_text_file(path))
        except FilesystemError as e:
            logger.debug("Cannot read %s: %s", path, e)
            return False

    def remove(self, workspace: Union[str, Path]) -> List[Path]:
        """Remove every hook file that carries the signature marker.

        Returns:
            Paths of the removed hook files

        Raises:
            FilesystemError: If a managed hook could not be read or deleted;
                the remaining hooks are still processed first
        """
        removed: List[Path] = []
        failures: List[str] = []

        hooks_dir = self.hooks_dir(workspace)
        if not hooks_dir.is_dir():
            logger.debug("No hooks directory at %s, nothing to remove", hooks_dir)
            return removed

        for kind in HookKind:
            path = hooks_dir / kind.file_name
            if not path.is_file():
                continue
            try:
                if not is_managed_text(read_text_file(path)):
                    logger.debug("Leaving user hook untouched: %s", path)
                    continue
                if safe_delete_file(path):
                    removed.append(path)
                    logger.info("Removed git hook: %s", kind.value)
            except FilesystemError as e:
                logger.error("Failed to remove hook %s: %s", path, e)
                failures.append(f"{kind.value}: {e}")

        if failures:
            raise FilesystemError(
                "Failed to remove some git hooks: " + "; ".join(failures),
                path=hooks_dir,
                context={"removed": [str(p) for p in removed]},
            )
        return removed

    def status(self, workspace: Union[str, Path]) -> Dict[HookKind, HookFileState]:
        """Report the state of each of the four hook files."""
        result: Dict[HookKind, HookFileState] = {}
        for kind in HookKind:
            path = self.hook_path(workspace, kind)
            if not path.is_file():
                result[kind] = HookFileState.MISSING
                continue
            try:
                managed = is_managed_text(read_text_file(path))
            except FilesystemError:
                managed = False
            result[kind] = HookFileState.MANAGED if managed else HookFileState.FOREIGN
        return result


__all__ = ["HookLifecycleManager", "GIT_DIR_NAME", "HOOKS_DIR_NAME"]
