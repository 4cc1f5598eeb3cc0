"""命令行环境下的外部协作者实现。

为CommandSurface提供终端版本的依赖：
- GitCommandRunner: 通过subprocess同步执行git（参数列表，不经过shell）
- ConsoleNotifier: 在终端输出消息，交互模式下允许选择后续操作
- ConsolePrompter: 从标准输入读取一行文本
- ConsoleSettingsOpener: 显示设置文件位置和当前生效的配置
- EnvironmentConfigProvider: VALIDATE_BRANCH_* 环境变量覆盖工作区设置文件
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, Union

from ..exceptions import ExternalCommandError
from ..models.configuration import CONFIG_SECTION, SETTING_KEYS
from ..patterns.registry import PatternRegistry, get_pattern_registry
from ..services.config_resolver import (
    SNAPSHOT_SETTINGS_PATH,
    ConfigResolver,
    load_workspace_settings,
)
from ..services.interfaces import (
    CommandRunner,
    ConfigProvider,
    Notifier,
    Prompter,
    SettingsOpener,
)
from ..types.enums import SubjectKind
from ..utils.logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "VALIDATE_BRANCH_"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def environment_variable_for(field_name: str) -> str:
    """配置字段对应的环境变量名，例如 VALIDATE_BRANCH_BRANCH_CONVENTION。"""
    return ENV_PREFIX + field_name.upper()


class GitCommandRunner(CommandRunner):
    """使用subprocess同步执行git命令。"""

    def __init__(self, timeout: Optional[float] = 60):
        self.timeout = timeout

    def run(self, args: Sequence[str], cwd: Union[str, Path]) -> str:
        command = list(args)
        logger.debug("执行命令: %s (cwd=%s)", command, cwd)
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ExternalCommandError(
                f"Cannot run {command[0]}: {e}",
                command=command,
                original_error=e,
            ) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise ExternalCommandError(
                stderr or f"{command[0]} exited with status {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout.strip()


class ConsoleNotifier(Notifier):
    """在终端显示消息。

    信息输出到stdout，警告和错误输出到stderr。标准输入为终端时，
    附带的操作会以编号列表形式供用户选择。
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                 interactive: Optional[bool] = None):
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def info(self, message: str, *actions: str) -> Optional[str]:
        return self._show(self.out, message, actions)

    def warning(self, message: str, *actions: str) -> Optional[str]:
        return self._show(self.err, message, actions)

    def error(self, message: str, *actions: str) -> Optional[str]:
        return self._show(self.err, message, actions)

    def _show(self, stream: TextIO, message: str, actions: Sequence[str]) -> Optional[str]:
        print(message, file=stream)
        if not actions or not self.interactive:
            return None
        return self._choose(stream, actions)

    def _choose(self, stream: TextIO, actions: Sequence[str]) -> Optional[str]:
        for index, action in enumerate(actions, 1):
            print(f"  {index}) {action}", file=stream)
        try:
            answer = input("选择操作 (回车跳过): ").strip()
        except (EOFError, KeyboardInterrupt):
            print(file=stream)
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(actions):
            return actions[int(answer) - 1]
        return None


class ConsolePrompter(Prompter):
    """从标准输入读取一行；EOF、Ctrl+C 或空输入视为取消。"""

    def prompt(self, message: str, placeholder: str = "") -> Optional[str]:
        hint = f" (e.g. {placeholder})" if placeholder else ""
        try:
            answer = input(f"{message}{hint}: ")
        except (EOFError, KeyboardInterrupt):
            print(file=sys.stderr)
            return None
        return answer or None


class ConsoleSettingsOpener(SettingsOpener):
    """显示设置文件位置、当前配置和可用的命名规范。"""

    def __init__(self, workspace: Optional[Union[str, Path]], resolver: ConfigResolver,
                 registry: Optional[PatternRegistry] = None, out: Optional[TextIO] = None):
        self.workspace = workspace
        self.resolver = resolver
        self.registry = registry or get_pattern_registry()
        self.out = out or sys.stdout

    def open_settings(self, section: str) -> None:
        if self.workspace is not None:
            path = self.resolver.snapshot_path(self.workspace)
            print(f"Settings file: {path}", file=self.out)
        else:
            print(f"Settings file: <workspace>/{SNAPSHOT_SETTINGS_PATH}", file=self.out)

        print(f"\nEffective settings ({section}):", file=self.out)
        for key, value in self.resolver.live_config().to_settings().items():
            print(f"  {key} = {value!r}", file=self.out)

        print("\nAvailable conventions:", file=self.out)
        for kind in SubjectKind:
            conventions = ", ".join(self.registry.available_conventions(kind))
            print(f"  {kind.value}: {conventions}", file=self.out)

        print(
            f"\nEnvironment variables {ENV_PREFIX}<SETTING> override the settings file "
            "for validate/create-branch/commit/check.",
            file=self.out,
        )


class EnvironmentConfigProvider(ConfigProvider):
    """VALIDATE_BRANCH_* 环境变量优先，其次读取工作区设置文件。

    设置文件只在创建时读取一次。布尔型环境变量接受 true/false、1/0、
    yes/no、on/off。
    """

    def __init__(self, workspace: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.settings: Dict[str, Any] = (
            load_workspace_settings(workspace) if workspace is not None else {}
        )
        self._fields = {key: field_name for field_name, key in SETTING_KEYS.items()}

    def get(self, key: str, default: Any = None) -> Any:
        field_name = self._fields.get(key)
        if field_name is not None:
            env_name = environment_variable_for(field_name)
            if env_name in self.environ:
                raw = self.environ[env_name]
                return self._coerce(raw) if field_name.endswith("_enabled") else raw
        return self.settings.get(f"{CONFIG_SECTION}.{key}", default)

    @staticmethod
    def _coerce(raw: str) -> Any:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        return raw


__all__ = [
    "ENV_PREFIX",
    "environment_variable_for",
    "GitCommandRunner",
    "ConsoleNotifier",
    "ConsolePrompter",
    "ConsoleSettingsOpener",
    "EnvironmentConfigProvider",
]
