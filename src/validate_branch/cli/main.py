"""Main CLI entry point for validate-branch.

This module wires the console collaborators to the CommandSurface and
dispatches the parsed subcommand with unified error handling, performance
monitoring and consistent exit codes:

- 0: success
- 1: validation failure or reported error
- 2: usage error (raised by argparse)
- 130: interrupted
"""

import json
import os
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, NoReturn, Optional, Tuple

import psutil

from ..exceptions import (
    ConfigurationError,
    ValidateBranchError,
    create_error_from_exception,
)
from ..patterns.registry import get_pattern_registry
from ..services.commands import CommandSurface, StatusSummary
from ..services.config_resolver import ConfigResolver
from ..services.validator import validate_branch_name, validate_commit_message
from ..types.enums import SubjectKind
from ..utils.logging import LogFormat, LogLevel, configure_logging, get_logger
from .argument_parser import parse_args
from .console import (
    ConsoleNotifier,
    ConsolePrompter,
    ConsoleSettingsOpener,
    EnvironmentConfigProvider,
    GitCommandRunner,
)

# 全局配置
PERFORMANCE_THRESHOLD_MS = 100

logger = get_logger(__name__)


def _debug_mode() -> bool:
    return os.getenv("VALIDATE_BRANCH_DEBUG", "false").lower() == "true"


def _setup_logging() -> None:
    """根据环境变量配置日志。"""
    debug = _debug_mode()
    level = LogLevel.from_string(os.getenv("VALIDATE_BRANCH_LOG_LEVEL", "WARNING"))
    if debug:
        level = LogLevel.DEBUG
    configure_logging(log_level=level, log_format=LogFormat.DEBUG if debug else LogFormat.HUMAN)


def _setup_signal_handlers() -> None:
    """设置信号处理器以优雅处理中断。"""
    def signal_handler(signum: int, frame: Any) -> None:
        logger.debug("接收到信号: %s", signum)
        print("\n\n操作被中断", file=sys.stderr)
        sys.exit(130)

    if hasattr(signal, 'SIGTERM'):
        signal.signal(signal.SIGTERM, signal_handler)


class PerformanceMonitor:
    """测量命令执行时间，调试模式下报告内存使用。"""

    def __init__(self, command: str):
        self.command = command
        self.debug = _debug_mode()
        self.start_time = time.perf_counter()
        self.memory_start: Optional[float] = None
        if self.debug:
            self.memory_start = psutil.Process().memory_info().rss / 1024 / 1024  # MB

    def __enter__(self) -> "PerformanceMonitor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        if not self.debug:
            return
        if elapsed_ms > PERFORMANCE_THRESHOLD_MS:
            logger.debug("%s 执行时间超过阈值: %.2fms (目标: <%dms)",
                         self.command, elapsed_ms, PERFORMANCE_THRESHOLD_MS)
        else:
            logger.debug("%s 执行时间: %.2fms", self.command, elapsed_ms)

        if self.memory_start is not None:
            memory_end = psutil.Process().memory_info().rss / 1024 / 1024  # MB
            logger.debug("%s 内存使用: %+.1fMB (开始: %.1fMB, 结束: %.1fMB)",
                         self.command, memory_end - self.memory_start,
                         self.memory_start, memory_end)


def find_workspace(start: Optional[str] = None) -> Optional[Path]:
    """确定工作区根目录。

    显式指定的目录必须存在，否则返回None。未指定时从当前目录向上查找
    包含 .git 的目录，找不到则使用当前目录。
    """
    if start is not None:
        path = Path(start).expanduser()
        return path.resolve() if path.is_dir() else None

    cwd = Path.cwd()
    for candidate in (cwd, *cwd.parents):
        if (candidate / ".git").exists():
            return candidate
    return cwd


class CliApp:
    """一次CLI调用所需的全部协作者。"""

    def __init__(self, workspace: Optional[Path]):
        self.workspace = workspace
        self.registry = get_pattern_registry()
        self.resolver = ConfigResolver(EnvironmentConfigProvider(workspace))
        self.surface = CommandSurface(
            resolver=self.resolver,
            runner=GitCommandRunner(),
            notifier=ConsoleNotifier(),
            prompter=ConsolePrompter(),
            opener=ConsoleSettingsOpener(workspace, self.resolver, self.registry),
            registry=self.registry,
        )


def _exit_code(success: bool) -> int:
    return 0 if success else 1


def _cmd_validate(args: Any, app: CliApp) -> int:
    return _exit_code(app.surface.validate_current(app.workspace))


def _cmd_create_branch(args: Any, app: CliApp) -> int:
    return _exit_code(app.surface.create_branch(app.workspace, args.name))


def _cmd_commit(args: Any, app: CliApp) -> int:
    return _exit_code(app.surface.create_commit(app.workspace, args.message))


def _cmd_install_hooks(args: Any, app: CliApp) -> int:
    return _exit_code(app.surface.install_hooks(app.workspace))


def _cmd_remove_hooks(args: Any, app: CliApp) -> int:
    return _exit_code(app.surface.remove_hooks(app.workspace))


def _cmd_settings(args: Any, app: CliApp) -> int:
    app.surface.open_settings()
    return 0


def _format_status(summary: StatusSummary) -> str:
    config = summary.config
    lines = [f"{summary.text} - {summary.tooltip}"]
    for kind in SubjectKind:
        state = "enabled" if config.is_enabled(kind) else "disabled"
        lines.append(f"{kind.label} convention: {config.convention_for(kind)} ({state})")
    if summary.hooks:
        lines.append("Hooks:")
        for kind, state in summary.hooks.items():
            lines.append(f"  {kind.value}: {state.value}")
    if summary.outdated_hooks:
        names = ", ".join(kind.value for kind in summary.outdated_hooks)
        lines.append(f"⚠️  Hooks out of date with settings (run install-hooks): {names}")
    if summary.non_executable_hooks:
        names = ", ".join(kind.value for kind in summary.non_executable_hooks)
        lines.append(f"⚠️  Hooks not executable, git will skip them: {names}")
    return "\n".join(lines)


def _cmd_status(args: Any, app: CliApp) -> int:
    summary = app.surface.status(app.workspace)
    if args.format == "json":
        data = {
            "state": summary.state.value,
            "text": summary.text,
            "tooltip": summary.tooltip,
            "config": summary.config.to_settings(),
            "hooks": {kind.value: state.value for kind, state in summary.hooks.items()},
            "outdated_hooks": [kind.value for kind in summary.outdated_hooks],
            "non_executable_hooks": [kind.value for kind in summary.non_executable_hooks],
        }
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(_format_status(summary))
    return 0


def _cmd_check(args: Any, app: CliApp) -> int:
    config = app.resolver.live_config()
    kind = SubjectKind.from_string(args.kind)
    try:
        if kind == SubjectKind.BRANCH:
            outcome = validate_branch_name(args.subject, config, app.registry)
        else:
            outcome = validate_commit_message(args.subject, config, app.registry)
    except ConfigurationError as e:
        print(e.get_user_message(), file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
    elif outcome.ok:
        print(outcome.format_message())
    else:
        print(outcome.format_message(include_pattern=args.show_pattern), file=sys.stderr)
    return _exit_code(outcome.ok)


def _cmd_list_conventions(args: Any, app: CliApp) -> int:
    kinds = [SubjectKind.from_string(args.kind)] if args.kind else list(SubjectKind)
    listing: Dict[str, List[Dict[str, Any]]] = {}
    for kind in kinds:
        entries = []
        for convention_id in app.registry.available_conventions(kind):
            definition = app.registry.get_definition(kind, convention_id)
            if definition is None:
                continue
            entries.append({
                "id": definition.convention_id,
                "description": definition.description,
                "pattern": definition.pattern,
                "examples": list(definition.examples),
                "default": convention_id == app.registry.default_convention(kind),
            })
        listing[kind.value] = entries

    if args.format == "json":
        print(json.dumps(listing, indent=2, ensure_ascii=False))
        return 0

    for kind_value, entries in listing.items():
        print(f"{SubjectKind.from_string(kind_value).label} conventions:")
        for entry in entries:
            marker = " (default)" if entry["default"] else ""
            print(f"  {entry['id']}{marker}: {entry['description']}")
            print(f"    pattern: {entry['pattern']}")
            for example in entry["examples"]:
                print(f"    e.g. {example}")
        print(f"  custom: validateBranch.custom{kind_value.capitalize()}Pattern")
        print()
    return 0


# 命令映射表 - 子命令 -> (处理函数, 描述)
COMMAND_REGISTRY: Dict[str, Tuple[Callable[[Any, CliApp], int], str]] = {
    "validate": (_cmd_validate, "校验当前分支名"),
    "create-branch": (_cmd_create_branch, "创建符合规范的分支"),
    "commit": (_cmd_commit, "使用符合规范的提交信息提交"),
    "install-hooks": (_cmd_install_hooks, "安装git钩子"),
    "remove-hooks": (_cmd_remove_hooks, "移除git钩子"),
    "settings": (_cmd_settings, "显示设置"),
    "status": (_cmd_status, "显示钩子安装状态"),
    "check": (_cmd_check, "校验分支名或提交信息"),
    "list-conventions": (_cmd_list_conventions, "列出内置命名规范"),
}


def _format_error_message(error: Exception) -> str:
    """格式化统一的错误消息。"""
    if isinstance(error, ValidateBranchError):
        return error.get_user_message()
    if _debug_mode():
        return f"错误: {type(error).__name__}: {error}"
    return "内部错误，请使用 VALIDATE_BRANCH_DEBUG=true 获取详细信息"


def _report_error(command_name: str, error: ValidateBranchError) -> None:
    """记录并输出错误；调试模式下附带调试信息。"""
    error.add_context("command", command_name)
    logger.debug("%s 失败: %s", command_name, error.to_dict())
    if _debug_mode():
        logger.debug("%s 调试信息: %s", command_name, error.collect_debug_info())
    print(_format_error_message(error), file=sys.stderr)


def _execute_command_safely(command_name: str, args: Any, app: CliApp) -> int:
    """安全执行命令，包含统一的错误处理和性能监控。"""
    handler, _ = COMMAND_REGISTRY[command_name]
    try:
        with PerformanceMonitor(command_name):
            return handler(args, app)
    except KeyboardInterrupt:
        logger.debug("%s 被用户中断", command_name)
        print("\n操作被中断", file=sys.stderr)
        return 130
    except ValidateBranchError as e:
        _report_error(command_name, e)
        return 1
    except OSError as e:
        _report_error(command_name, create_error_from_exception(e))
        return 1
    except Exception as e:
        logger.exception("%s 未预期的错误", command_name)
        print(_format_error_message(e), file=sys.stderr)
        return 1


def run(argv: Optional[List[str]] = None) -> int:
    """解析参数并执行子命令，返回退出码。"""
    args = parse_args(argv)
    workspace = find_workspace(args.workspace)
    logger.debug("工作区: %s", workspace)
    return _execute_command_safely(args.subcommand, args, CliApp(workspace))


def main() -> NoReturn:
    """主入口点 - validate-branch 命令调度器。"""
    _setup_logging()
    _setup_signal_handlers()
    sys.exit(run())


if __name__ == "__main__":
    main()
