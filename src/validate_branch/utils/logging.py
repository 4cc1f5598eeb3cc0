"""结构化日志系统，为validate-branch提供统一的日志记录。

支持三种输出格式：
- JSON格式（机器可读）
- 人类友好格式
- 调试详细格式

所有模块通过 get_logger(__name__) 获取 "validate_branch" 层级下的日志记录器，
configure_logging() 只配置根记录器 "validate_branch"。
"""

import json
import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, TextIO

from ..exceptions import ValidateBranchError

ROOT_LOGGER_NAME = "validate_branch"


class LogLevel(Enum):
    """日志级别枚举。"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @classmethod
    def from_string(cls, value: str) -> "LogLevel":
        """解析日志级别，无法识别时返回INFO。"""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.INFO

    def to_logging_level(self) -> int:
        return getattr(logging, self.name)


class LogFormat(Enum):
    """日志格式枚举。"""
    JSON = "json"
    HUMAN = "human"
    DEBUG = "debug"


class JsonFormatter(logging.Formatter):
    """JSON格式化器。"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        error = getattr(record, "error", None)
        if isinstance(error, ValidateBranchError):
            log_data.update({
                "error_id": error.error_id,
                "error_code": error.error_code,
                "category": error.category.value,
            })

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, separators=(",", ":"))


class HumanFormatter(logging.Formatter):
    """人类友好格式化器。"""

    def __init__(self):
        super().__init__(fmt="%(message)s")


class DebugFormatter(logging.Formatter):
    """调试详细格式化器。"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _get_formatter(log_format: LogFormat) -> logging.Formatter:
    if log_format == LogFormat.JSON:
        return JsonFormatter()
    elif log_format == LogFormat.DEBUG:
        return DebugFormatter()
    return HumanFormatter()


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """获取日志记录器，名称总是挂在validate_branch层级下。"""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(log_level: LogLevel = LogLevel.WARNING,
                      log_format: LogFormat = LogFormat.HUMAN,
                      log_dir: Optional[Path] = None,
                      stream: Optional[TextIO] = None,
                      max_file_size: int = 1024 * 1024,
                      backup_count: int = 3) -> logging.Logger:
    """配置全局日志设置。

    Args:
        log_level: 日志级别
        log_format: 控制台输出格式
        log_dir: 日志目录，为None时不写日志文件
        stream: 控制台输出流，默认为stderr
        max_file_size: 单个日志文件最大字节数
        backup_count: 日志轮转保留的文件数量

    Returns:
        配置好的根日志记录器
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level.to_logging_level())
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(_get_formatter(log_format))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "validate-branch.log",
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger


@contextmanager
def log_operation(operation_name: str, logger: Optional[logging.Logger] = None) -> Iterator[None]:
    """操作计时上下文管理器，失败时记录错误并重新抛出。"""
    logger = logger or get_logger()
    start_time = time.perf_counter()
    logger.debug("开始操作: %s", operation_name)
    try:
        yield
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("操作失败: %s (%.2fms)", operation_name, duration_ms,
                     extra={"error": e})
        raise
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.debug("操作完成: %s (%.2fms)", operation_name, duration_ms)


__all__ = [
    "ROOT_LOGGER_NAME",
    "LogLevel",
    "LogFormat",
    "JsonFormatter",
    "HumanFormatter",
    "DebugFormatter",
    "get_logger",
    "configure_logging",
    "log_operation",
]
