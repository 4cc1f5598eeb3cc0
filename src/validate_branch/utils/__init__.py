"""
validate-branch工具模块

提供文件操作、权限处理、shell字面量转义和日志功能。
"""

from .file_operations import (
    ensure_directory_exists,
    read_json_file,
    read_text_file,
    safe_delete_file,
    write_text_file,
)
from .logging import (
    LogFormat,
    LogLevel,
    configure_logging,
    get_logger,
    log_operation,
)
from .permissions import (
    HOOK_FILE_MODE,
    PlatformType,
    get_current_platform,
    is_executable,
)
from .shell import check_embeddable, shell_quote, shell_words

__all__ = [
    # 文件读写操作
    "ensure_directory_exists",
    "read_json_file",
    "read_text_file",
    "safe_delete_file",
    "write_text_file",
    # 日志
    "LogFormat",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_operation",
    # 权限处理
    "HOOK_FILE_MODE",
    "PlatformType",
    "get_current_platform",
    "is_executable",
    # shell字面量
    "check_embeddable",
    "shell_quote",
    "shell_words",
]
