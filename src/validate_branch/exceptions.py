"""自定义异常模块，为validate-branch提供统一的错误处理。

异常分类：
- 用户错误：配置错误、自定义正则表达式无效
- 系统错误：钩子目录无法创建、文件无法写入、权限不足
- 外部依赖错误：git命令执行失败

注意：分支名或提交信息不符合约定不是异常，而是一个普通的否定结果
（见 models.validation.ValidationOutcome）。
"""

import os
import sys
import traceback
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union


class ErrorSeverity(Enum):
    """错误严重程度枚举。"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """错误分类枚举。"""
    USER = "user"
    SYSTEM = "system"
    INTERNAL = "internal"
    EXTERNAL = "external"


class ValidateBranchError(Exception):
    """validate-branch的基础异常类。

    属性:
        message: 用户可读的错误消息
        error_code: 标准化错误代码 (格式: CATEGORY_SPECIFIC_CODE)
        suggested_fix: 解决建议
        context: 错误上下文信息
        original_error: 原始异常对象（如果有）
        severity: 错误严重程度
        category: 错误分类
        error_id: 唯一错误标识符
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        suggested_fix: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None,
        severity: Union[str, ErrorSeverity] = ErrorSeverity.MEDIUM,
        category: Union[str, ErrorCategory] = ErrorCategory.INTERNAL,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.suggested_fix = suggested_fix
        self.context = context or {}
        self.original_error = original_error

        self.severity = severity if isinstance(severity, ErrorSeverity) else ErrorSeverity(severity)
        self.category = category if isinstance(category, ErrorCategory) else ErrorCategory(category)

        self.error_id = str(uuid.uuid4())[:8]
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        return self.message

    def collect_debug_info(self) -> Dict[str, Any]:
        """收集调试信息。"""
        return {
            "python_version": sys.version,
            "platform": sys.platform,
            "cwd": str(Path.cwd()),
            "traceback": "".join(traceback.format_exception(
                type(self.original_error), self.original_error, self.original_error.__traceback__
            )) if self.original_error else None,
            "context_keys": list(self.context.keys()),
            "process_id": os.getpid(),
        }

    def get_user_message(self) -> str:
        """获取用户友好的错误消息。"""
        severity_icons = {
            ErrorSeverity.LOW: "💡",
            ErrorSeverity.MEDIUM: "⚠️",
            ErrorSeverity.HIGH: "❌",
            ErrorSeverity.CRITICAL: "🚨",
        }

        user_msg = f"{severity_icons.get(self.severity, '❓')} {self.message}"
        if self.suggested_fix:
            user_msg += f"\n\n💡 {self.suggested_fix}"
        return user_msg

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式，便于JSON序列化。"""
        return {
            "error_id": self.error_id,
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "suggested_fix": self.suggested_fix,
            "context": self.context,
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def add_context(self, key: str, value: Any) -> None:
        """添加上下文信息。"""
        self.context[key] = value


# ===== 用户错误类别 =====

class ConfigurationError(ValidateBranchError):
    """配置错误，例如自定义约定缺少正则表达式。"""

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        self.setting = setting
        kwargs.setdefault("error_code", "USER_CONFIG_INVALID")
        kwargs.setdefault("suggested_fix", "Open Settings and review the validateBranch.* options.")
        kwargs.setdefault("category", ErrorCategory.USER)
        if setting:
            kwargs.setdefault("context", {}).update({"setting": setting})
        super().__init__(message, **kwargs)


class InvalidPatternError(ConfigurationError):
    """自定义正则表达式为空或无法编译。"""

    def __init__(self, message: str, pattern: str = "", setting: Optional[str] = None, **kwargs):
        self.pattern = pattern
        kwargs.setdefault("error_code", "USER_PATTERN_INVALID")
        kwargs.setdefault("suggested_fix", f"Fix the regular expression in {setting or 'your custom pattern setting'}.")
        kwargs.setdefault("context", {}).update({"pattern": pattern})
        super().__init__(message, setting=setting, **kwargs)


# ===== 系统错误类别 =====

class FilesystemError(ValidateBranchError):
    """钩子目录或钩子文件的文件系统错误。"""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None, **kwargs):
        self.path = Path(path) if path else None
        kwargs.setdefault("error_code", "SYSTEM_FILESYSTEM")
        kwargs.setdefault("category", ErrorCategory.SYSTEM)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        kwargs.setdefault("suggested_fix", "Check that the workspace is a git repository and that you can write to .git/hooks.")
        if self.path:
            kwargs.setdefault("context", {}).update({"path": str(self.path)})
        super().__init__(message, **kwargs)


# ===== 外部依赖错误类别 =====

class ExternalCommandError(ValidateBranchError):
    """git命令执行失败。错误输出原样展示给用户，不会重试。"""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
        **kwargs
    ):
        self.command: List[str] = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
        kwargs.setdefault("error_code", "EXTERNAL_COMMAND_FAILED")
        kwargs.setdefault("category", ErrorCategory.EXTERNAL)
        context = kwargs.setdefault("context", {})
        context.update({"command": self.command, "returncode": returncode})
        super().__init__(message, **kwargs)


def create_error_from_exception(exc: BaseException, message: Optional[str] = None,
                                path: Optional[Union[str, Path]] = None) -> ValidateBranchError:
    """从标准异常创建对应的validate-branch异常。"""
    if isinstance(exc, ValidateBranchError):
        return exc

    if isinstance(exc, OSError):
        return FilesystemError(message or str(exc), path=path or exc.filename, original_error=exc)

    return ValidateBranchError(
        message or f"Unexpected error: {exc}",
        error_code="INTERNAL_UNEXPECTED",
        original_error=exc,
    )


__all__ = [
    "ErrorSeverity",
    "ErrorCategory",
    "ValidateBranchError",
    "ConfigurationError",
    "InvalidPatternError",
    "FilesystemError",
    "ExternalCommandError",
    "create_error_from_exception",
]
