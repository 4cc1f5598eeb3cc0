"""
跨平台文件权限处理模块

钩子脚本需要可执行权限git才会运行它们。Windows上的Git for Windows
通过自带的sh执行钩子，不检查可执行位。
"""

import os
import platform
from enum import Enum
from pathlib import Path
from typing import Union

# 钩子脚本的默认权限: rwxr-xr-x
HOOK_FILE_MODE = 0o755


class PlatformType(Enum):
    """平台类型枚举"""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


def get_current_platform() -> PlatformType:
    """获取当前平台类型"""
    system = platform.system().lower()
    if system == "windows":
        return PlatformType.WINDOWS
    elif system == "darwin":
        return PlatformType.MACOS
    elif system == "linux":
        return PlatformType.LINUX
    return PlatformType.UNKNOWN


def is_executable(path: Union[str, Path]) -> bool:
    """检查文件是否可执行（Windows上只检查文件是否存在）"""
    path = Path(path)
    if not path.is_file():
        return False
    if get_current_platform() == PlatformType.WINDOWS:
        return True
    return os.access(path, os.X_OK)


__all__ = [
    "HOOK_FILE_MODE",
    "PlatformType",
    "get_current_platform",
    "is_executable",
]
