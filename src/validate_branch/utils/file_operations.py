"""
pathlib文件操作工具模块

提供钩子文件和设置文件所需的文件读写功能：
- 目录创建和验证
- 文本和JSON文件读取
- 原子性文本写入（外部读取者不会看到被截断的脚本）
- 文件删除

所有底层OSError都被转换为FilesystemError。
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import FilesystemError


def ensure_directory_exists(dir_path: Union[str, Path], mode: int = 0o755) -> Path:
    """
    确保目录存在，如果不存在则创建

    Args:
        dir_path: 目录路径
        mode: 目录权限模式（Unix/Linux系统）

    Returns:
        目录的Path对象

    Raises:
        FilesystemError: 如果无法创建目录或路径已被文件占用
    """
    path = Path(dir_path)

    if path.exists() and not path.is_dir():
        raise FilesystemError(f"Path exists but is not a directory: {path}", path=path)

    try:
        path.mkdir(parents=True, exist_ok=True, mode=mode)
        return path
    except OSError as e:
        raise FilesystemError(f"Cannot create directory '{path}': {e}", path=path, original_error=e)


def read_text_file(file_path: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    读取文本文件

    Raises:
        FilesystemError: 如果读取失败或编码错误
    """
    path = Path(file_path)
    try:
        with path.open("r", encoding=encoding) as f:
            return f.read()
    except OSError as e:
        raise FilesystemError(f"Cannot read file '{path}': {e}", path=path, original_error=e)
    except UnicodeDecodeError as e:
        raise FilesystemError(f"File encoding error '{path}': {e}", path=path, original_error=e)


def read_json_file(file_path: Union[str, Path], encoding: str = "utf-8") -> Any:
    """
    读取JSON文件

    Raises:
        FilesystemError: 如果读取失败
        json.JSONDecodeError: 如果文件内容不是有效的JSON
    """
    return json.loads(read_text_file(file_path, encoding=encoding))


def write_text_file(file_path: Union[str, Path],
                    content: str,
                    encoding: str = "utf-8",
                    mode: Optional[int] = None) -> Path:
    """
    原子性地写入文本文件

    先写入同目录下的临时文件，设置权限后再替换目标文件，
    因此其他进程只会看到旧文件或完整的新文件。

    Args:
        file_path: 文件路径
        content: 文件内容
        encoding: 文件编码
        mode: 文件权限，例如钩子脚本使用0o755

    Returns:
        写入的文件Path对象

    Raises:
        FilesystemError: 如果写入失败
    """
    path = Path(file_path)
    temp_path = path.with_name(f".{path.name}.tmp")

    try:
        # newline="\n": 钩子脚本必须使用LF换行
        with temp_path.open("w", encoding=encoding, newline="\n") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, path)
        return path
    except OSError as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass  # 清理失败不掩盖原始错误
        raise FilesystemError(f"Cannot write file '{path}': {e}", path=path, original_error=e)


def safe_delete_file(file_path: Union[str, Path]) -> bool:
    """
    删除文件

    Returns:
        如果文件被删除返回True，文件不存在返回False

    Raises:
        FilesystemError: 如果删除失败
    """
    path = Path(file_path)
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        raise FilesystemError(f"Cannot delete file '{path}': {e}", path=path, original_error=e)


__all__ = [
    "ensure_directory_exists",
    "read_text_file",
    "read_json_file",
    "write_text_file",
    "safe_delete_file",
]
