"""
文件操作、权限和日志工具测试

验证原子写入、删除语义、可执行权限检测以及日志配置。
"""

import io
import json
import logging
import os
import stat
import sys

import pytest

from validate_branch.exceptions import FilesystemError, InvalidPatternError
from validate_branch.utils.file_operations import (
    ensure_directory_exists,
    read_json_file,
    read_text_file,
    safe_delete_file,
    write_text_file,
)
from validate_branch.utils.logging import (
    ROOT_LOGGER_NAME,
    JsonFormatter,
    LogFormat,
    LogLevel,
    configure_logging,
    get_logger,
    log_operation,
)
from validate_branch.utils.permissions import (
    HOOK_FILE_MODE,
    PlatformType,
    get_current_platform,
    is_executable,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")


class TestFileOperations:
    """测试文件读写"""

    def test_ensure_directory_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_directory_exists(target) == target
        assert target.is_dir()

    def test_ensure_directory_rejects_file(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("x")
        with pytest.raises(FilesystemError):
            ensure_directory_exists(path)

    def test_write_and_read_text(self, tmp_path):
        path = tmp_path / "hook"
        write_text_file(path, "#!/bin/sh\necho ✅\n")
        assert read_text_file(path) == "#!/bin/sh\necho ✅\n"
        assert not (tmp_path / ".hook.tmp").exists()

    def test_write_replaces_existing_file(self, tmp_path):
        path = tmp_path / "hook"
        path.write_text("old")
        write_text_file(path, "new")
        assert path.read_text() == "new"

    def test_write_uses_lf_line_endings(self, tmp_path):
        path = tmp_path / "hook"
        write_text_file(path, "a\nb\n")
        assert path.read_bytes() == b"a\nb\n"

    @posix_only
    def test_write_sets_mode(self, tmp_path):
        path = tmp_path / "hook"
        write_text_file(path, "#!/bin/sh\n", mode=HOOK_FILE_MODE)
        assert stat.S_IMODE(path.stat().st_mode) == HOOK_FILE_MODE
        assert is_executable(path)

    def test_write_into_missing_directory_fails(self, tmp_path):
        with pytest.raises(FilesystemError) as exc_info:
            write_text_file(tmp_path / "missing" / "hook", "x")
        assert exc_info.value.original_error is not None

    def test_read_missing_file_fails(self, tmp_path):
        with pytest.raises(FilesystemError):
            read_text_file(tmp_path / "missing")

    def test_read_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"a": 1}))
        assert read_json_file(path) == {"a": 1}

    def test_read_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{")
        with pytest.raises(json.JSONDecodeError):
            read_json_file(path)

    def test_safe_delete(self, tmp_path):
        path = tmp_path / "hook"
        path.write_text("x")
        assert safe_delete_file(path) is True
        assert safe_delete_file(path) is False


class TestPermissions:
    """测试权限检测"""

    def test_current_platform(self):
        assert isinstance(get_current_platform(), PlatformType)

    def test_missing_file_is_not_executable(self, tmp_path):
        assert not is_executable(tmp_path / "missing")

    @posix_only
    def test_plain_file_is_not_executable(self, tmp_path):
        path = tmp_path / "hook"
        path.write_text("#!/bin/sh\n")
        os.chmod(path, 0o644)
        assert not is_executable(path)


@pytest.fixture
def restore_logging():
    """configure_logging修改全局日志状态，测试后恢复"""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    for handler in logger.handlers:
        if handler not in saved[1]:
            handler.close()
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


class TestLogging:
    """测试日志配置"""

    def test_get_logger_prefixes_names(self):
        assert get_logger("services.x").name == "validate_branch.services.x"
        assert get_logger("validate_branch.cli").name == "validate_branch.cli"
        assert get_logger().name == ROOT_LOGGER_NAME

    def test_log_level_from_string(self):
        assert LogLevel.from_string("DEBUG") == LogLevel.DEBUG
        assert LogLevel.from_string("nonsense") == LogLevel.INFO
        assert LogLevel.WARNING.to_logging_level() == logging.WARNING

    def test_configure_logging_human_stream(self, restore_logging):
        stream = io.StringIO()
        configure_logging(LogLevel.INFO, LogFormat.HUMAN, stream=stream)
        get_logger("test").info("hello %s", "world")
        get_logger("test").debug("hidden")
        assert stream.getvalue() == "hello world\n"

    def test_configure_logging_writes_json_file(self, tmp_path, restore_logging):
        configure_logging(LogLevel.DEBUG, LogFormat.HUMAN, log_dir=tmp_path, stream=io.StringIO())
        get_logger("test").warning("to file")
        for handler in restore_logging.handlers:
            handler.flush()
        line = (tmp_path / "validate-branch.log").read_text(encoding="utf-8").strip()
        data = json.loads(line)
        assert data["message"] == "to file"
        assert data["level"] == "WARNING"

    def test_json_formatter_includes_error_fields(self):
        error = InvalidPatternError("bad", pattern="(")
        record = logging.LogRecord("validate_branch", logging.ERROR, __file__, 1, "failed", None, None)
        record.error = error
        data = json.loads(JsonFormatter().format(record))
        assert data["error_code"] == "USER_PATTERN_INVALID"
        assert data["error_id"] == error.error_id

    def test_log_operation_reraises(self, restore_logging):
        stream = io.StringIO()
        configure_logging(LogLevel.DEBUG, LogFormat.HUMAN, stream=stream)
        with pytest.raises(RuntimeError):
            with log_operation("explode"):
                raise RuntimeError("boom")
        assert "explode" in stream.getvalue()
