"""Tests for exception hierarchy in validate_branch.exceptions module."""

import pytest

from validate_branch.exceptions import (
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    ExternalCommandError,
    FilesystemError,
    InvalidPatternError,
    ValidateBranchError,
    create_error_from_exception,
)


class TestExceptionHierarchy:
    """Test the exception inheritance hierarchy."""

    def test_validate_branch_error_base_class(self):
        assert issubclass(ConfigurationError, ValidateBranchError)
        assert issubclass(InvalidPatternError, ConfigurationError)
        assert issubclass(FilesystemError, ValidateBranchError)
        assert issubclass(ExternalCommandError, ValidateBranchError)

    def test_all_exceptions_inherit_from_exception(self):
        assert issubclass(ValidateBranchError, Exception)


class TestExceptionMessages:
    """Test exception message formatting and content."""

    def test_str_is_message(self):
        assert str(FilesystemError("Cannot write hook")) == "Cannot write hook"

    def test_user_message_includes_fix(self):
        error = InvalidPatternError(
            "Invalid custom branch pattern",
            pattern="(",
            setting="validateBranch.customBranchPattern",
        )
        message = error.get_user_message()
        assert message.startswith("⚠️ Invalid custom branch pattern")
        assert "💡 Fix the regular expression in validateBranch.customBranchPattern." in message

    def test_filesystem_error_severity_icon(self):
        assert FilesystemError("boom").get_user_message().startswith("❌ boom")


class TestExceptionAttributes:
    """Test categories, codes and context."""

    def test_configuration_error_defaults(self):
        error = ConfigurationError("bad", setting="validateBranch.branchConvention")
        assert error.category == ErrorCategory.USER
        assert error.error_code == "USER_CONFIG_INVALID"
        assert error.context["setting"] == "validateBranch.branchConvention"

    def test_invalid_pattern_error_context(self):
        error = InvalidPatternError("bad", pattern="(", setting="validateBranch.customCommitPattern")
        assert error.error_code == "USER_PATTERN_INVALID"
        assert error.context == {"pattern": "(", "setting": "validateBranch.customCommitPattern"}

    def test_filesystem_error_path(self, tmp_path):
        error = FilesystemError("boom", path=tmp_path)
        assert error.path == tmp_path
        assert error.category == ErrorCategory.SYSTEM
        assert error.severity == ErrorSeverity.HIGH
        assert error.context["path"] == str(tmp_path)

    def test_external_command_error(self):
        error = ExternalCommandError(
            "fatal: a branch named 'x' already exists",
            command=["git", "checkout", "-b", "x"],
            returncode=128,
            stderr="fatal: a branch named 'x' already exists",
        )
        assert error.category == ErrorCategory.EXTERNAL
        assert error.command == ["git", "checkout", "-b", "x"]
        assert error.context["returncode"] == 128

    def test_to_dict(self):
        data = ConfigurationError("bad").to_dict()
        assert data["error_type"] == "ConfigurationError"
        assert data["category"] == "user"
        assert len(data["error_id"]) == 8

    def test_add_context(self):
        error = ValidateBranchError("x")
        error.add_context("workspace", "/tmp/repo")
        assert error.context["workspace"] == "/tmp/repo"

    def test_debug_info_includes_original_traceback(self):
        try:
            raise ValueError("inner")
        except ValueError as e:
            error = ValidateBranchError("outer", original_error=e)
        info = error.collect_debug_info()
        assert "ValueError: inner" in info["traceback"]


class TestCreateErrorFromException:

    def test_os_error_becomes_filesystem_error(self, tmp_path):
        original = PermissionError(13, "Permission denied", str(tmp_path / "hook"))
        error = create_error_from_exception(original)
        assert isinstance(error, FilesystemError)
        assert error.original_error is original
        assert error.path == tmp_path / "hook"

    def test_own_errors_pass_through(self):
        error = ConfigurationError("bad")
        assert create_error_from_exception(error) is error

    def test_other_errors_are_wrapped(self):
        error = create_error_from_exception(RuntimeError("x"))
        assert type(error) is ValidateBranchError
        assert error.error_code == "INTERNAL_UNEXPECTED"

    def test_can_be_raised_and_caught_as_base(self):
        with pytest.raises(ValidateBranchError):
            raise FilesystemError("x")
