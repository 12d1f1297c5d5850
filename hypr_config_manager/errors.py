"""
Error handling for Hyprland Configuration Manager.

Structured error codes shared by the engine and the CLI.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for Hyprland Configuration Manager.

    - 1000-1099: Input errors
    - 1200-1299: File system errors
    """

    # Input errors (1000-1099)
    MALFORMED_INPUT = 1000
    KEYBIND_NOT_FOUND = 1001

    # File system errors (1200-1299)
    FILE_NOT_FOUND = 1200
    FILE_READ_ERROR = 1201
    FILE_WRITE_ERROR = 1202
    PERMISSION_DENIED = 1204
    BACKUP_FAILED = 1205
    BACKUP_NOT_FOUND = 1206


class ConfigError(Exception):
    """Base exception for configuration management errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize configuration error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class NotFoundError(ConfigError):
    """File or backup does not exist."""

    def __init__(self, path: str, code: ErrorCode = ErrorCode.FILE_NOT_FOUND):
        super().__init__(
            code=code,
            message=f"No such file: {path}",
            context={"path": path}
        )
        self.path = path


class PermissionDeniedError(ConfigError):
    """File exists but cannot be accessed."""

    def __init__(self, path: str, operation: str = "read"):
        super().__init__(
            code=ErrorCode.PERMISSION_DENIED,
            message=f"Permission denied trying to {operation} {path}",
            suggestion=f"Check ownership and mode of {path}",
            context={"path": path, "operation": operation}
        )
        self.path = path


class FileStoreError(ConfigError):
    """Any other read/write failure reported by the file store."""

    def __init__(self, path: str, operation: str, reason: str):
        code = ErrorCode.FILE_WRITE_ERROR if operation in ("write", "delete") else ErrorCode.FILE_READ_ERROR
        super().__init__(
            code=code,
            message=f"Failed to {operation} {path}: {reason}",
            context={"path": path, "operation": operation, "reason": reason}
        )
        self.path = path


class MalformedInputError(ConfigError):
    """
    User-supplied input could not be understood.

    The configuration parser never raises this: malformed config lines are
    dropped. It is used for direct user input such as key combos on the CLI.
    """

    def __init__(self, value: str, reason: str, suggestion: Optional[str] = None):
        super().__init__(
            code=ErrorCode.MALFORMED_INPUT,
            message=f"Malformed input '{value}': {reason}",
            suggestion=suggestion,
            context={"value": value}
        )


class KeybindNotFoundError(ConfigError):
    """No keybind with the given identifier in the live document."""

    def __init__(self, keybind_id: str):
        super().__init__(
            code=ErrorCode.KEYBIND_NOT_FOUND,
            message=f"Keybind not found: {keybind_id}",
            context={"keybind_id": keybind_id}
        )


class BackupFailure(ConfigError):
    """Snapshot failed for a reason other than 'no prior file'."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code=ErrorCode.BACKUP_FAILED,
            message=f"Failed to create backup {path}: {reason}",
            suggestion="The canonical file was not modified; fix the backup location and retry",
            context={"path": path, "reason": reason}
        )
        self.path = path
