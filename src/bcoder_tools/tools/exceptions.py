"""
Exceptions for tool execution.

Every failure a tool can report maps onto one ErrorKind. Tools raise these
internally; BaseTool.execute converts them into failed ToolResults.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure taxonomy reported in ToolResult.error_type."""

    VALIDATION = "ValidationError"
    PERMISSION_DENIED = "PermissionDenied"
    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    TEXT_NOT_FOUND = "TextNotFound"
    IO_ERROR = "IOError"


class ToolError(Exception):
    """Base exception for tool operations."""

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class ToolRegistrationError(ValueError):
    """Raised at startup when two tools are registered under one name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class ToolValidationError(ToolError):
    """Raised when call arguments do not match the declared schema."""

    kind = ErrorKind.VALIDATION


class PermissionDeniedError(ToolError):
    """Raised when the security gate rejects a path."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, path: str, reason: str = "Access denied"):
        self.reason = reason
        super().__init__(f"Permission denied: {reason}", path=path)


class PathNotFoundError(ToolError):
    """Raised when a path required by an operation does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, path: str, what: str = "File or directory"):
        super().__init__(f"{what} does not exist: {path}", path=path)


class PathExistsError(ToolError):
    """Raised when a path exists where the operation requires it not to."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, path: str, what: str = "Path"):
        super().__init__(f"{what} already exists: {path}", path=path)


class TextNotFoundError(ToolError):
    """Raised when edit_file cannot find the text to replace."""

    kind = ErrorKind.TEXT_NOT_FOUND

    def __init__(self, path: str, text: str):
        self.text = text
        super().__init__(f'Text not found in file: "{text}"', path=path)


class ToolIOError(ToolError):
    """Raised when the operating system rejects a filesystem call."""

    kind = ErrorKind.IO_ERROR
