"""Custom exceptions for treework"""

from typing import Optional


class TreeworkError(Exception):
    """Base exception for all treework errors."""
    pass


class GitOperationError(TreeworkError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConfigError(TreeworkError):
    """Exception raised for invalid or unwritable configuration."""
    pass


class EditorNotFoundError(TreeworkError):
    """Exception raised when no editor can be launched."""

    def __init__(self):
        super().__init__("no editor found: install cursor, code, or set WT_EDITOR")


class DependencyInstallError(TreeworkError):
    """Exception raised when installing dependencies fails."""

    def __init__(self, manager: str, message: Optional[str] = None):
        self.manager = manager
        self.message = message

        error_msg = f"'{manager} install' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class UserAbort(Exception):
    """Raised by prompts when the user cancels (Ctrl+C, Esc, EOF).

    Not a TreeworkError: an abort is a control signal, not a failure.
    """
    pass
