"""
Exceptions for the npm release action.

Every exception defined here is fatal: the orchestrator catches
``ReleaseError`` once and turns it into a failed outcome. "Nothing to do"
situations are never raised; they are returned as plain values.
"""

from typing import Optional, Sequence


class ReleaseError(Exception):
    """Base exception for release action errors."""
    pass


class ConfigurationError(ReleaseError):
    """Exception raised for invalid configuration (templates, pattern, author)."""
    pass


class EventError(ReleaseError):
    """Exception raised when the triggering event payload is missing or malformed."""
    pass


class PackageMetadataError(ReleaseError):
    """Exception raised when package.json is missing or has no usable version."""
    pass


class ProcessError(ReleaseError):
    """Base exception for external command failures."""

    def __init__(self, message: str, command: str, args: Sequence[str] = ()):
        super().__init__(message)
        self.command = command
        self.arguments = tuple(args)


class ExitError(ProcessError):
    """Exception raised when a command exits with a non-zero status."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        code: int,
        stderr: Optional[str] = None,
    ):
        super().__init__(f"command failed with code {code}: {command}", command, args)
        self.code = code
        self.stderr = stderr or ""


class LaunchError(ProcessError):
    """Exception raised when a command cannot be started at all."""

    def __init__(self, command: str, args: Sequence[str] = ()):
        super().__init__(f"command failed: {command}", command, args)
