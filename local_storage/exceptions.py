"""Exception hierarchy for the local storage provider.

Filesystem failures are not wrapped: callers receive the builtin
``OSError`` subclasses (``FileNotFoundError``, ``PermissionError``,
``NotADirectoryError``) exactly as the operating system reported them.
"""


class StorageError(Exception):
    """Base exception for provider-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(StorageError):
    """Raised when provider options are missing or invalid."""


class InvalidInputError(StorageError, ValueError):
    """Raised when an operation receives data it cannot store."""


class InvalidKeyError(InvalidInputError):
    """Raised when an object key resolves outside the base path."""
