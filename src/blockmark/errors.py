"""Error hierarchy for blockmark.

The transcoder itself never raises on document input; malformed Markdown or
editor payloads degrade to warnings instead.  The errors below cover the
parts of the package that *can* fail: configuration validation and the
vault storage layer.

Every error inherits from :class:`BlockmarkError` and carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    CONFIG_ERROR = "CONFIG_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    INVALID_PATH = "INVALID_PATH"
    INVALID_VAULT = "INVALID_VAULT"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class BlockmarkError(Exception):
    """Base exception for all blockmark errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class BlockmarkConfigError(BlockmarkError):
    """A :class:`BlockmarkConfig` field holds an invalid value.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Storage errors
# ---------------------------------------------------------------------------

class BlockmarkStorageError(BlockmarkError):
    """Base class for vault read/write failures.

    Context keys: ``name``, ``path``, ``operation``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.STORAGE_ERROR,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class BlockmarkNotFoundError(BlockmarkStorageError):
    """The requested document or folder does not exist in the vault."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.NOT_FOUND,
        )


class BlockmarkPermissionError(BlockmarkStorageError):
    """The operating system denied access to a vault path."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.PERMISSION_ERROR,
        )


class BlockmarkPathError(BlockmarkStorageError):
    """A document name is empty, absolute, or resolves outside the vault root."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_PATH,
        )


class BlockmarkInvalidVaultError(BlockmarkStorageError):
    """The vault root is missing, not a directory, or not marked as a vault."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_VAULT,
        )
