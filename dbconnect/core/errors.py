from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

CONNECTION_FAILED_MESSAGE = "Database connection failed"


class ErrorKind(str, Enum):
    """Tag identifying the class of a translated failure."""

    CONNECTION = "connection"


@dataclass(frozen=True)
class ConnectionFailure:
    """Structured result of a failed connection attempt.

    ``message`` is stable and safe to show to end users. ``detail`` holds the
    redacted driver text for diagnostics and ``cause`` the original exception.
    """

    message: str
    code: Optional[int] = None
    cause: Optional[BaseException] = field(default=None, compare=False)
    detail: str = ""
    kind: ErrorKind = ErrorKind.CONNECTION

    def __str__(self) -> str:
        return self.message


class UserFacingError(Exception):
    """Base exception carrying user-presentable context."""

    def __init__(self, message: str, *, title: str, remediation: str | None = None) -> None:
        super().__init__(message)
        self.title = title
        self.remediation = remediation or ""


class DatabaseConnectionError(UserFacingError):
    """Raised by ``OpenResult.unwrap()`` when a connection attempt failed."""

    def __init__(self, failure: ConnectionFailure, *, remediation: str | None = None) -> None:
        super().__init__(failure.message, title="Connection failed", remediation=remediation)
        self.failure = failure

    @property
    def code(self) -> Optional[int]:
        return self.failure.code

    @property
    def cause(self) -> Optional[BaseException]:
        return self.failure.cause


class CredentialStoreError(UserFacingError):
    pass


__all__ = [
    "CONNECTION_FAILED_MESSAGE",
    "ErrorKind",
    "ConnectionFailure",
    "UserFacingError",
    "DatabaseConnectionError",
    "CredentialStoreError",
]
