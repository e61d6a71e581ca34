"""Single-shot connection opener with failure translation.

``ConnectionOpener.open`` is the translation boundary: every exception raised
by the connect primitive comes back as a ``ConnectionFailure`` value, and the
handle from a successful attempt is returned as-is.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from dbconnect.core.config import OpenerSettings
from dbconnect.core.errors import (
    CONNECTION_FAILED_MESSAGE,
    ConnectionFailure,
    DatabaseConnectionError,
)
from dbconnect.core.params import ConnectionParameters
from dbconnect.lib.redaction import redact
from dbconnect.services.mysql_connection import (
    build_conn_str,
    extract_error_info,
    map_exception,
)

logger = logging.getLogger(__name__)

H = TypeVar("H")
ConnectPrimitive = Callable[[ConnectionParameters], Any]


@dataclass(frozen=True)
class OpenResult(Generic[H]):
    """Outcome of one ``open`` call: exactly one of handle/error is set."""

    handle: Optional[H] = None
    error: Optional[ConnectionFailure] = None

    @classmethod
    def success(cls, handle: H) -> "OpenResult[H]":
        return cls(handle=handle)

    @classmethod
    def failure(cls, error: ConnectionFailure) -> "OpenResult[H]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> H:
        """Return the handle or raise ``DatabaseConnectionError`` chained to the cause."""
        if self.error is None:
            return self.handle  # type: ignore[return-value]
        raise DatabaseConnectionError(self.error) from self.error.cause


def pyodbc_connect(settings: OpenerSettings) -> ConnectPrimitive:
    """Return a connect primitive backed by pyodbc and the MySQL ODBC driver."""

    def _connect(params: ConnectionParameters) -> Any:
        import pyodbc  # type: ignore

        return pyodbc.connect(build_conn_str(params, settings))

    return _connect


def translate_failure(exc: BaseException, params: Optional[ConnectionParameters] = None) -> ConnectionFailure:
    """Build the ``ConnectionFailure`` for a raw connect-primitive exception."""
    raw_message, code, sqlstate = extract_error_info(exc)
    secrets = (params.credential,) if params is not None else ()
    hint = map_exception(exc, code, sqlstate)
    return ConnectionFailure(
        message=f"{CONNECTION_FAILED_MESSAGE}: {hint}",
        code=code,
        cause=exc,
        detail=redact(raw_message, secrets, min_secret_length=1),
    )


class ConnectionOpener:
    """Open one connection per call through an injectable connect primitive.

    No retry and no cleanup of a failed attempt: whatever the driver leaves
    behind is the driver's concern. The returned handle belongs to the caller.
    """

    def __init__(
        self,
        connect: Optional[ConnectPrimitive] = None,
        *,
        settings: Optional[OpenerSettings] = None,
    ) -> None:
        self._settings = settings or OpenerSettings.from_env()
        self._connect = connect or pyodbc_connect(self._settings)

    @property
    def settings(self) -> OpenerSettings:
        return self._settings

    def open(self, params: ConnectionParameters) -> OpenResult[Any]:
        logger.info("Opening database connection", extra=params.safe_descriptor())
        try:
            handle = self._connect(params)
        except Exception as exc:
            failure = translate_failure(exc, params)
            logger.warning(
                "Database connection failed",
                extra={
                    **params.safe_descriptor(),
                    "code": failure.code,
                    "cause_type": type(exc).__name__,
                },
            )
            # Driver text stays out of user-visible log levels
            logger.debug("Driver failure detail", extra={"code": failure.code, "detail": failure.detail})
            return OpenResult.failure(failure)
        logger.info("Database connection established", extra=params.safe_descriptor())
        return OpenResult.success(handle)


def open_connection(
    params: ConnectionParameters,
    *,
    connect: Optional[ConnectPrimitive] = None,
    settings: Optional[OpenerSettings] = None,
) -> OpenResult[Any]:
    return ConnectionOpener(connect, settings=settings).open(params)


__all__ = [
    "ConnectionOpener",
    "OpenResult",
    "ConnectPrimitive",
    "open_connection",
    "pyodbc_connect",
    "translate_failure",
]
