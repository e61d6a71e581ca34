from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from dbconnect.core.config import OpenerSettings
from dbconnect.core.params import ConnectionParameters

# MySQL client/server error numbers
ER_ACCESS_DENIED = 1045
ER_BAD_DB = 1049
CR_CONNECTION_ERROR = 2002
CR_CONN_HOST_ERROR = 2003
CR_UNKNOWN_HOST = 2005
CR_SERVER_LOST = 2013

_UNREACHABLE_CODES = {CR_CONNECTION_ERROR, CR_CONN_HOST_ERROR, CR_SERVER_LOST}

# MySQL ODBC messages end with the native error number, e.g. "... (1045) (SQLDriverConnect)";
# names quoted earlier in the message may contain the same shape, so the last match wins
_NATIVE_CODE_PAT = re.compile(r"\((\d{4})\)")
_SQLSTATE_PAT = re.compile(r"^[0-9A-Z]{5}$")


def split_host(host: str, default_port: int) -> Tuple[str, int]:
    """Split ``host[:port]`` into its parts; a bad port keeps the default."""
    name, sep, port = (host or "").rpartition(":")
    if sep and name and port.isdigit():
        return name, int(port)
    return host, default_port


def build_connect_kwargs(params: ConnectionParameters, settings: OpenerSettings) -> Dict[str, Any]:
    """Return the ODBC keyword set for a MySQL connection.

    Values are passed through as given; bad values surface as driver errors.
    """
    server, port = split_host(params.host, settings.port)
    return {
        "DRIVER": "{%s}" % settings.odbc_driver,
        "SERVER": server,
        "PORT": port,
        "DATABASE": params.database,
        "UID": params.user,
        "PWD": params.credential,
        "CHARSET": settings.charset,
    }


def build_conn_str(params: ConnectionParameters, settings: OpenerSettings) -> str:
    kwargs = build_connect_kwargs(params, settings)
    return ";".join(f"{key}={value}" for key, value in kwargs.items())


def extract_error_info(exc: BaseException) -> Tuple[str, Optional[int], Optional[str]]:
    """Pull (message, native code, sqlstate) out of a driver exception.

    pyodbc.Error args look like ("HY000", "[HY000] [MySQL][ODBC 8.0(w) Driver]... (1045) ...").
    Other drivers expose an ``errno`` attribute or an integer arg.
    """
    msg = str(exc) if exc else ""
    code: Optional[int] = None
    sqlstate: Optional[str] = None

    errno = getattr(exc, "errno", None)
    if isinstance(errno, int) and not isinstance(errno, bool):
        code = errno

    for arg in getattr(exc, "args", ()) or ():
        if isinstance(arg, bool):
            continue
        if isinstance(arg, int) and code is None:
            code = arg
        elif isinstance(arg, str):
            if sqlstate is None and _SQLSTATE_PAT.match(arg):
                sqlstate = arg
            elif code is None:
                found = _NATIVE_CODE_PAT.findall(arg)
                if found:
                    code = int(found[-1])
    return msg, code, sqlstate


def map_exception(exc: BaseException, code: Optional[int] = None, sqlstate: Optional[str] = None) -> str:
    """Map a low-level failure to a stable, actionable hint.

    Hints never echo driver text, so credentials cannot leak through them.
    """
    mlow = (str(exc) if exc else "").lower()

    if isinstance(exc, ImportError) or "data source name not found" in mlow or "can't open lib" in mlow:
        return "MySQL ODBC driver is not installed or not registered."

    if code == ER_ACCESS_DENIED or sqlstate == "28000" or "access denied" in mlow:
        return "Access denied. Verify the user name and password."

    if code == ER_BAD_DB or "unknown database" in mlow:
        return "Unknown database. Verify the database name."

    if code == CR_UNKNOWN_HOST or "unknown mysql server host" in mlow or "name or service not known" in mlow:
        return "Unknown host. Verify the server address."

    if (
        code in _UNREACHABLE_CODES
        or isinstance(exc, TimeoutError)
        or "timed out" in mlow
        or "timeout" in mlow
        or "can't connect" in mlow
    ):
        return (
            "Server unreachable or connection timed out. "
            "Verify host/port, network/VPN, and firewall settings."
        )

    # Generic fallback
    return "Verify host, database, and credentials."


__all__ = [
    "build_connect_kwargs",
    "build_conn_str",
    "extract_error_info",
    "map_exception",
    "split_host",
]
