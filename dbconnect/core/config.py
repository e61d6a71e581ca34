"""Opener configuration.

Settings come from ``DBCONNECT_*`` environment variables with defaults that
match a stock MySQL ODBC installation.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "DBCONNECT_"
DEFAULT_ODBC_DRIVER = "MySQL ODBC 8.0 Unicode Driver"
DEFAULT_PORT = 3306
DEFAULT_CHARSET = "utf8mb4"


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(env: Mapping[str, str], key: str, default: str) -> str:
    value = env.get(key)
    return value if value else default


@dataclass(frozen=True)
class OpenerSettings:
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    port: int = DEFAULT_PORT
    charset: str = DEFAULT_CHARSET

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "OpenerSettings":
        source = os.environ if env is None else env
        return cls(
            odbc_driver=_get_str(source, f"{ENV_PREFIX}ODBC_DRIVER", DEFAULT_ODBC_DRIVER),
            port=_get_int(source, f"{ENV_PREFIX}PORT", DEFAULT_PORT),
            charset=_get_str(source, f"{ENV_PREFIX}CHARSET", DEFAULT_CHARSET),
        )


__all__ = ["OpenerSettings", "ENV_PREFIX", "DEFAULT_ODBC_DRIVER", "DEFAULT_PORT", "DEFAULT_CHARSET"]
