from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from dbconnect.core.config import ENV_PREFIX


@dataclass(frozen=True)
class ConnectionParameters:
    """Where and as whom to connect. Contents are passed through unvalidated."""

    host: str
    user: str
    credential: str = field(repr=False)
    database: str

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "ConnectionParameters":
        """Build parameters from a descriptor dict.

        Accepts ``server``/``username``/``password`` as aliases so descriptors
        shaped for other tools can be reused.
        """
        return cls(
            host=str(descriptor.get("host") or descriptor.get("server") or ""),
            user=str(descriptor.get("user") or descriptor.get("username") or ""),
            credential=str(descriptor.get("credential") or descriptor.get("password") or ""),
            database=str(descriptor.get("database") or ""),
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ConnectionParameters":
        source = os.environ if env is None else env
        return cls(
            host=source.get(f"{ENV_PREFIX}HOST", ""),
            user=source.get(f"{ENV_PREFIX}USER", ""),
            credential=source.get(f"{ENV_PREFIX}PASSWORD", ""),
            database=source.get(f"{ENV_PREFIX}DATABASE", ""),
        )

    def safe_descriptor(self) -> dict[str, str]:
        """Loggable view of the parameters (no credential)."""
        return {"host": self.host, "user": self.user, "database": self.database}


__all__ = ["ConnectionParameters"]
