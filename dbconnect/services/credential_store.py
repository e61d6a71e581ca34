"""
Credential storage for database passwords.

Passwords live in the OS keyring (Windows Credential Locker / macOS Keychain /
Linux Secret Service) keyed by ``user@host``, so callers can build
``ConnectionParameters`` without keeping secrets in config files.
"""
from __future__ import annotations

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from dbconnect.core.errors import CredentialStoreError

SERVICE_NAME = "dbconnect"

logger = logging.getLogger(__name__)


def _account(host: str, user: str) -> str:
    return f"{user}@{host}"


def store_password(host: str, user: str, password: str) -> None:
    """Store the password for ``user`` on ``host``; empty passwords are ignored."""
    if not password:
        return
    try:
        keyring.set_password(SERVICE_NAME, _account(host, user), password)
    except KeyringError as exc:
        raise CredentialStoreError(
            f"Failed to store password securely: {exc}",
            title="Credential store unavailable",
            remediation="Check that an OS keyring backend is installed and unlocked.",
        ) from exc


def get_password(host: str, user: str) -> Optional[str]:
    """Return the stored password, or None if nothing is stored."""
    try:
        return keyring.get_password(SERVICE_NAME, _account(host, user))
    except KeyringError as exc:
        raise CredentialStoreError(
            f"Failed to retrieve password securely: {exc}",
            title="Credential store unavailable",
            remediation="Check that an OS keyring backend is installed and unlocked.",
        ) from exc


def clear_password(host: str, user: str) -> None:
    try:
        keyring.delete_password(SERVICE_NAME, _account(host, user))
    except PasswordDeleteError:
        logger.debug("No stored password to clear", extra={"host": host, "user": user})
    except KeyringError as exc:
        raise CredentialStoreError(
            f"Failed to clear stored password: {exc}",
            title="Credential store unavailable",
        ) from exc


__all__ = ["SERVICE_NAME", "store_password", "get_password", "clear_password"]
