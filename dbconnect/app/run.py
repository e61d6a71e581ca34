from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional, Sequence, TextIO

from dbconnect.core.errors import CredentialStoreError
from dbconnect.core.params import ConnectionParameters
from dbconnect.logging.config import configure_logging
from dbconnect.services import credential_store
from dbconnect.services.connection_opener import ConnectionOpener, ConnectPrimitive

CLOSE_FAILED_MESSAGE = "Connection opened but could not be closed cleanly"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dbconnect-check",
        description="Open one MySQL connection and report whether it succeeded.",
    )
    parser.add_argument("--host", help="Server address, optionally host:port (env DBCONNECT_HOST)")
    parser.add_argument("--user", help="User name (env DBCONNECT_USER)")
    parser.add_argument("--database", help="Database name (env DBCONNECT_DATABASE)")
    secret = parser.add_mutually_exclusive_group()
    secret.add_argument("--password", help="Password (env DBCONNECT_PASSWORD)")
    secret.add_argument(
        "--password-from-keyring",
        action="store_true",
        help="Read the password from the OS keyring entry for user@host",
    )
    keyring_action = parser.add_mutually_exclusive_group()
    keyring_action.add_argument(
        "--remember-password",
        action="store_true",
        help="After a successful connection, save the password in the OS keyring",
    )
    keyring_action.add_argument(
        "--forget-password",
        action="store_true",
        help="Remove the keyring entry for user@host and exit without connecting",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def resolve_parameters(args: argparse.Namespace) -> ConnectionParameters:
    """Merge command-line values over DBCONNECT_* environment defaults."""
    env = ConnectionParameters.from_env()
    host = args.host or env.host
    user = args.user or env.user
    credential = args.password or env.credential
    if args.password_from_keyring:
        credential = credential_store.get_password(host, user) or ""
    return ConnectionParameters(
        host=host,
        user=user,
        credential=credential,
        database=args.database or env.database,
    )


def _close(handle: Any) -> bool:
    close = getattr(handle, "close", None)
    if not callable(close):
        return True
    try:
        close()
    except Exception as exc:
        logger.debug("Closing the connection failed", extra={"cause_type": type(exc).__name__})
        return False
    return True


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    connect: Optional[ConnectPrimitive] = None,
    out: Optional[TextIO] = None,
) -> int:
    stream = out or sys.stdout
    args = build_parser().parse_args(argv)
    configure_logging(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        stream=sys.stderr,
    )

    try:
        params = resolve_parameters(args)
        if args.forget_password:
            credential_store.clear_password(params.host, params.user)
            print("Stored password cleared.", file=stream)
            return 0
    except CredentialStoreError as exc:
        print(f"{exc.title}: {exc}", file=stream)
        return 2

    result = ConnectionOpener(connect).open(params)
    if not result.ok:
        print(f"New message: {result.error.message}", file=stream)
        return 1

    print("Connection successful!", file=stream)
    closed = _close(result.handle)

    if args.remember_password:
        try:
            credential_store.store_password(params.host, params.user, params.credential)
        except CredentialStoreError as exc:
            print(f"{exc.title}: {exc}", file=stream)
            return 2

    if not closed:
        print(f"New message: {CLOSE_FAILED_MESSAGE}", file=stream)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
