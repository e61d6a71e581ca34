from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

import pytest

from dbconnect.core.config import OpenerSettings
from dbconnect.core.params import ConnectionParameters
from dbconnect.logging.config import HANDLER_NAME


class FakeDriverError(Exception):
    """Shaped like pyodbc.Error: args are (sqlstate, message)."""


@dataclass
class FakeConnection:
    params: ConnectionParameters
    closed: bool = False

    def close(self) -> None:
        self.closed = True


@dataclass
class RecordingConnect:
    """Connect primitive double that records every call."""

    outcome: Callable[[ConnectionParameters], Any]
    calls: list[ConnectionParameters] = field(default_factory=list)

    def __call__(self, params: ConnectionParameters) -> Any:
        self.calls.append(params)
        return self.outcome(params)


@pytest.fixture
def good_params() -> ConnectionParameters:
    return ConnectionParameters(host="10.10.60.165", user="root", credential="root", database="lab114")


@pytest.fixture
def bad_params() -> ConnectionParameters:
    return ConnectionParameters(
        host="localhost", user="wrong_user", credential="wrong_pass", database="wrong_db"
    )


@pytest.fixture
def settings() -> OpenerSettings:
    return OpenerSettings()


@pytest.fixture
def accepting_connect() -> RecordingConnect:
    return RecordingConnect(outcome=lambda params: FakeConnection(params))


@pytest.fixture
def access_denied_error() -> FakeDriverError:
    return FakeDriverError(
        "28000",
        "[28000] [MySQL][ODBC 8.0(w) Driver]Access denied for user 'wrong_user'@'localhost' "
        "(using password: YES) (1045) (SQLDriverConnect)",
    )


@pytest.fixture
def rejecting_connect(access_denied_error: FakeDriverError) -> RecordingConnect:
    def _raise(params: ConnectionParameters) -> Any:
        raise access_denied_error

    return RecordingConnect(outcome=_raise)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    for key in (
        "DBCONNECT_HOST",
        "DBCONNECT_USER",
        "DBCONNECT_PASSWORD",
        "DBCONNECT_DATABASE",
        "DBCONNECT_ODBC_DRIVER",
        "DBCONNECT_PORT",
        "DBCONNECT_CHARSET",
    ):
        monkeypatch.delenv(key, raising=False)
    yield monkeypatch


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    filters = list(root.filters)
    yield
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
    for flt in [f for f in root.filters if f not in filters]:
        root.removeFilter(flt)
    root.setLevel(level)
