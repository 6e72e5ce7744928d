"""
Tests for store_errors(), the persistence error translation.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import pytest
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)

from meterhub.db.errors import store_errors
from meterhub.exceptions import StoreError, StoreUnavailable


def test_operational_error_is_unavailable() -> None:
    with pytest.raises(StoreUnavailable):
        with store_errors("test"):
            raise OperationalError("SELECT 1", {}, Exception("server closed"))


def test_os_error_is_unavailable() -> None:
    with pytest.raises(StoreUnavailable):
        with store_errors("test"):
            raise ConnectionRefusedError()


def test_invalidated_connection_is_unavailable() -> None:
    exc = DBAPIError("SELECT 1", {}, Exception("gone"), connection_invalidated=True)
    with pytest.raises(StoreUnavailable):
        with store_errors("test"):
            raise exc


@pytest.mark.parametrize(
    "exc",
    [
        IntegrityError("INSERT", {}, Exception("not-null violation")),
        ProgrammingError("SELECT", {}, Exception("syntax")),
        DBAPIError("INSERT", {}, Exception("invalid input for query argument")),
        InterfaceError("INSERT", {}, Exception("invalid input for query argument $4")),
    ],
)
def test_rejected_statement_is_store_error(exc: Exception) -> None:
    with pytest.raises(StoreError) as exc_info:
        with store_errors("test"):
            raise exc
    assert not isinstance(exc_info.value, StoreUnavailable)
    assert exc_info.value.__cause__ is exc
    assert exc_info.value.message == "Database error"


def test_other_exceptions_pass_through() -> None:
    with pytest.raises(KeyError):
        with store_errors("test"):
            raise KeyError("meter_id")


def test_no_error_no_effect() -> None:
    with store_errors("test"):
        value = 1
    assert value == 1
