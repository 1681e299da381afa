from __future__ import annotations

from datetime import time, timedelta
from pathlib import Path

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.qr_attendance.qr_attendance.core.exceptions import DuplicateError, TransientIOError
from src.qr_attendance.qr_attendance.database.bootstrap import iter_sql_statements
from src.qr_attendance.qr_attendance.database.mysql_base import db_cursor, normalize_mysql_time


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self.conn = conn
        self.error = error

    def connect(self):
        if self.error is not None:
            raise self.error
        return self.conn


def test_commit_on_success():
    conn = FakeConn()
    with db_cursor(FakeFactory(conn)) as (c, cur):
        assert cur is conn.cursor_obj

    assert conn.committed and conn.closed and conn.cursor_obj.closed
    assert not conn.rolled_back


def test_duplicate_key_becomes_duplicate_error():
    conn = FakeConn()
    with pytest.raises(DuplicateError):
        with db_cursor(FakeFactory(conn)):
            raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    assert conn.rolled_back and conn.closed and not conn.committed


def test_other_driver_errors_are_transient():
    conn = FakeConn()
    with pytest.raises(TransientIOError):
        with db_cursor(FakeFactory(conn)):
            raise mysql.connector.OperationalError(msg="Lost connection", errno=2013)
    assert conn.rolled_back


def test_connect_failure_is_transient():
    with pytest.raises(TransientIOError):
        with db_cursor(FakeFactory(error=mysql.connector.InterfaceError(msg="refused", errno=2003))):
            pass


def test_non_driver_errors_pass_through():
    conn = FakeConn()
    with pytest.raises(KeyError):
        with db_cursor(FakeFactory(conn)):
            raise KeyError("x")
    assert conn.rolled_back and conn.closed


def test_iter_sql_statements_skips_comments_and_quoted_semicolons():
    sql = """
    -- students
    CREATE TABLE a (x INT); -- trailing
    INSERT INTO a VALUES ('x;y');
    """
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES ('x;y')"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (time(9, 30), time(9, 30)),
        (timedelta(hours=14, minutes=5), time(14, 5)),
        ("08:30:00", time(8, 30)),
        ("08:30", time(8, 30)),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_schema_keeps_fractional_seconds():
    schema = (Path(__file__).resolve().parents[2] / "database" / "schema.sql").read_text(encoding="utf-8")
    columns = {}
    for stmt in iter_sql_statements(schema):
        for line in stmt.splitlines():
            parts = line.split()
            if len(parts) >= 2:
                columns[parts[0]] = parts[1]

    for name in ("token_issued_at", "token_expires_at", "recorded_at"):
        assert columns[name] == "DATETIME(6)"
