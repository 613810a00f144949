# tests/conftest.py

import pymysql
import pymysql.converters
import pymysql.err
import pytest

from mysql_bridge.base_utils import QueryLog
from mysql_bridge.mysql_utils import MySQLDatabase


class FakeResult:
    """What the fake driver should report for one SQL string."""

    def __init__(self, rows=None, columns=None, rowcount=None, lastrowid=0):
        self.rows = rows
        self.columns = columns
        if rowcount is None:
            rowcount = len(rows) if rows is not None else 0
        self.rowcount = rowcount
        self.lastrowid = lastrowid


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self._rows = ()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        pass

    def execute(self, query, args=None):
        self.conn.executed.append((query, args))
        outcome = self.conn.script.get(query, FakeResult())
        if isinstance(outcome, Exception):
            raise outcome
        if outcome.columns is not None:
            self.description = tuple((c, None, None, None, None, None, None) for c in outcome.columns)
            self._rows = tuple(tuple(r) for r in (outcome.rows or []))
        else:
            self.description = None
            self._rows = ()
        self.rowcount = outcome.rowcount
        self.lastrowid = outcome.lastrowid
        return self.rowcount

    def fetchall(self):
        return self._rows


class FakeConnection:
    """Stands in for a pymysql Connection; `script` maps SQL to FakeResult or an exception."""

    def __init__(self):
        self.kwargs = {}
        self.script = {}
        self.executed = []
        self.open = True

    def cursor(self, cursor=None):
        if not self.open:
            raise pymysql.err.InterfaceError(0, "")
        return FakeCursor(self)

    def escape_string(self, s):
        return pymysql.converters.escape_string(s)

    def close(self):
        if not self.open:
            raise pymysql.err.Error("Already closed")
        self.open = False


@pytest.fixture
def fake_conn(monkeypatch):
    conn = FakeConnection()

    def fake_connect(**kwargs):
        conn.kwargs = kwargs
        conn.open = True
        return conn

    monkeypatch.setattr(pymysql, "connect", fake_connect)
    return conn


@pytest.fixture
def query_log():
    return QueryLog()


@pytest.fixture
def db(fake_conn, query_log):
    return MySQLDatabase("user", "pass", "test_db", query_log=query_log)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # Keep developer DB_* settings out of the tests
    for var in ("DB_NAME", "DB_USER", "DB_PASS", "DB_HOST", "DB_PORT", "MYSQL_BRIDGE_CONFIG"):
        monkeypatch.delenv(var, raising=False)
