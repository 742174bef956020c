"""
Shared fixtures: in‑memory stand‑ins for the database.
"""
from __future__ import annotations

from contextlib import contextmanager

import pytest

from sqlbatch.log import reset_logger


class FakeExecutor:
    """Records every statement; fails on the statements listed in *fail_on*."""

    def __init__(self, rowcounts=None, fail_on=()) -> None:
        self.rowcounts = dict(rowcounts or {})
        self.fail_on = set(fail_on)
        self.executed: list[str] = []

    def execute(self, sql: str) -> int:
        self.executed.append(sql)
        if sql in self.fail_on:
            raise RuntimeError(f"boom: {sql}")
        return self.rowcounts.get(sql, 0)


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self.rowcount = -1
        self.description = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql: str) -> None:
        self.conn.executed.append(sql)
        if sql in self.conn.fail_on:
            raise RuntimeError(f"ORA-00942: table or view does not exist: {sql}")
        self.description = (("COL",),) if sql.upper().startswith("SELECT") else None
        self.rowcount = self.conn.rowcounts.get(sql, 0)

    def fetchall(self):
        return []


class FakeConnection:
    def __init__(self, rowcounts=None, fail_on=()) -> None:
        self.rowcounts = dict(rowcounts or {})
        self.fail_on = set(fail_on)
        self.executed: list[str] = []
        self.closed = False

    def cursor(self, buffered: bool = False) -> FakeCursor:
        return FakeCursor(self)


@pytest.fixture
def fake_conn(monkeypatch) -> FakeConnection:
    """Patch the runner's connection factory to hand out one FakeConnection."""
    conn = FakeConnection()

    @contextmanager
    def _connection(env):
        try:
            yield conn
        finally:
            conn.closed = True

    monkeypatch.setattr("sqlbatch.script.runner.connection", _connection)
    return conn


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logger()


@pytest.fixture
def config_file(tmp_path):
    """Write a minimal settings YAML and return its path."""
    path = tmp_path / "sqlbatch.config.yml"
    path.write_text(
        "default_env: dev\n"
        "environments:\n"
        "  dev:\n"
        "    host: db.local\n"
        "    port: 3307\n"
        "    database: app\n"
        "    user: app\n"
        "    password: secret\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_executor():
    return FakeExecutor
