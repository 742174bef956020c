from __future__ import annotations
import logging
import typing as t
from contextlib import contextmanager

import mysql.connector
import oracledb

from sqlbatch.config import Environment

logger = logging.getLogger(__name__)


class ConnectionFailure(RuntimeError):
    """The database could not be reached with the configured credentials."""


class Executor(t.Protocol):
    def execute(self, sql: str) -> int:
        """Run *sql* and return the affected‑row count."""


class CursorExecutor:
    """Adapts a DB‑API cursor (mysql‑connector or oracledb) to :class:`Executor`."""

    def __init__(self, cursor) -> None:
        self.cursor = cursor

    def execute(self, sql: str) -> int:
        self.cursor.execute(sql)
        # Queries affect no rows; drain them so the cursor can be reused
        if self.cursor.description is not None:
            self.cursor.fetchall()
            return 0
        return max(self.cursor.rowcount or 0, 0)


def _connect_mysql(env: Environment):
    return mysql.connector.connect(**env.dsn(), autocommit=True)


def _connect_oracle(env: Environment):
    conn = oracledb.connect(
        user=env.user,
        password=env.password,
        dsn=f"{env.host}:{env.port}/{env.database}",
    )
    conn.autocommit = True
    return conn


_CONNECTORS = {
    "mysql": _connect_mysql,
    "oracle": _connect_oracle,
}


@contextmanager
def connection(env: Environment):
    """
    Context‑manager that yields a connection to the target database.

    The connection runs in autocommit mode: each statement is committed as
    soon as it succeeds and nothing is rolled back if a later one fails.
    """
    logger.info("try connecting to the %s database %s", env.driver, env.describe())
    try:
        conn = _CONNECTORS[env.driver](env)
    except (mysql.connector.Error, oracledb.Error) as err:
        logger.error("%s", err)
        raise ConnectionFailure(f"Could not connect to {env.describe()}: {err}") from err
    logger.info("Success connecting to the database")

    try:
        yield conn
    finally:
        conn.close()


def cursor(conn, env: Environment):
    """Open a cursor suited to *env*'s driver."""
    if env.driver == "mysql":
        return conn.cursor(buffered=True)
    return conn.cursor()
