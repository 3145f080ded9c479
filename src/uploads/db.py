# src/uploads/db.py
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple

import psycopg2
from psycopg2.pool import SimpleConnectionPool
from aws_lambda_powertools import Logger

from .config import SERVICE_NAME
from .errors import DatabaseUnavailable, DatabaseCloseError

logger = Logger(service=SERVICE_NAME, child=True)

CONNECT_TIMEOUT_SECONDS = 5


class UploadsDatabase:
    """Thin wrapper over a psycopg2 pool: one statement per borrowed connection."""

    def __init__(self, pool):
        self._pool = pool

    def execute(self, sql: str, params: Sequence) -> Tuple[int, Optional[int]]:
        conn = self._pool.getconn()
        try:
            # each statement commits on its own, nothing wider is needed
            conn.autocommit = True
            with conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                return cur.rowcount, cur.lastrowid
        finally:
            self._pool.putconn(conn)

    def fetch_one(self, sql: str, params: Sequence):
        conn = self._pool.getconn()
        try:
            conn.autocommit = True
            with conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                return cur.fetchone()
        finally:
            self._pool.putconn(conn)


def _connect_kwargs(statement_timeout_ms: Optional[int], connect_timeout: int) -> dict:
    kwargs = {"connect_timeout": connect_timeout}
    if statement_timeout_ms:
        kwargs["options"] = f"-c statement_timeout={int(statement_timeout_ms)}"
    return kwargs


@contextmanager
def open_gateway(
    dsn: str,
    statement_timeout_ms: Optional[int] = None,
    connect_timeout: int = CONNECT_TIMEOUT_SECONDS,
    pool_factory=SimpleConnectionPool,
) -> Iterator[UploadsDatabase]:
    """
    Open a pool against the metadata store for the lifetime of one invocation.
    The pool is closed on every exit path; a failed close is fatal.
    """
    try:
        pool = pool_factory(1, 1, dsn, **_connect_kwargs(statement_timeout_ms, connect_timeout))
    except psycopg2.Error as e:
        raise DatabaseUnavailable(f"Can't connect to the metadata database: {e}") from e

    try:
        yield UploadsDatabase(pool)
    finally:
        try:
            pool.closeall()
        except psycopg2.Error as e:
            raise DatabaseCloseError(f"Can't close the connection to the metadata database: {e}") from e
        logger.debug("Metadata database pool closed")
