# tests/conftest.py
import pytest
import psycopg2
import psycopg2.extensions

from uploads.config import Config
from uploads.status import SELECT_STATUS_SQL, UPDATE_STATUS_SQL

BUCKET = "uploads"


class FakeCursor:
    def __init__(self, store):
        self.store = store
        self.rowcount = -1
        self.lastrowid = None
        self._row = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params):
        # bind values the way the driver does, so unbindable input fails here
        for p in params:
            psycopg2.extensions.adapt(p).getquoted()
        self.store.statements.append((sql, params))
        if params in self.store.fail_on:
            raise psycopg2.OperationalError("server closed the connection unexpectedly")
        if sql == UPDATE_STATUS_SQL:
            matched = [k for k in self.store.rows if k == params]
            for k in matched:
                self.store.rows[k] = 2
            self.rowcount = len(matched) if self.store.rowcount is None else self.store.rowcount
        elif sql == SELECT_STATUS_SQL:
            status = self.store.rows.get(params)
            self._row = (status,) if status is not None else None
            self.rowcount = 1 if self._row else 0
        else:
            raise AssertionError(f"unexpected statement: {sql}")

    def fetchone(self):
        return self._row


class FakeConnection:
    def __init__(self, store):
        self.store = store
        self.autocommit = False

    def cursor(self):
        assert self.autocommit, "statements must run in autocommit mode"
        return FakeCursor(self.store)


class FakeStore:
    """In-memory UploadRequests: (user_id, object_key) -> status_id."""

    def __init__(self):
        self.rows = {}
        self.statements = []
        self.fail_on = set()
        self.rowcount = None  # force a driver-reported rowcount when set
        self.pools = []

    def updates(self):
        return [params for sql, params in self.statements if sql == UPDATE_STATUS_SQL]


class FakePool:
    def __init__(self, store, minconn, maxconn, dsn, **kwargs):
        self.store = store
        self.dsn = dsn
        self.kwargs = kwargs
        self.closed = False
        self.close_error = None
        self.borrowed = 0

    def getconn(self):
        assert not self.closed
        self.borrowed += 1
        return FakeConnection(self.store)

    def putconn(self, conn):
        self.borrowed -= 1

    def closeall(self):
        self.closed = True
        if self.close_error:
            raise self.close_error


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def pool_factory(store):
    def factory(minconn, maxconn, dsn, **kwargs):
        pool = FakePool(store, minconn, maxconn, dsn, **kwargs)
        store.pools.append(pool)
        return pool
    return factory


@pytest.fixture
def config():
    return Config(
        database_connection_string="host=db.internal dbname=uploads user=lambda",
        file_uploads_bucket_name=BUCKET,
    )


def s3_record(key, bucket=BUCKET, event_name="ObjectCreated:Put"):
    return {
        "eventVersion": "2.1",
        "eventSource": "aws:s3",
        "awsRegion": "us-east-1",
        "eventName": event_name,
        "s3": {
            "s3SchemaVersion": "1.0",
            "bucket": {"name": bucket, "arn": f"arn:aws:s3:::{bucket}"},
            "object": {"key": key, "size": 1024},
        },
    }


def s3_event(*records):
    return {"Records": list(records)}
