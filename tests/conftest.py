"""In-memory stand-ins for the database, data source and scheduler."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Optional

import pytest

from sqlbus.broker import SqlBroker
from sqlbus.source import Ownership

# pylint: disable=missing-function-docstring,redefined-outer-name


class FakeStorageError(Exception):
    """Driver error raised by FakeConnection."""


class FakeDatabase:
    """
    One shared message table with a controllable clock.

    Understands the statements emitted by PostgresDialect and MySQLDialect by
    their leading keywords. Interval parameters may be timedelta (PostgreSQL)
    or whole seconds (MySQL).
    """

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, 0)
        self.rows: list[dict] = []
        self.next_id = 1
        self.ddl: list[str] = []
        self.fail_on: set[str] = set()
        self.reject_charset: Optional[str] = None
        # When set, INSERT waits for this event (insert_started is set first)
        self.insert_gate: Optional[asyncio.Event] = None
        self.insert_started = asyncio.Event()

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def add_row(self, channel: str, msg: Optional[str], age: float = 0) -> int:
        row_id = self.next_id
        self.next_id += 1
        self.rows.append(
            {
                "id": row_id,
                "time": self.now - timedelta(seconds=age),
                "channel": channel,
                "msg": msg,
            }
        )
        return row_id

    def _fail(self, kind: str) -> None:
        if kind in self.fail_on:
            raise FakeStorageError(f"{kind} failed")

    @staticmethod
    def _age(value) -> timedelta:
        return value if isinstance(value, timedelta) else timedelta(seconds=value)


class FakeConnection:
    """asyncpg-style connection over a FakeDatabase."""

    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.closed = False

    def is_closed(self) -> bool:
        return self.closed

    async def execute(self, query: str, *args):
        db = self.db
        head = query.lstrip().upper()
        if head.startswith("CREATE TABLE"):
            db._fail("create")
            if db.reject_charset and db.reject_charset in query:
                raise FakeStorageError(
                    f"Unknown character set: '{db.reject_charset}'"
                )
            db.ddl.append(query)
            return "CREATE TABLE"
        if head.startswith("INSERT"):
            if db.insert_gate is not None:
                db.insert_started.set()
                await db.insert_gate.wait()
            db._fail("insert")
            channel, msg = args
            db.add_row(channel, msg)
            return "INSERT 0 1"
        if head.startswith("DELETE"):
            db._fail("delete")
            limit = db._age(args[0])
            before = len(db.rows)
            db.rows = [r for r in db.rows if db.now - r["time"] <= limit]
            return f"DELETE {before - len(db.rows)}"
        raise AssertionError(f"unexpected statement: {query}")

    async def fetch(self, query: str, *args):
        db = self.db
        db._fail("select")
        after_id, window = args[0], db._age(args[1])
        rows = [
            dict(r)
            for r in db.rows
            if r["id"] > after_id and db.now - r["time"] < window
        ]
        return sorted(rows, key=lambda r: r["id"])

    async def fetchval(self, query: str, *args):
        db = self.db
        db._fail("max")
        assert "MAX" in query.upper()
        return max((r["id"] for r in db.rows), default=None)


class FakeSource:
    """
    DataSource handing out FakeConnections, counting acquire/release.
    Like PooledSource it reopens on the first connection after close().
    """

    ownership = Ownership.OWNED
    errors = (FakeStorageError,)

    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.running = True
        self.closed = False
        self.acquired = 0
        self.released = 0

    @property
    def closable(self) -> bool:
        return True

    @asynccontextmanager
    async def connection(self):
        self.closed = False
        self.acquired += 1
        try:
            yield FakeConnection(self.db)
        finally:
            self.released += 1

    def is_running(self) -> bool:
        return self.running and not self.closed

    async def close(self) -> None:
        self.closed = True


class ManualScheduler:
    """Records schedule()/cancel() calls; never runs anything by itself."""

    def __init__(self) -> None:
        self.scheduled: list[tuple] = []
        self.cancelled: list[int] = []

    def schedule(self, task, delay, period) -> int:
        self.scheduled.append((task, delay, period))
        return len(self.scheduled) - 1

    async def cancel(self, handle: int) -> None:
        self.cancelled.append(handle)


class Inbox:
    """on_message callback collecting (channel, data) pairs."""

    def __init__(self) -> None:
        self.received: list[tuple[str, bytes]] = []

    async def __call__(self, channel: str, data: bytes) -> None:
        self.received.append((channel, data))


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_broker(db):
    """Factory: a broker on its own FakeSource over the shared `db`."""

    def factory(*channels, scheduler=None, **kwargs):
        inbox = Inbox()
        broker = SqlBroker(
            FakeSource(db),
            scheduler=scheduler or ManualScheduler(),
            on_message=inbox,
            channels=channels,
            **kwargs,
        )
        return broker, inbox

    return factory
