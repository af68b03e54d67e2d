import itertools
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from notice_board.db import make_engine
from notice_board.stores import MemoryNoticeStore, SqlNoticeStore, SupabaseNoticeStore

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start=BASE_TIME, step=timedelta(seconds=1)):
        self._start = start
        self._step = step
        self._calls = itertools.count()

    def __call__(self):
        return self._start + self._step * next(self._calls)


class FakeQuery:
    def __init__(self, table, action, payload=None):
        self.table = table
        self.action = action
        self.payload = payload
        self.order_by = None

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def execute(self):
        client = self.table.client
        client.calls.append((self.action, self.table.name, self.payload, self.order_by))
        if client.error is not None:
            raise client.error
        if self.action == "insert":
            return SimpleNamespace(data=client.insert_row(self.payload))
        rows = [dict(r) for r in client.rows]
        if self.order_by is not None:
            column, desc = self.order_by
            rows.sort(key=lambda r: r[column], reverse=desc)
        return SimpleNamespace(data=rows)


class FakeTable:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def insert(self, payload):
        return FakeQuery(self, "insert", payload)

    def select(self, columns="*"):
        return FakeQuery(self, "select", columns)


class FakeSupabaseClient:
    """Minimal stand-in for a PostgREST table client: the database assigns id and criado_em."""

    def __init__(self, clock=None):
        self.clock = clock or TickingClock()
        self.rows = []
        self.calls = []
        self.error = None
        self.return_empty_insert = False
        self._ids = itertools.count(1)

    def table(self, name):
        return FakeTable(self, name)

    def insert_row(self, payload):
        if self.return_empty_insert:
            return []
        row = dict(payload, id=next(self._ids), criado_em=self.clock().isoformat())
        self.rows.append(row)
        return [dict(row)]


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def memory_store(clock):
    return MemoryNoticeStore(clock=clock)


@pytest.fixture
def sql_store(clock):
    store = SqlNoticeStore(engine=make_engine("sqlite://"), clock=clock)
    yield store
    store.close()


@pytest.fixture
def fake_supabase(clock):
    return FakeSupabaseClient(clock=clock)


@pytest.fixture
def supabase_store(fake_supabase):
    return SupabaseNoticeStore(client=fake_supabase)


@pytest.fixture(params=["memory", "sql", "supabase"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")
