import os
import sys
import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

# Ensure env is set before anything imports pulse.config
_DB_DIR = tempfile.mkdtemp(prefix="pulse-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["APP_DEBUG"] = "true"
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from pulse.realtime import Channel, RealtimeNotifier
from pulse.store import ACTIVITIES, FEEDBACK, StoreError


@pytest.fixture(scope="session")
def app():
    from pulse.main import app as litestar_app
    return litestar_app


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


# --- View fakes ---

class InMemoryDataService:
    """DataService keeping rows in lists, with switchable failures."""

    def __init__(self, notifier: Optional[RealtimeNotifier] = None):
        self.notifier = notifier or RealtimeNotifier()
        self.tables: Dict[str, List[Dict[str, Any]]] = {ACTIVITIES: [], FEEDBACK: []}
        self.writes: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_reads = False
        self.fail_writes = False

    def add(self, table: str, **values) -> Dict[str, Any]:
        """Seed a row without publishing it."""
        row = self._make_row(values)
        self.tables[table].append(row)
        return row

    def _make_row(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
        for key, value in values.items():
            if isinstance(value, (datetime, uuid.UUID)):
                value = value.isoformat() if isinstance(value, datetime) else str(value)
            row[key] = value
        return row

    async def select(self, table, filters=None, descending=True):
        if self.fail_reads:
            raise StoreError(f"read from {table} refused")
        rows = [
            dict(row) for row in self.tables[table]
            if all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())
        ]
        return list(reversed(rows)) if descending else rows

    async def select_single(self, table, filters):
        rows = await self.select(table, filters)
        if len(rows) != 1:
            raise StoreError(f"expected one row, got {len(rows)}")
        return rows[0]

    async def insert(self, table, values):
        if self.fail_writes:
            raise StoreError(f"write to {table} refused")
        row = self._make_row(values)
        self.tables[table].append(row)
        self.writes.append((table, row))
        await self.notifier.publish_insert(table, dict(row))
        return dict(row)

    def channel(self, name: str) -> Channel:
        return self.notifier.channel(name)


class FakeClock:
    """Wall clock the test moves by hand."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMsClock:
    """Millisecond clock for toast expiry."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture()
def service() -> InMemoryDataService:
    return InMemoryDataService()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def ms_clock() -> FakeMsClock:
    return FakeMsClock()
