"""Tests for deploy/init_db.py schema bootstrap."""

import sys
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from deploy.init_db import init_db


@pytest.mark.asyncio
async def test_init_db_creates_tables(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path}/schema.db"

    await init_db(url)

    engine = create_async_engine(url)
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        feedback_columns = await conn.run_sync(
            lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns("feedback")}
        )
    await engine.dispose()

    assert {"activities", "feedback"} <= set(tables)
    assert {"id", "activity_id", "emotion_type", "created_at"} <= feedback_columns


@pytest.mark.asyncio
async def test_init_db_is_idempotent(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path}/schema.db"
    await init_db(url)
    await init_db(url)


@pytest.mark.asyncio
async def test_feedback_links_to_activities_by_foreign_key_only(tmp_path):
    from pulse.models import Activity, FeedbackEvent

    url = f"sqlite+aiosqlite:///{tmp_path}/schema.db"
    await init_db(url)

    engine = create_async_engine(url)
    async with engine.connect() as conn:
        foreign_keys = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_foreign_keys("feedback")
        )
    await engine.dispose()

    assert [(fk["referred_table"], fk["constrained_columns"]) for fk in foreign_keys] == [
        ("activities", ["activity_id"])
    ]
    # Rows are only reached through the store, never through ORM navigation
    assert not inspect(Activity).relationships
    assert not inspect(FeedbackEvent).relationships
