"""SQLAlchemy-backed table store that publishes inserts to the notifier."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import DateTime, Enum, Uuid, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pulse.models import Activity, Base, FeedbackEvent
from pulse.realtime.notifier import Channel, RealtimeNotifier, notifier as default_notifier
from pulse.store.interface import ACTIVITIES, FEEDBACK, Row, StoreError
from pulse.utils.logging import debug_log, error_log

TABLES: Dict[str, Type[Base]] = {
    ACTIVITIES: Activity,
    FEEDBACK: FeedbackEvent,
}


def _model_for(table: str) -> Type[Base]:
    try:
        return TABLES[table]
    except KeyError:
        raise StoreError(f"Unknown table '{table}'") from None


def _coerce(model: Type[Base], key: str, value: Any) -> Any:
    """Convert a JSON-ish value to what the column expects."""
    column = model.__table__.columns.get(key)
    if column is None:
        raise StoreError(f"Unknown column '{key}' on table '{model.__tablename__}'")
    
    try:
        if isinstance(column.type, Uuid) and not isinstance(value, uuid.UUID):
            return uuid.UUID(str(value))
        if isinstance(column.type, DateTime):
            if isinstance(value, str):
                value = datetime.fromisoformat(value)
            # SQLite drops offsets, so everything is stored as UTC
            if isinstance(value, datetime) and value.tzinfo is not None:
                return value.astimezone(timezone.utc)
            return value
        if isinstance(column.type, Enum) and column.type.enum_class is not None:
            return column.type.enum_class(value)
    except ValueError as e:
        raise StoreError(f"Invalid value for {model.__tablename__}.{key}: {value!r}") from e
    return value


async def fetch_rows(
    session: AsyncSession,
    table: str,
    filters: Optional[Dict[str, Any]] = None,
    descending: bool = True,
) -> List[Row]:
    """Select rows matching every equality filter, ordered by created_at."""
    model = _model_for(table)
    stmt = select(model)
    for key, value in (filters or {}).items():
        value = _coerce(model, key, value)
        stmt = stmt.where(model.__table__.columns[key] == value)
    order = model.created_at.desc() if descending else model.created_at.asc()
    
    result = await session.execute(stmt.order_by(order))
    return [obj.to_row() for obj in result.scalars().all()]


async def insert_row(
    session: AsyncSession,
    table: str,
    values: Dict[str, Any],
    notifier: RealtimeNotifier = default_notifier,
) -> Row:
    """Insert one row, commit, then publish it as an INSERT event."""
    model = _model_for(table)
    obj = model(**{key: _coerce(model, key, value) for key, value in values.items()})
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    
    row = obj.to_row()
    debug_log("Inserted into %s: %s", table, row["id"])
    await notifier.publish_insert(table, row)
    return row


class SQLDataService:
    """
    DataService over an async session factory.
    
    Each call opens its own session. Database errors are reported as
    StoreError so views handle every store failure the same way.
    """
    
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        notifier: RealtimeNotifier = default_notifier,
    ):
        self._session_maker = session_maker
        self._notifier = notifier
    
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        descending: bool = True,
    ) -> List[Row]:
        try:
            async with self._session_maker() as session:
                return await fetch_rows(session, table, filters, descending)
        except SQLAlchemyError as e:
            error_log("Select failed", exc=e, context={"table": table, "filters": filters})
            raise StoreError(f"Could not read from '{table}'") from e
    
    async def select_single(self, table: str, filters: Dict[str, Any]) -> Row:
        rows = await self.select(table, filters)
        if len(rows) != 1:
            raise StoreError(f"Expected a single row from '{table}', got {len(rows)}")
        return rows[0]
    
    async def insert(self, table: str, values: Dict[str, Any]) -> Row:
        try:
            async with self._session_maker() as session:
                return await insert_row(session, table, values, self._notifier)
        except SQLAlchemyError as e:
            error_log("Insert failed", exc=e, context={"table": table})
            raise StoreError(f"Could not write to '{table}'") from e
    
    def channel(self, name: str) -> Channel:
        return self._notifier.channel(name)
