#!/usr/bin/env python3
"""
Initialize database schema for production.
Run this once after setting up PostgreSQL.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pulse.config import DATABASE_URL
from pulse.database import create_tables, make_engine


async def init_db(database_url: str = DATABASE_URL) -> None:
    """Create all tables."""
    engine = make_engine(database_url, echo=True)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()
    
    print("Database schema initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
