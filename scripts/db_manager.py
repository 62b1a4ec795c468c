#!/usr/bin/env python3
"""
Database management utility script.

Usage:
    python scripts/db_manager.py init     # Initialize database
    python scripts/db_manager.py reset    # Drop and recreate tables (DEV ONLY!)
    python scripts/db_manager.py test     # Test connection
    python scripts/db_manager.py stats    # Show database statistics
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from src.data import (
    Room,
    RoomRepository,
    close_db,
    create_tables,
    drop_tables,
    get_engine,
    get_settings,
    init_db,
    session_scope,
)


async def init():
    """Initialize database connection and create tables."""
    print("🔧 Initializing database...")
    await init_db()
    print("✅ Database initialized")

    print("\n📋 Creating tables (using Alembic is recommended)...")
    await create_tables()
    print("✅ Tables created")

    await close_db()


async def reset():
    """Drop all tables and recreate them (DESTRUCTIVE!)."""
    print("⚠️  WARNING: This will DELETE ALL DATA!")
    response = input("Are you sure? Type 'yes' to continue: ")

    if response.lower() != "yes":
        print("❌ Aborted")
        return

    print("\n🗑️  Dropping all tables...")
    await init_db()
    await drop_tables()
    print("✅ Tables dropped")

    print("\n📋 Recreating tables...")
    await create_tables()
    print("✅ Tables created")

    await close_db()


async def test():
    """Test database connection."""
    print("🔍 Testing database connection...")

    try:
        await init_db()
        print(f"✅ Connected to database ({get_engine().dialect.name})")

        async with session_scope() as session:
            result = await session.execute(text("SELECT 1"))
            print(f"📊 Round trip: {result.scalar()}")

        await close_db()
        print("✅ Connection test successful")

    except (SQLAlchemyError, OSError) as e:
        print(f"❌ Connection failed: {e}")
        await close_db()
        sys.exit(1)


async def stats():
    """Show database statistics."""
    print("📊 Database Statistics\n")

    await init_db()

    async with session_scope() as session:
        repo = RoomRepository(session)
        for table, count in (await repo.get_table_counts()).items():
            print(f"   - {table}: {count}")

        result = await session.execute(
            select(Room.name, Room.invite_code, Room.status, Room.created_at)
            .order_by(Room.created_at.desc())
            .limit(5)
        )
        recent_rooms = result.fetchall()

        if recent_rooms:
            print("\n📅 Recent Rooms:")
            for name, code, status, created_at in recent_rooms:
                print(f"   - {name} [{code}]: {status} - {created_at:%Y-%m-%d %H:%M:%S}")

    await close_db()


async def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1].lower()

    commands = {
        "init": init,
        "reset": reset,
        "test": test,
        "stats": stats,
    }

    if command not in commands:
        print(f"❌ Unknown command: {command}")
        print(__doc__)
        sys.exit(1)

    await commands[command]()


if __name__ == "__main__":
    logging.basicConfig(level=get_settings().log_level)
    asyncio.run(main())
