import sys
import os
sys.path.append(os.getcwd())
import asyncio

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from school_directory.database import dispose_engine, engine
from school_directory.services.school_gateway import SchoolGateway, StorageError


async def initialize_database() -> int:
    print("Initializing database...")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        print("Database connection successful")

        await SchoolGateway(engine).ensure_table()
        print("Database tables created successfully")
    except (StorageError, SQLAlchemyError, OSError) as exc:
        print(f"Database initialization failed: {exc}")
        return 1
    finally:
        await dispose_engine()

    print("Database initialization complete!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(initialize_database()))
