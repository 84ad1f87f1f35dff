"""Database connectivity check: prints the server time, exit code 1 on failure."""

import asyncio
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from src.adapter.database import create_engine_from_config


async def check_db(config) -> int:
    engine = create_engine_from_config(config)
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT CURRENT_TIMESTAMP AS now"))
            print(f"DB ok: {result.scalar()}")
        return 0
    except (SQLAlchemyError, OSError) as exc:
        print(f"DB error: {exc}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(check_db(ApplicationConfig)))
