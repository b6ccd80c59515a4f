"""Create the Jobly tables by applying db/migrations/*.sql in order.

Statements use IF NOT EXISTS, so re-running the script is safe.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "db" / "migrations"


def _extract_statements(sql: str) -> list[str]:
    """Split SQL on ';' and drop comment-only chunks."""
    statements = []
    for chunk in sql.split(";"):
        sql_lines = [line for line in chunk.splitlines() if not line.strip().startswith("--")]
        stmt = "\n".join(sql_lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


async def setup() -> None:
    """Apply every migration file, each in its own transaction."""
    from sqlalchemy import text
    from sqlalchemy.ext.asyncio import create_async_engine

    from jobly.core.config import to_asyncpg_url

    database_url = os.environ.get("DATABASE_URL_APP")
    if not database_url:
        logger.error("DATABASE_URL_APP not set")
        sys.exit(1)

    engine = create_async_engine(to_asyncpg_url(database_url))

    for migration_file in sorted(MIGRATIONS_DIR.glob("*.sql")):
        logger.info(f"Running migration: {migration_file.name}")
        async with engine.begin() as conn:
            for statement in _extract_statements(migration_file.read_text()):
                await conn.execute(text(statement))

    await engine.dispose()
    logger.info("Database setup complete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(setup())
