"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from storyloom.logging import get_logger

logger = get_logger('database')

SCHEMA_PATH = Path(__file__).parent / "init_db.sql"


async def init_db(db_path: str) -> None:
    """
    Initialize database with schema.

    :param db_path: Path of the SQLite database file
    :type db_path: str
    :return: None
    :rtype: None
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        with open(SCHEMA_PATH) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {db_path}")
