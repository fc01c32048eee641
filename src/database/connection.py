"""
SQLite connection setup and schema management
"""

import os
import logging
import aiosqlite
from fastapi import Request

logger = logging.getLogger(__name__)

TIMESTAMP_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

SCHEMA = f"""
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS suggestions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    suggestion TEXT NOT NULL,
    created_at DATETIME DEFAULT ({TIMESTAMP_SQL}),
    updated_at DATETIME DEFAULT ({TIMESTAMP_SQL})
);

CREATE INDEX IF NOT EXISTS idx_suggestions_created_at ON suggestions (created_at DESC);
"""


class DatabaseInitializationError(RuntimeError):
    """Raised when the store cannot be opened or its schema cannot be applied"""


async def init_database(db_path: str) -> aiosqlite.Connection:
    """
    Open (creating if absent) the SQLite file at db_path and apply the schema.

    Every statement in SCHEMA is safe to re-run, so this is called on each
    process start. The returned connection is in autocommit mode and yields
    rows as aiosqlite.Row.
    """
    directory = os.path.dirname(db_path)
    if directory:
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        except OSError as e:
            logger.critical(f"Cannot create database directory {directory}: {e}")
            raise DatabaseInitializationError(f"init db ({db_path}): {e}") from e

    try:
        conn = await aiosqlite.connect(db_path, isolation_level=None)
    except (aiosqlite.Error, OSError) as e:
        logger.critical(f"Cannot open database {db_path}: {e}")
        raise DatabaseInitializationError(f"init db ({db_path}): {e}") from e

    try:
        conn.row_factory = aiosqlite.Row
        await conn.executescript(SCHEMA)
    except aiosqlite.Error as e:
        await conn.close()
        logger.critical(f"Cannot apply schema to {db_path}: {e}")
        raise DatabaseInitializationError(f"init db ({db_path}): {e}") from e

    logger.info(f"Database initialized successfully at {db_path}")
    return conn


async def close_database(conn: aiosqlite.Connection) -> None:
    """Close the database connection"""
    if conn is not None:
        await conn.close()
    logger.info("Database connection closed")


async def get_db_connection(request: Request) -> aiosqlite.Connection:
    """FastAPI dependency returning the process-wide connection opened at startup"""
    return request.app.state.db
