"""
Tests for SQLite initialization and schema management.
"""

import os
from pathlib import Path

import pytest

from database.connection import DatabaseInitializationError, init_database, close_database


async def _schema_objects(conn) -> list:
    async with conn.execute(
        "SELECT type, name FROM sqlite_master WHERE name NOT LIKE 'sqlite_%' ORDER BY type, name"
    ) as cursor:
        return [tuple(row) for row in await cursor.fetchall()]


class TestInitDatabase:
    """Tests for init_database."""

    @pytest.mark.asyncio
    async def test_creates_parent_directory_and_file(self, db_path: str):
        """The data directory does not exist yet and must be created."""
        assert not os.path.exists(os.path.dirname(db_path))

        conn = await init_database(db_path)
        await close_database(conn)

        assert os.path.isfile(db_path)

    @pytest.mark.asyncio
    async def test_applies_table_and_index(self, db_conn):
        objects = await _schema_objects(db_conn)
        assert objects == [
            ("index", "idx_suggestions_created_at"),
            ("table", "suggestions"),
        ]

    @pytest.mark.asyncio
    async def test_initialization_is_idempotent(self, db_path: str):
        """Initializing the same file twice neither fails nor duplicates schema objects."""
        first = await init_database(db_path)
        await first.execute("INSERT INTO suggestions (name, suggestion) VALUES ('a', 'b')")
        await close_database(first)

        second = await init_database(db_path)
        objects = await _schema_objects(second)
        async with second.execute("SELECT COUNT(*) FROM suggestions") as cursor:
            (count,) = await cursor.fetchone()
        await close_database(second)

        assert objects == [
            ("index", "idx_suggestions_created_at"),
            ("table", "suggestions"),
        ]
        assert count == 1

    @pytest.mark.asyncio
    async def test_store_assigns_id_and_timestamps(self, db_conn):
        cursor = await db_conn.execute(
            "INSERT INTO suggestions (name, suggestion) VALUES ('Dana', 'More coffee')"
        )
        new_id = cursor.lastrowid
        await cursor.close()

        async with db_conn.execute("SELECT * FROM suggestions WHERE id = ?", (new_id,)) as cursor:
            row = dict(await cursor.fetchone())

        assert row["id"] == new_id
        assert row["created_at"].endswith("Z")
        assert row["created_at"] == row["updated_at"]

    @pytest.mark.asyncio
    async def test_unwritable_directory_is_fatal(self, tmp_path: Path):
        """A regular file where the directory should be makes startup fail."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(DatabaseInitializationError):
            await init_database(str(blocker / "suggestions.db"))

    @pytest.mark.asyncio
    async def test_unusable_database_file_is_fatal(self, tmp_path: Path):
        """A file that is not a SQLite database cannot take the schema."""
        bogus = tmp_path / "bogus.db"
        bogus.write_bytes(b"this is definitely not sqlite" * 100)

        with pytest.raises(DatabaseInitializationError):
            await init_database(str(bogus))
