import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiosqlite

from models import WatchlistEntry

DB_PATH = Path("data/movielab.db")

logger = logging.getLogger(__name__)


async def init_db(db_path: Path = DB_PATH) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(db_path) as db:
        await db.executescript(
            """
            CREATE TABLE IF NOT EXISTS watchlist (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                movie_id    INTEGER NOT NULL,
                title       TEXT NOT NULL,
                watched     BOOLEAN NOT NULL DEFAULT 0,
                added_at    TEXT NOT NULL,
                poster_path TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_watchlist_added_at
                ON watchlist (added_at);

            CREATE TABLE IF NOT EXISTS user_preferences (
                id               INTEGER PRIMARY KEY AUTOINCREMENT,
                preference_key   TEXT UNIQUE NOT NULL,
                preference_value TEXT NOT NULL
            );
            """
        )
        await db.commit()


async def list_watchlist(db_path: Path = DB_PATH) -> list[WatchlistEntry]:
    """All entries, newest first."""
    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            "SELECT * FROM watchlist ORDER BY added_at DESC, id DESC"
        ) as cursor:
            rows = await cursor.fetchall()
    return [_row_to_entry(row) for row in rows]


async def add_to_watchlist(
    movie_id: int, title: str, poster_path: str = "", db_path: Path = DB_PATH
) -> WatchlistEntry:
    """Insert a snapshot of a title. The same movie_id may be added more than once."""
    added_at = datetime.now(timezone.utc).isoformat()
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            "INSERT INTO watchlist (movie_id, title, watched, added_at, poster_path) "
            "VALUES (?, ?, 0, ?, ?)",
            (movie_id, title, added_at, poster_path or ""),
        )
        await db.commit()
        entry_id = cursor.lastrowid
    logger.info("Added %r (movie %d) to watchlist as entry %d", title, movie_id, entry_id)
    return WatchlistEntry(
        id=entry_id,
        movie_id=movie_id,
        title=title,
        watched=False,
        added_at=added_at,
        poster_path=poster_path or "",
    )


async def set_watched(entry_id: int, watched: bool, db_path: Path = DB_PATH) -> bool:
    """Returns False when no entry has this id."""
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            "UPDATE watchlist SET watched = ? WHERE id = ?", (watched, entry_id)
        )
        await db.commit()
    return cursor.rowcount > 0


async def remove_from_watchlist(entry_id: int, db_path: Path = DB_PATH) -> bool:
    """Returns False when no entry has this id; that is not an error."""
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("DELETE FROM watchlist WHERE id = ?", (entry_id,))
        await db.commit()
    return cursor.rowcount > 0


async def clear_watchlist(db_path: Path = DB_PATH) -> int:
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("DELETE FROM watchlist")
        await db.commit()
    logger.info("Cleared %d watchlist entries", cursor.rowcount)
    return cursor.rowcount


async def get_seed_movie_id(db_path: Path = DB_PATH) -> Optional[int]:
    """movie_id of the oldest watchlist entry, used to seed recommendations."""
    async with aiosqlite.connect(db_path) as db:
        async with db.execute(
            "SELECT movie_id FROM watchlist ORDER BY id LIMIT 1"
        ) as cursor:
            row = await cursor.fetchone()
    return row[0] if row else None


async def get_preference(key: str, db_path: Path = DB_PATH) -> Optional[str]:
    async with aiosqlite.connect(db_path) as db:
        async with db.execute(
            "SELECT preference_value FROM user_preferences WHERE preference_key = ?",
            (key,),
        ) as cursor:
            row = await cursor.fetchone()
    return row[0] if row else None


async def set_preference(key: str, value: str, db_path: Path = DB_PATH) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(
            """
            INSERT INTO user_preferences (preference_key, preference_value)
            VALUES (?, ?)
            ON CONFLICT(preference_key) DO UPDATE SET
                preference_value = excluded.preference_value
            """,
            (key, value),
        )
        await db.commit()


def _row_to_entry(row: aiosqlite.Row) -> WatchlistEntry:
    return WatchlistEntry(
        id=row["id"],
        movie_id=row["movie_id"],
        title=row["title"],
        watched=bool(row["watched"]),
        added_at=row["added_at"],
        poster_path=row["poster_path"] or "",
    )
