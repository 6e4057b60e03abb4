from __future__ import annotations

import logging
import sqlite3
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_UPDATABLE = ("title", "artist", "source_url", "chord_content", "notes")


@dataclass(frozen=True, slots=True)
class Song:
    id: int
    share_id: str
    title: str
    artist: str
    source_url: str
    chord_content: str
    notes: str
    created_at: int
    updated_at: int

    @property
    def display(self) -> str:
        return f"{self.artist} - {self.title}"

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Song":
        return cls(**{k: row[k] for k in row.keys()})


class SongStore:
    """Saved chord sheets. Nothing in the search/extract path writes here."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        return con

    def _init_db(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS songs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    share_id TEXT UNIQUE NOT NULL,
                    title TEXT NOT NULL,
                    artist TEXT NOT NULL DEFAULT 'Unknown Artist',
                    source_url TEXT NOT NULL DEFAULT '',
                    chord_content TEXT NOT NULL DEFAULT '',
                    notes TEXT NOT NULL DEFAULT '',
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                );
                """
            )
            con.execute("CREATE INDEX IF NOT EXISTS idx_songs_share_id ON songs(share_id);")
            con.execute("CREATE INDEX IF NOT EXISTS idx_songs_title ON songs(title);")

    def save(
        self,
        *,
        title: str,
        artist: str,
        chord_content: str,
        source_url: str = "",
        notes: str = "",
    ) -> Song:
        now = int(time.time())
        share_id = uuid.uuid4().hex[:8]
        with self._connect() as con:
            cur = con.execute(
                """
                INSERT INTO songs(share_id, title, artist, source_url, chord_content, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (share_id, title, artist or "Unknown Artist", source_url or "", chord_content, notes or "", now, now),
            )
            row = con.execute("SELECT * FROM songs WHERE id=?", (cur.lastrowid,)).fetchone()
        logger.debug("saved song %s (%s)", row["id"], share_id)
        return Song.from_row(row)

    def get_by_id(self, song_id: int) -> Song | None:
        with self._connect() as con:
            row = con.execute("SELECT * FROM songs WHERE id=?", (song_id,)).fetchone()
            return Song.from_row(row) if row is not None else None

    def get_by_share_id(self, share_id: str) -> Song | None:
        with self._connect() as con:
            row = con.execute("SELECT * FROM songs WHERE share_id=?", (share_id,)).fetchone()
            return Song.from_row(row) if row is not None else None

    def list_all(self) -> list[Song]:
        with self._connect() as con:
            rows = con.execute("SELECT * FROM songs ORDER BY updated_at DESC, id DESC").fetchall()
            return [Song.from_row(r) for r in rows]

    def search(self, text: str) -> list[Song]:
        pattern = f"%{text}%"
        with self._connect() as con:
            rows = con.execute(
                "SELECT * FROM songs WHERE title LIKE ? OR artist LIKE ? ORDER BY updated_at DESC, id DESC",
                (pattern, pattern),
            ).fetchall()
            return [Song.from_row(r) for r in rows]

    def update(self, song_id: int, **fields: str | None) -> Song | None:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Unknown song fields: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in fields.items() if v is not None}
        if changes:
            assignments = ", ".join(f"{k}=?" for k in changes)
            with self._connect() as con:
                con.execute(
                    f"UPDATE songs SET {assignments}, updated_at=? WHERE id=?",
                    (*changes.values(), int(time.time()), song_id),
                )
        return self.get_by_id(song_id)

    def delete(self, song_id: int) -> bool:
        with self._connect() as con:
            cur = con.execute("DELETE FROM songs WHERE id=?", (song_id,))
            return cur.rowcount > 0
