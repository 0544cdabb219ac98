"""SQLite layout of the external dictionary store."""

from __future__ import annotations

import sqlite3
from typing import Mapping


def apply_build_pragmas(connection: sqlite3.Connection) -> None:
    """Pragmas for the one-shot bulk load; the artifact is never written again."""

    connection.execute("PRAGMA journal_mode=OFF;")
    connection.execute("PRAGMA synchronous=OFF;")


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the entries and metadata tables if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS entries (
            key TEXT PRIMARY KEY,
            positions TEXT NOT NULL
        ) WITHOUT ROWID;

        CREATE TABLE IF NOT EXISTS dictionary_meta (
            name TEXT PRIMARY KEY,
            value TEXT NOT NULL
        ) WITHOUT ROWID;
        """
    )


def write_metadata(connection: sqlite3.Connection, metadata: Mapping[str, str]) -> None:
    connection.executemany(
        """
        INSERT INTO dictionary_meta(name, value)
        VALUES(?, ?)
        ON CONFLICT(name) DO UPDATE SET value=excluded.value
        """,
        sorted(metadata.items()),
    )


def read_metadata(connection: sqlite3.Connection) -> dict[str, str]:
    rows = connection.execute("SELECT name, value FROM dictionary_meta").fetchall()
    return {str(row[0]): str(row[1]) for row in rows}
