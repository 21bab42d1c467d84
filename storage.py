from __future__ import annotations

import asyncio
import json
import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from models import Config, Profile

logger = logging.getLogger(__name__)


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("TIMESHEET_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "timesheet.db"


DB_PATH = _get_db_path()


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS timesheets (
            user_id TEXT NOT NULL,
            date_key TEXT NOT NULL,
            data TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(user_id, date_key)
        );

        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS profiles (
            id TEXT PRIMARY KEY,
            name TEXT,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_timesheets_user ON timesheets(user_id);
    """)
    conn.commit()
    conn.close()


# --- Timesheet rows ---


def fetch_rows(user_id: str) -> list[dict[str, Any]]:
    """Get every stored day for a user as {"date_key", "data"} dicts."""
    conn = get_connection()
    rows = conn.execute(
        "SELECT date_key, data FROM timesheets WHERE user_id = ?",
        (user_id,),
    ).fetchall()
    conn.close()
    result = []
    for row in rows:
        try:
            data = json.loads(row["data"])
        except (TypeError, ValueError):
            logger.warning("Skipping unreadable entry %s for user %s", row["date_key"], user_id)
            continue
        result.append({"date_key": row["date_key"], "data": data})
    return result


def upsert_row(user_id: str, date_key: str, data: dict[str, Any]) -> None:
    """Insert or update the row for (user_id, date_key)."""
    conn = get_connection()
    conn.execute(
        """
        INSERT INTO timesheets (user_id, date_key, data, updated_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id, date_key) DO UPDATE SET
            data = excluded.data,
            updated_at = excluded.updated_at
        """,
        (user_id, date_key, json.dumps(data), datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


class RowStore:
    """Coroutine interface over the timesheet rows.

    The SQLite calls block, so they run in a worker thread and the event
    loop stays free while a read or write is in flight.
    """

    async def fetch_rows(self, user_id: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(fetch_rows, user_id)

    async def upsert_row(self, user_id: str, date_key: str, data: dict[str, Any]) -> None:
        await asyncio.to_thread(upsert_row, user_id, date_key, data)


# --- Users and profiles ---


def create_user(user_id: str, email: str, password_hash: str) -> None:
    conn = get_connection()
    conn.execute(
        "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
        (user_id, email, password_hash, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def get_user_by_email(email: str) -> sqlite3.Row | None:
    conn = get_connection()
    row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
    conn.close()
    return row


def get_user_by_id(user_id: str) -> sqlite3.Row | None:
    conn = get_connection()
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    conn.close()
    return row


def get_profile(user_id: str) -> Profile | None:
    conn = get_connection()
    row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    conn.close()
    if row:
        return Profile(id=row["id"], name=row["name"])
    return None


def update_profile(user_id: str, name: str | None) -> None:
    """Insert or update a user's profile."""
    conn = get_connection()
    conn.execute(
        """
        INSERT INTO profiles (id, name, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET name = excluded.name, updated_at = excluded.updated_at
        """,
        (user_id, name, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


# --- Local settings ---


def get_config() -> Config:
    """Load config from database."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    config = Config()
    for row in rows:
        if row["key"] == "app_theme":
            config.theme = row["value"] if row["value"] in ("light", "dark") else "light"
        elif row["key"] == "holiday_country":
            config.holiday_country = row["value"]
        elif row["key"] == "holiday_subdiv":
            config.holiday_subdiv = row["value"]

    return config


def save_config(config: Config):
    """Save config to database."""
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("app_theme", config.theme))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("holiday_country", config.holiday_country))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("holiday_subdiv", config.holiday_subdiv))
    conn.commit()
    conn.close()


def get_setting(key: str) -> str | None:
    conn = get_connection()
    row = conn.execute("SELECT value FROM config WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else None


def set_setting(key: str, value: str | None) -> None:
    """Store a single setting. None removes it."""
    conn = get_connection()
    if value is None:
        conn.execute("DELETE FROM config WHERE key = ?", (key,))
    else:
        conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)", (key, value))
    conn.commit()
    conn.close()
