"""Best-effort local storage for cross-session data.

``KeyValueStore`` implementations may raise on I/O problems; ``PreferenceStore``
is the only place that talks to them and it never lets a failure escape.
Writes that fail are logged and dropped, reads that fail or find malformed
data return None (or the documented default).
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Protocol

from .core import Level, Mode, parse_level, parse_mode
from .results import SessionStats

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1

KEY_PREFIX = "minimath:"
LAST_SESSION_KEY = f"{KEY_PREFIX}last-session"
LAST_MODE_KEY = f"{KEY_PREFIX}last-mode"
LAST_LEVEL_KEY = f"{KEY_PREFIX}last-level"
THEME_KEY = f"{KEY_PREFIX}theme"
KEYPAD_MODE_KEY = f"{KEY_PREFIX}keypad-mode"

ALL_KEYS = (LAST_SESSION_KEY, LAST_MODE_KEY, LAST_LEVEL_KEY, THEME_KEY, KEYPAD_MODE_KEY)

THEMES = ("light", "dark")

# Failures a store or a stored blob can produce.
_STORE_ERRORS = (sqlite3.Error, OSError, ValueError, TypeError, LookupError)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


def open_db(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    _migrate(conn)
    return conn


def _utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(time.time()))


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at_utc TEXT NOT NULL
            );
            """
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


class SqliteKeyValueStore:
    """Key-value table in a local SQLite file. One connection per call."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        conn = open_db(self._path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        conn = open_db(self._path)
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at_utc) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at_utc = excluded.updated_at_utc
                    """,
                    (key, value, _utc_now_iso()),
                )
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = open_db(self._path)
        try:
            with conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        finally:
            conn.close()


class PreferenceStore:
    """Typed accessors over a KeyValueStore that never raise."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save_last_session(self, stats: SessionStats) -> None:
        self._write(LAST_SESSION_KEY, json.dumps(stats.to_dict(), ensure_ascii=False), "session stats")

    def get_last_session(self) -> SessionStats | None:
        raw = self._read(LAST_SESSION_KEY, "last session")
        if raw is None:
            return None
        try:
            return SessionStats.from_dict(json.loads(raw))
        except _STORE_ERRORS as e:
            log.warning("Failed to load last session: %s", e)
            return None

    def save_last_mode(self, mode: Mode) -> None:
        self._write(LAST_MODE_KEY, parse_mode(mode).value, "last mode")

    def get_last_mode(self) -> Mode | None:
        raw = self._read(LAST_MODE_KEY, "last mode")
        if not raw:
            return None
        try:
            return parse_mode(raw)
        except LookupError:
            log.warning("Ignoring unknown stored mode: %r", raw)
            return None

    def save_last_level(self, level: Level) -> None:
        self._write(LAST_LEVEL_KEY, str(int(level)), "last level")

    def get_last_level(self) -> Level | None:
        raw = self._read(LAST_LEVEL_KEY, "last level")
        if not raw:
            return None
        try:
            return parse_level(int(raw))
        except ValueError:
            return None

    def save_theme(self, theme: str) -> None:
        if theme not in THEMES:
            log.warning("Ignoring unknown theme: %r", theme)
            return
        self._write(THEME_KEY, theme, "theme")

    def get_theme(self) -> str | None:
        raw = self._read(THEME_KEY, "theme")
        return raw if raw in THEMES else None

    def save_keypad_mode(self, use_keypad: bool) -> None:
        self._write(KEYPAD_MODE_KEY, "true" if use_keypad else "false", "keypad mode")

    def get_keypad_mode(self) -> bool:
        raw = self._read(KEYPAD_MODE_KEY, "keypad mode")
        return True if raw is None else raw == "true"

    def clear_all_data(self) -> None:
        for key in ALL_KEYS:
            try:
                self._store.delete(key)
            except _STORE_ERRORS as e:
                log.warning("Failed to clear stored data: %s", e)
                return

    def _write(self, key: str, value: str, what: str) -> None:
        try:
            self._store.set(key, value)
        except _STORE_ERRORS as e:
            log.warning("Failed to save %s: %s", what, e)

    def _read(self, key: str, what: str) -> str | None:
        try:
            return self._store.get(key)
        except _STORE_ERRORS as e:
            log.warning("Failed to load %s: %s", what, e)
            return None
