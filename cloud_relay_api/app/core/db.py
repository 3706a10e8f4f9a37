"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  The database holds the local mirror of resources the
relay created at the provider; the provider remains the owner of the
canonical state.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import Settings


def get_database_path(settings: Settings) -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / db_url).resolve())


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.
    Timestamps are returned as the strings SQLite stored.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    # Foreign keys are off by default in SQLite and must be enabled per
    # connection for the REFERENCES clauses below to take effect.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: catalog of deployable services and the per-user mirror
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS cloud_services (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            type TEXT,
            description TEXT,
            category TEXT,
            tags TEXT,
            home_url TEXT,
            logo TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS user_cloud_services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            user_id TEXT,
            service_id TEXT,
            domain TEXT,
            type TEXT,
            config TEXT,
            response TEXT,
            env TEXT,
            cloud_services_id TEXT,
            FOREIGN KEY(cloud_services_id) REFERENCES cloud_services(id) ON DELETE SET NULL
        );

        CREATE INDEX IF NOT EXISTS idx_user_cloud_services_user_id ON user_cloud_services(user_id);
        CREATE INDEX IF NOT EXISTS idx_user_cloud_services_service_id ON user_cloud_services(service_id);
        """,
    ),
    # Migration 2: provider databases created through the relay
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS user_cloud_databases (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            user_id TEXT,
            database_uuid TEXT,
            type TEXT,
            public_port INTEGER,
            external_db_url TEXT,
            internal_db_url TEXT,
            config TEXT,
            response TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_user_cloud_databases_user_id ON user_cloud_databases(user_id);
        CREATE INDEX IF NOT EXISTS idx_user_cloud_databases_uuid ON user_cloud_databases(database_uuid);

        -- Single-row counter for public ports handed to new databases.
        CREATE TABLE IF NOT EXISTS public_port (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            port INTEGER NOT NULL
        );
        """,
    ),
]


def init_db(db_path: str) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  To add a migration, append it with an incremented
    version number.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
