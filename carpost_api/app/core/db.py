"""
SQLite database integration and a simple migration system.

``get_connection`` opens a connection with foreign keys enforced,
``get_cursor`` wraps one unit of work (commit on success, rollback on
error) and ``init_db`` applies pending migrations at application start.

Applied migration versions are recorded in the ``migrations`` table;
new migrations are appended to ``MIGRATIONS`` with the next version
number and are never edited once released.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from .config import settings


logger = logging.getLogger(__name__)

# Largest value SQLite stores in an INTEGER column; bigger ids cannot exist.
MAX_ROW_ID = 2**63 - 1


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: users and the brand/model/generation catalog
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            first_name TEXT NOT NULL,
            last_name TEXT,
            phone TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS car_brands (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS car_models (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            brand_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            UNIQUE(brand_id, name),
            FOREIGN KEY(brand_id) REFERENCES car_brands(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS car_generations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            model_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            year_start INTEGER,
            year_end INTEGER,
            UNIQUE(model_id, name),
            FOREIGN KEY(model_id) REFERENCES car_models(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: cars owned by users
    (
        2,
        """
        -- A generation still referenced by a car cannot be removed; owner
        -- removal takes the owner's cars with it.
        CREATE TABLE IF NOT EXISTS cars (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            generation_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            plate TEXT NOT NULL,
            vin TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY(generation_id) REFERENCES car_generations(id) ON DELETE RESTRICT
        );
        """,
    ),
    # Migration 3: indices on foreign keys
    (
        3,
        """
        CREATE INDEX IF NOT EXISTS idx_cars_user_id ON cars(user_id);
        CREATE INDEX IF NOT EXISTS idx_cars_generation_id ON cars(generation_id);
        CREATE INDEX IF NOT EXISTS idx_car_models_brand_id ON car_models(brand_id);
        CREATE INDEX IF NOT EXISTS idx_car_generations_model_id ON car_generations(model_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    Absolute paths in ``settings.database_url`` are used as is; relative
    ones are resolved against the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is off by default in SQLite and has
    to be switched on for every connection.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor for one unit of work.

    Commits when the block exits normally, rolls back and re-raises
    otherwise, and always closes the connection.
    """
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Create the database if needed and apply pending migrations."""
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
