"""Opening a contextqa database.

Every connection handed out by Database is ready for the repositories:
sqlite-vec provides vec_distance_cosine(), foreign keys are enforced so a
deleted context nulls chat_messages.context_id, and the schema has been
migrated to CURRENT_VERSION.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

import sqlite_vec

from contextqa.db.migrations import schema_version
from contextqa.db.schema import initialize
from contextqa.errors import StoreFailure

logger = logging.getLogger(__name__)


class Database:
    """One contextqa database file.

    Args:
        db_path: SQLite file, created on first connect() if missing.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def exists(self) -> bool:
        return self.db_path.is_file()

    def connect(self) -> sqlite3.Connection:
        """Open, configure and migrate the database; the caller closes it.

        Raises:
            StoreFailure: If the file cannot be opened, the extension cannot
                be loaded, or a migration fails.
        """
        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            conn.enable_load_extension(True)
            sqlite_vec.load(conn)
            conn.enable_load_extension(False)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode = WAL")
            before = schema_version(conn)
            initialize(conn)
        except sqlite3.Error as exc:
            if conn is not None:
                conn.close()
            raise StoreFailure(f"Cannot open database '{self.db_path}': {exc}") from exc
        if before == 0:
            logger.info("Created contextqa schema in %s", self.db_path)
        return conn

    def __enter__(self) -> sqlite3.Connection:
        self._conn = self.connect()
        return self._conn

    def __exit__(self, *args: object) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None
