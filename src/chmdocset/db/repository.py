"""Index store: the docset's searchIndex table, written in one transaction.

The database is never updated in place. ``initialize()`` deletes any
previous index and builds a fresh schema in a staging file next to the
target; ``commit()`` moves the staging file over the target with an
atomic rename. Readers therefore see either no index or a complete one.
"""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from chmdocset.db.connection import Database
from chmdocset.db.models import IndexEntry
from chmdocset.db.schema import initialize
from chmdocset.errors import IndexStoreError

_STAGING_SUFFIX = ".partial"

_INSERT_SQL = "INSERT OR IGNORE INTO searchIndex(name, type, path) VALUES (?, ?, ?)"


class IndexStore:
    """Owns the searchIndex rows of one docset.

    Usage::

        store = IndexStore(layout.database_path)
        store.initialize()
        with store.batch():
            store.insert_if_absent("Welcome", "Guide", "Welcome.htm")
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.staging_path = self.db_path.with_name(self.db_path.name + _STAGING_SUFFIX)
        self._conn: sqlite3.Connection | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Remove any existing index and create an empty schema.

        Raises:
            IndexStoreError: If the location is not writable or the schema
                cannot be created.
        """
        self._close()
        try:
            for stale in (self.db_path, self.staging_path):
                stale.unlink(missing_ok=True)
            conn = Database(self.staging_path).connect()
        except (OSError, sqlite3.Error) as exc:
            raise IndexStoreError(f"cannot create index at '{self.db_path}': {exc}") from exc
        try:
            initialize(conn)
        except sqlite3.Error as exc:
            conn.close()
            self.staging_path.unlink(missing_ok=True)
            raise IndexStoreError(f"cannot create index schema: {exc}") from exc
        self._conn = conn

    def begin_batch(self) -> None:
        """Open the single write transaction for this run."""
        try:
            self._connection().execute("BEGIN")
        except sqlite3.Error as exc:
            raise IndexStoreError(f"cannot begin transaction: {exc}") from exc

    def insert_if_absent(self, name: str, type: str, path: str) -> bool:
        """Insert one row; a duplicate (name, type, path) is silently ignored.

        Returns:
            True if a new row was stored, False if the triple already existed.

        Raises:
            IndexStoreError: On any failure other than the uniqueness collision.
        """
        try:
            cur = self._connection().execute(_INSERT_SQL, (name, type, path))
        except sqlite3.Error as exc:
            raise IndexStoreError(f"cannot insert '{path}': {exc}") from exc
        return cur.rowcount == 1

    def insert(self, entry: IndexEntry) -> bool:
        return self.insert_if_absent(entry.name, entry.type, entry.path)

    def commit(self) -> None:
        """Commit the transaction and publish the finished index."""
        conn = self._connection()
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            self.rollback()
            raise IndexStoreError(f"cannot commit index: {exc}") from exc
        self._close()
        try:
            os.replace(self.staging_path, self.db_path)
        except OSError as exc:
            self.staging_path.unlink(missing_ok=True)
            raise IndexStoreError(f"cannot publish index at '{self.db_path}': {exc}") from exc

    def rollback(self) -> None:
        """Abandon the transaction; no index is left behind for this run."""
        if self._conn is not None:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            self._close()
        self.staging_path.unlink(missing_ok=True)

    @contextmanager
    def batch(self) -> Iterator[IndexStore]:
        """Run the body inside one transaction; commit on success, roll back on error."""
        self.begin_batch()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    # ------------------------------------------------------------------
    # Reads (published index only)
    # ------------------------------------------------------------------

    def list_entries(self) -> list[IndexEntry]:
        """Return all published rows ordered by path, then name."""
        if not self.db_path.exists():
            return []
        with Database(self.db_path) as conn:
            rows = conn.execute(
                "SELECT name, type, path FROM searchIndex ORDER BY path, name"
            ).fetchall()
        return [IndexEntry(name=r["name"], type=r["type"], path=r["path"]) for r in rows]

    def count(self) -> int:
        """Return the number of published rows (0 if no index exists)."""
        if not self.db_path.exists():
            return 0
        with Database(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM searchIndex").fetchone()[0]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise IndexStoreError("index store is not initialized; call initialize() first")
        return self._conn

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
