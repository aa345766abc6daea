"""SQLite-backed versioned document store.

Each (kind, namespace, name) row carries an integer resource version.
Updates are a single conditional UPDATE, so a stale writer changes nothing.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import AlreadyExistsError, ConflictError, NotFoundError, StoreError
from .models import Document
from .repository import StateRepository

logger = logging.getLogger(__name__)

DB_PATH = Path(__file__).parent.parent.parent / "data" / "state.db"


class SQLiteStore(StateRepository):
    """StateRepository persisted to a local SQLite file."""

    def __init__(self, db_path: Path | str | None = None, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path or DB_PATH)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = timeout
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout, isolation_level="IMMEDIATE")
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    kind             TEXT NOT NULL,
                    namespace        TEXT NOT NULL,
                    name             TEXT NOT NULL,
                    spec             TEXT NOT NULL DEFAULT '{}',
                    resource_version INTEGER NOT NULL,
                    created_at       REAL NOT NULL,
                    updated_at       REAL NOT NULL,
                    PRIMARY KEY (kind, namespace, name)
                )
            """)

    @staticmethod
    def _to_document(row: sqlite3.Row) -> Document:
        return Document(
            kind=row["kind"],
            name=row["name"],
            namespace=row["namespace"],
            spec=json.loads(row["spec"]),
            resource_version=str(row["resource_version"]),
        )

    @staticmethod
    def _select(conn: sqlite3.Connection, kind: str, name: str, namespace: str) -> sqlite3.Row | None:
        return conn.execute(
            "SELECT * FROM documents WHERE kind = ? AND namespace = ? AND name = ?",
            (kind, namespace, name),
        ).fetchone()

    # ── StateRepository ─────────────────────────────────────────────────

    def get(self, kind: str, name: str, namespace: str) -> Document:
        try:
            with self._connect() as conn:
                row = self._select(conn, kind, name, namespace)
        except sqlite3.Error as e:
            raise StoreError(
                f"Error reading {kind} {name!r}: {e}",
                kind=kind, name=name, namespace=namespace,
            ) from e
        if row is None:
            raise NotFoundError(
                f"{kind} {name!r} not found in namespace {namespace!r}",
                kind=kind, name=name, namespace=namespace,
            )
        return self._to_document(row)

    def create(self, document: Document, namespace: str) -> Document:
        kind, name = document.kind, document.name
        now = time.time()
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO documents "
                    "(kind, namespace, name, spec, resource_version, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?, 1, ?, ?)",
                    (kind, namespace, name, json.dumps(document.spec), now, now),
                )
                row = self._select(conn, kind, name, namespace)
        except sqlite3.IntegrityError as e:
            raise AlreadyExistsError(
                f"{kind} {name!r} already exists in namespace {namespace!r}",
                kind=kind, name=name, namespace=namespace,
            ) from e
        except sqlite3.Error as e:
            raise StoreError(
                f"Error creating {kind} {name!r}: {e}",
                kind=kind, name=name, namespace=namespace,
            ) from e
        logger.debug("Created %s/%s/%s", kind, namespace, name)
        return self._to_document(row)

    def update(self, document: Document, namespace: str) -> Document:
        kind, name = document.kind, document.name
        try:
            expected = int(document.resource_version)
        except ValueError:
            expected = -1  # never matches a stored version

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE documents "
                    "SET spec = ?, resource_version = resource_version + 1, updated_at = ? "
                    "WHERE kind = ? AND namespace = ? AND name = ? AND resource_version = ?",
                    (json.dumps(document.spec), time.time(), kind, namespace, name, expected),
                )
                row = self._select(conn, kind, name, namespace)
        except sqlite3.Error as e:
            raise StoreError(
                f"Error updating {kind} {name!r}: {e}",
                kind=kind, name=name, namespace=namespace,
            ) from e

        if row is None:
            raise NotFoundError(
                f"{kind} {name!r} not found in namespace {namespace!r}",
                kind=kind, name=name, namespace=namespace,
            )
        if cursor.rowcount == 0:
            raise ConflictError(
                f"{kind} {name!r} was modified: have rv {document.resource_version!r}, "
                f"store has {row['resource_version']}",
                kind=kind, name=name, namespace=namespace,
            )
        logger.debug("Updated %s/%s/%s to rv %s", kind, namespace, name, row["resource_version"])
        return self._to_document(row)
