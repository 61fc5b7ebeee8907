"""SQLite-based chunk storage with JSON-serialized embeddings."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from oracle.config import config
from oracle.vector_store.base import CHUNK_COLUMNS, BaseSQLiteStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from oracle.models import DocumentChunk

logger = config.get_logger(__name__)


class SQLiteVectorStore(BaseSQLiteStore):
    """Persistent chunk store scanned in full at query time.

    A linear scan is fine for tens to low hundreds of chunks. A much larger
    corpus needs an approximate nearest-neighbour index behind the same
    ranking contract.
    """

    backend = "sqlite"

    def __init__(self, db_path: Path = Path("data/vector_store.db")) -> None:
        """Initialize the SQLiteVectorStore.

        Args:
            db_path: Path to the SQLite database file.
        """
        super().__init__(db_path)

    def replace_document(self, filename: str, chunks: Sequence[DocumentChunk]) -> int:
        """Delete every stored chunk of ``filename`` and insert ``chunks``.

        Both steps run in one transaction, so readers never observe a
        half-replaced document.

        Returns:
            Number of chunks stored.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM document_chunks WHERE filename = ?", (filename,)
            )
            removed = cursor.rowcount
            inserted = self._insert_chunks(cursor, filename, chunks)
            conn.commit()

        logger.info(
            "Replaced %s: removed %d chunks, stored %d", filename, removed, inserted
        )
        return inserted

    def delete_document(self, filename: str) -> int:
        """Remove all chunks of one document.

        Returns:
            Number of chunks removed.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM document_chunks WHERE filename = ?", (filename,)
            )
            conn.commit()
            return cursor.rowcount

    def all_chunks(self) -> list[DocumentChunk]:
        """Load every stored chunk in insertion order.

        Raises:
            sqlite3.Error: If the table cannot be read.
        """
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"SELECT {', '.join(CHUNK_COLUMNS)} "  # noqa: S608
                    "FROM document_chunks ORDER BY id"
                )
                rows = cursor.fetchall()
        except sqlite3.Error:
            logger.exception("Error loading chunks from SQLite vector store")
            raise

        return [self._build_chunk_from_row(row) for row in rows]

    def count_distinct_documents(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(DISTINCT filename) FROM document_chunks")
            row = cursor.fetchone()
        return int(row[0]) if row else 0
