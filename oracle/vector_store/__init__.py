"""Vector store adapters and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Protocol

from oracle.config import config

from .memory_store import InMemoryVectorStore
from .sqlite_store import SQLiteVectorStore

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from oracle.models import DocumentChunk

VectorBackend = Literal["sqlite", "memory"]


class VectorStore(Protocol):
    """Operations the indexing pipeline needs from a chunk store."""

    backend: str

    def replace_document(
        self, filename: str, chunks: Sequence[DocumentChunk]
    ) -> int: ...

    def delete_document(self, filename: str) -> int: ...

    def all_chunks(self) -> list[DocumentChunk]: ...

    def count_distinct_documents(self) -> int: ...


def get_vector_store(
    store: VectorBackend = "sqlite",
    *,
    db_path: Path | None = None,
) -> VectorStore:
    """Return a configured vector store instance.

    Raises:
        ValueError: If an unsupported backend is requested.
    """
    backend = store.lower()

    if backend == "sqlite":
        return SQLiteVectorStore(
            db_path=db_path if db_path is not None else config.VECTOR_STORE_DB_PATH,
        )

    if backend == "memory":
        return InMemoryVectorStore()

    msg = f"Unsupported vector store backend: {store}"
    raise ValueError(msg)


__all__ = [
    "InMemoryVectorStore",
    "SQLiteVectorStore",
    "VectorBackend",
    "VectorStore",
    "get_vector_store",
]
