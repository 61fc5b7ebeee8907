"""Seed the vector store from a directory of source documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pypdf.errors import PyPdfError

from .config import config
from .document_processing import SUPPORTED_EXTENSIONS

if TYPE_CHECKING:
    from pathlib import Path

    from .pipeline import RAGPipeline

logger = config.get_logger(__name__)


@dataclass
class SeedReport:
    """Summary of one seeding run."""

    processed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    document_count: int = 0


def discover_documents(directory: Path) -> list[Path]:
    """List supported files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        logger.warning("Seed directory not found: %s", directory)
        return []
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )


async def seed_documents(pipeline: RAGPipeline, directory: Path) -> SeedReport:
    """Index every supported document in ``directory``.

    A file that fails to load or index is recorded and skipped.

    Returns:
        SeedReport with processed and failed file names.
    """
    report = SeedReport()
    documents = discover_documents(directory)
    logger.info("Seeding %d documents from %s", len(documents), directory)

    for path in documents:
        try:
            await pipeline.process_document(path)
        except (OSError, ValueError, PyPdfError):
            logger.exception("Error indexing %s", path.name)
            report.failed.append(path.name)
            continue
        report.processed.append(path.name)

    report.document_count = await pipeline.get_indexed_document_count()
    logger.info(
        "Seeding complete: %d/%d documents processed, %d indexed in total",
        len(report.processed),
        len(documents),
        report.document_count,
    )
    return report
