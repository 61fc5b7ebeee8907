"""Data models for document retrieval and chat context assembly."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass
class DocumentChunk:
    """A contiguous word window extracted from one source document.

    ``embedding`` holds the serialized vector (a JSON array of floats) exactly
    as it is persisted, so malformed stored values can be detected at search
    time instead of failing on load.
    """

    filename: str
    content: str
    chunk_index: int
    page_number: int | None = None
    embedding: str | None = None
    created_at: datetime | str | None = None


@dataclass
class SearchResult:
    """One ranked hit returned from a document search."""

    content: str
    filename: str
    similarity: float
    page_number: int | None = None


@dataclass
class DocumentSearchOutcome:
    """Scored document evidence for one query."""

    has_strong_match: bool = False
    context: str = ""
    sources: list[str] = field(default_factory=list)


@dataclass
class WebSearchResult:
    """A single validated hit from the web search provider."""

    title: str
    link: str
    snippet: str
    domain: str


@dataclass
class WebSearchOutcome:
    """Aggregated web evidence and the domains that produced it."""

    results: list[WebSearchResult] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)


class InformationQuality(str, Enum):
    """How much evidence backs a generated answer."""

    DUAL = "dual"
    DOCUMENT_ONLY = "document-only"
    WEB_ONLY = "web-only"
    LIMITED = "limited"

    @classmethod
    def from_context(
        cls, document_context: str, web_context: str
    ) -> InformationQuality:
        if document_context and web_context:
            return cls.DUAL
        if document_context:
            return cls.DOCUMENT_ONLY
        if web_context:
            return cls.WEB_ONLY
        return cls.LIMITED


@dataclass
class ContextBundle:
    """Merged evidence handed to the generation call.

    ``sources`` is diagnostic only and never rendered into a prompt.
    """

    document_context: str
    web_context: str
    has_strong_match: bool
    information_quality: InformationQuality
    combined_context: str
    sources: list[str] = field(default_factory=list)


def serialize_embedding(vector: Sequence[float]) -> str:
    """Serialize an embedding vector for storage.

    Returns:
        JSON array text; ``repr``-exact floats survive the round trip.
    """
    return json.dumps([float(value) for value in vector])
