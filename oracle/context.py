"""Merging document and web evidence into one generation context."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .config import config
from .models import ContextBundle, DocumentSearchOutcome, InformationQuality

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import SearchResult, WebSearchOutcome

logger = config.get_logger(__name__)

DOCUMENT_SEPARATOR = "\n\n---\n\n"
MAX_HIT_LENGTH = 1500
MAX_DOCUMENT_CONTEXT_LENGTH = 2000

FILENAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[\w.-]+\.(?:txt|pdf|md|docx?)\b", re.IGNORECASE),
    re.compile(r"\bMidnight_\w+"),
    re.compile(r"\bCardano_\w+"),
    re.compile(r"\bMinotaur_\w+"),
)


def format_web_results(outcome: WebSearchOutcome) -> str:
    """Render web hits as a bulleted evidence block.

    Returns:
        Empty string when there are no results.
    """
    if not outcome.results:
        return ""
    lines = [
        f'- Source {index}: "{result.snippet}" (from {result.domain})'
        for index, result in enumerate(outcome.results, start=1)
    ]
    return "Based on live web search results:\n" + "\n".join(lines)


def scrub_filenames(text: str, filenames: Iterable[str] = ()) -> str:
    """Remove source filenames and filename-like tokens from ``text``."""
    for filename in sorted(set(filenames), key=len, reverse=True):
        if filename:
            text = text.replace(filename, "")
    for pattern in FILENAME_PATTERNS:
        text = pattern.sub("", text)
    return text


def build_document_context(results: Sequence[SearchResult]) -> str:
    """Join hits into one document context, scrubbing each before truncating."""
    filenames = [result.filename for result in results]
    return DOCUMENT_SEPARATOR.join(
        scrub_filenames(result.content, filenames)[:MAX_HIT_LENGTH]
        for result in results
    )


class ContextAssembler:
    """Builds the provenance-tagged context block for a chat turn."""

    def __init__(
        self,
        document_label: str = "DOCUMENT MEMORY",
        web_label: str = "LIVE WEB INTELLIGENCE",
        max_document_length: int = MAX_DOCUMENT_CONTEXT_LENGTH,
    ) -> None:
        self.document_label = document_label
        self.web_label = web_label
        self.max_document_length = max_document_length

    def assemble(
        self,
        document_outcome: DocumentSearchOutcome | None,
        web_outcome: WebSearchOutcome | None,
    ) -> ContextBundle:
        """Merge whichever evidence branches produced something.

        Returns:
            ContextBundle whose quality reflects which contexts are non-empty.
        """
        document_outcome = document_outcome or DocumentSearchOutcome()

        document_context = ""
        if document_outcome.context:
            filenames = document_outcome.sources
            scrubbed = scrub_filenames(document_outcome.context, filenames)
            # Cutting can turn a longer token into a filename-like one.
            document_context = scrub_filenames(
                scrubbed[: self.max_document_length], filenames
            ).strip()

        web_context = format_web_results(web_outcome) if web_outcome else ""

        blocks: list[str] = []
        if document_context:
            blocks.append(f"{self.document_label}:\n{document_context}")
        if web_context:
            blocks.append(f"{self.web_label}:\n{web_context}")

        sources = list(document_outcome.sources)
        if web_outcome:
            sources.extend(web_outcome.sources)

        quality = InformationQuality.from_context(document_context, web_context)
        logger.info(
            "Context assembled: quality=%s strong=%s sources=%s",
            quality.value,
            document_outcome.has_strong_match,
            ", ".join(sources) or "none",
        )

        return ContextBundle(
            document_context=document_context,
            web_context=web_context,
            has_strong_match=document_outcome.has_strong_match,
            information_quality=quality,
            combined_context="\n\n".join(blocks),
            sources=sources,
        )
