"""Strong-match classification and topic-specific query tuning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import SearchResult

logger = config.get_logger(__name__)


@dataclass(frozen=True)
class TopicCategory:
    """A high-value query topic and the keywords that identify it.

    ``trigger_terms`` are matched against the user query. A result counts as
    on-topic when its filename contains a ``filename_markers`` entry or its
    content contains a ``content_markers`` entry. ``query_qualifiers`` are
    appended to web queries for the topic and ``fallback_query`` is the
    unscoped query tried when domain-scoped search finds nothing.
    """

    name: str
    trigger_terms: tuple[str, ...]
    filename_markers: tuple[str, ...] = ()
    content_markers: tuple[str, ...] = ()
    query_qualifiers: str = ""
    fallback_query: str = ""

    def matches_query(self, query: str) -> bool:
        lowered = query.lower()
        return any(term in lowered for term in self.trigger_terms)

    def matches_result(self, result: SearchResult) -> bool:
        filename = result.filename.lower()
        content = result.content.lower()
        return any(marker in filename for marker in self.filename_markers) or any(
            marker in content for marker in self.content_markers
        )


AIRDROP = TopicCategory(
    name="airdrop",
    trigger_terms=("airdrop", "eligible", "claim"),
    filename_markers=("airdrop",),
    content_markers=("eligible", "june 11, 2024"),
    query_qualifiers="midnight airdrop eligibility",
    fallback_query="midnight airdrop eligibility claiming guide",
)

DEFAULT_TOPIC_CATEGORIES: tuple[TopicCategory, ...] = (AIRDROP,)


def match_category(
    query: str, categories: Sequence[TopicCategory]
) -> TopicCategory | None:
    """Return the first category whose trigger terms occur in ``query``."""
    for category in categories:
        if category.matches_query(query):
            return category
    return None


class RelevanceClassifier:
    """Decides whether ranked results are a confident answer to a query.

    Cosine scores on short, jargon-heavy chunks under-rate exact keyword hits,
    so on-topic results for a high-value category count as strong regardless
    of score. This is a tunable heuristic.
    """

    def __init__(
        self,
        categories: Sequence[TopicCategory] = DEFAULT_TOPIC_CATEGORIES,
        threshold: float | None = None,
    ) -> None:
        self.categories = tuple(categories)
        self.threshold = (
            threshold if threshold is not None else config.STRONG_MATCH_THRESHOLD
        )

    def classify(self, query: str, results: Sequence[SearchResult]) -> bool:
        if not results:
            return False

        category = match_category(query, self.categories)
        if category is not None and any(
            category.matches_result(result) for result in results
        ):
            logger.debug("Strong match via %s category boost", category.name)
            return True

        return any(result.similarity > self.threshold for result in results)
