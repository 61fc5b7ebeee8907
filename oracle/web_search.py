"""Brave web search restricted to a set of trusted domains."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import httpx

from .config import config
from .exceptions import WebSearchUnavailable
from .models import WebSearchOutcome, WebSearchResult
from .relevance import DEFAULT_TOPIC_CATEGORIES, match_category

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from .relevance import TopicCategory

logger = config.get_logger(__name__)

GENERAL_SOURCE = "general"
RESULTS_PER_DOMAIN = 1
GENERAL_RESULT_LIMIT = 2


def domain_from_url(url: str) -> str | None:
    """Hostname of ``url``, or None when the URL cannot be parsed."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None
    return hostname or None


class WebSearchAdapter:
    """Fans a query out to every trusted domain and merges the top hits."""

    def __init__(  # noqa: PLR0913
        self,
        api_key: str | None = None,
        domains: Sequence[str] | None = None,
        categories: Sequence[TopicCategory] = DEFAULT_TOPIC_CATEGORIES,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        result_count: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Brave API key. If None, reads BRAVE_API_KEY.
            domains: Trusted domains. If None, uses config.WEB_SEARCH_DOMAINS.
            categories: Topic categories used for query rewriting and fallback.
            base_url: Search endpoint. If None, uses config.WEB_SEARCH_URL.
            timeout: Per-call timeout in seconds, enforced around each request.
            result_count: Results requested from the provider per call.
            client: Shared HTTP client; when omitted one is opened per search.
        """
        if api_key is None:
            api_key = config.get_web_search_api_key()
        self.api_key = api_key
        self.domains = tuple(
            domains if domains is not None else config.WEB_SEARCH_DOMAINS
        )
        self.categories = tuple(categories)
        self.base_url = base_url or config.WEB_SEARCH_URL
        self.timeout = timeout if timeout is not None else config.WEB_SEARCH_TIMEOUT
        self.result_count = result_count or config.WEB_SEARCH_RESULT_COUNT
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(headers=config.get_api_headers()) as client:
            yield client

    def rewrite_query(self, query: str) -> str:
        category = match_category(query, self.categories)
        if category is not None and category.query_qualifiers:
            return f"{query} {category.query_qualifiers}"
        return query

    async def search(self, query: str) -> WebSearchOutcome:
        """Search every trusted domain in parallel.

        A failing domain contributes nothing; the search itself never raises.

        Returns:
            Merged results with the domains that produced them.
        """
        outcome = WebSearchOutcome()
        if not self.api_key:
            logger.warning("Web search skipped: BRAVE_API_KEY is not configured")
            return outcome

        category = match_category(query, self.categories)
        enhanced_query = self.rewrite_query(query)
        logger.info(
            "Web search: %r across %d domains", enhanced_query, len(self.domains)
        )

        async with self._session() as client:
            branches = await asyncio.gather(
                *(
                    self._search_domain(client, enhanced_query, domain)
                    for domain in self.domains
                ),
                return_exceptions=True,
            )

            for domain, branch in zip(self.domains, branches, strict=True):
                if isinstance(branch, BaseException):
                    logger.warning("Web search failed for %s: %s", domain, branch)
                    continue
                if branch:
                    outcome.results.extend(branch)
                    outcome.sources.append(domain)

            if not outcome.results and category is not None and category.fallback_query:
                await self._search_general(client, category.fallback_query, outcome)

        logger.info(
            "Web search: %d results from %d sources",
            len(outcome.results),
            len(outcome.sources),
        )
        return outcome

    async def _search_domain(
        self, client: httpx.AsyncClient, query: str, domain: str
    ) -> list[WebSearchResult]:
        items = await self._query(client, f"{query} site:{domain}")
        return [
            WebSearchResult(title=title, link=link, snippet=snippet, domain=domain)
            for title, link, snippet in items[:RESULTS_PER_DOMAIN]
        ]

    async def _search_general(
        self, client: httpx.AsyncClient, query: str, outcome: WebSearchOutcome
    ) -> None:
        try:
            items = await self._query(client, query)
        except WebSearchUnavailable as exc:
            logger.warning("General web search failed: %s", exc)
            return

        found = 0
        for title, link, snippet in items[:GENERAL_RESULT_LIMIT]:
            domain = domain_from_url(link)
            if domain is None:
                logger.debug("Skipping general result with malformed URL %r", link)
                continue
            outcome.results.append(
                WebSearchResult(title=title, link=link, snippet=snippet, domain=domain)
            )
            found += 1

        if found:
            outcome.sources.append(GENERAL_SOURCE)
            logger.info("General web search: %d additional results", found)

    async def _query(
        self, client: httpx.AsyncClient, query: str
    ) -> list[tuple[str, str, str]]:
        """Run one provider call under the per-call timeout.

        Returns:
            ``(title, url, description)`` triples in provider order.

        Raises:
            WebSearchUnavailable: On timeout, transport error, non-200 status
                or an unreadable payload.
        """
        params = {
            "q": query,
            "count": self.result_count,
            "offset": 0,
            "text_decorations": "false",
            "search_lang": "en",
            "result_filter": "web",
        }
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": self.api_key,
        }
        try:
            response = await asyncio.wait_for(
                client.get(
                    self.base_url, params=params, headers=headers, timeout=self.timeout
                ),
                timeout=self.timeout,
            )
        except TimeoutError as exc:
            msg = f"Web search timed out after {self.timeout}s"
            raise WebSearchUnavailable(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Web search request failed: {exc}"
            raise WebSearchUnavailable(msg) from exc

        if response.status_code != httpx.codes.OK:
            msg = f"Web search returned HTTP {response.status_code}"
            raise WebSearchUnavailable(msg)

        try:
            payload = response.json()
        except ValueError as exc:
            msg = "Web search returned invalid JSON"
            raise WebSearchUnavailable(msg) from exc

        return self._parse_results(payload)

    @staticmethod
    def _parse_results(payload: Any) -> list[tuple[str, str, str]]:  # noqa: ANN401
        """Validate the ``web.results`` array of a provider payload.

        Raises:
            WebSearchUnavailable: If the payload is not a JSON object.
        """
        if not isinstance(payload, dict):
            msg = "Web search payload is not an object"
            raise WebSearchUnavailable(msg)

        web = payload.get("web")
        raw_results = web.get("results") if isinstance(web, dict) else None
        if not isinstance(raw_results, list):
            return []

        items: list[tuple[str, str, str]] = []
        for raw in raw_results:
            if not isinstance(raw, dict):
                continue
            url = raw.get("url")
            if not isinstance(url, str) or not url:
                continue
            title = raw.get("title")
            description = raw.get("description")
            items.append((
                title if isinstance(title, str) and title else "No title",
                url,
                description
                if isinstance(description, str) and description
                else "No description",
            ))
        return items
