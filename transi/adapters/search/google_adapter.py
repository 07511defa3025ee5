"""Google Custom Search gateway.

Returns the top-K hits for a query. When the snippets together are too
short to answer from, the top page is fetched and its text, cut to a
character budget, is attached for the summariser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import WebSearchConfig, get_config
from ...domain.errors import ConfigMissing, TransiError, UpstreamMalformed
from ...domain.models import Empty, GatewayResult, SearchHit, SearchResult, Success
from ..http import HttpClient
from .text import html_to_text, truncate


class _Item(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    link: str
    snippet: str = ""


class CustomSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: List[_Item] = Field(default_factory=list)


@dataclass
class GoogleSearchGateway:
    """Web search with optional domain restriction.

    This adapter implements WebSearchGatewayPort.
    """

    config: WebSearchConfig = field(default_factory=lambda: get_config().search)
    http: HttpClient = field(default_factory=HttpClient)
    name: str = "google"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def build_query(self, query: str) -> str:
        query = " ".join(query.split())
        if self.config.site_restriction:
            return f"{query} site:{self.config.site_restriction}"
        return query

    def fetch(self, query: str) -> GatewayResult:
        if not self.config.enabled:
            raise ConfigMissing(
                "web search disabled: API key or engine id not configured",
                gateway=self.name,
                setting_name="GOOGLE_API_KEY/GOOGLE_CX_ID",
            )

        search_query = self.build_query(query)
        body = self.http.get_json(
            self.config.base_url,
            gateway=self.name,
            params={
                "key": self.config.api_key,
                "cx": self.config.cx_id,
                "q": search_query,
                "num": self.config.top_k,
            },
        )
        try:
            response = CustomSearchResponse.model_validate(body)
        except ValidationError as e:
            raise UpstreamMalformed(
                "search payload malformed", gateway=self.name, cause=e
            )

        hits = tuple(
            SearchHit(
                title=item.title.strip(),
                link=item.link,
                snippet=" ".join(item.snippet.split()),
            )
            for item in response.items[: self.config.top_k]
        )
        if not hits:
            self._logger.info("Search returned no items", extra={"query": search_query})
            return Empty(source=self.name, reason="no search results")

        excerpt: Optional[str] = None
        snippet_chars = sum(len(hit.snippet) for hit in hits)
        if snippet_chars < self.config.min_snippet_chars:
            excerpt = self._page_excerpt(hits[0].link)
        if not snippet_chars and excerpt is None:
            self._logger.info("Search hits carry no text", extra={"query": search_query})
            return Empty(source=self.name, reason="no usable snippets")

        self._logger.info(
            "Search results",
            extra={"query": search_query, "hits": len(hits), "excerpt": bool(excerpt)},
        )
        return Success(
            SearchResult(query=search_query, hits=hits, page_excerpt=excerpt),
            source=self.name,
        )

    def _page_excerpt(self, url: str) -> Optional[str]:
        """Body text of a result page, or None if it cannot be fetched."""
        try:
            document = self.http.get_text(url, gateway=self.name)
        except TransiError as e:
            self._logger.warning(
                "Page fetch failed, keeping snippets only",
                extra={"url": url, "error": str(e)},
            )
            return None
        text = html_to_text(document)
        if not text:
            return None
        return truncate(text, self.config.page_char_budget)
