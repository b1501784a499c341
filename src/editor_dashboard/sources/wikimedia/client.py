"""Wikimedia REST API client implementing
:class:`~editor_dashboard.sources.base.PageviewSource`.

Calls ``/metrics/pageviews/per-article/{project}/{access}/{agent}/{article}/daily/{start}/{end}``.
The API answers 404 for articles it has no data for (new or missing pages);
those are reported as zero views rather than as failures.
"""

from __future__ import annotations

import logging
import urllib.parse
from datetime import date, datetime
from typing import Any

import httpx

from editor_dashboard.config.settings import Settings
from editor_dashboard.core.entities import ArticlePageviews, DailyPageviews
from editor_dashboard.core.exceptions import UpstreamUnavailableError
from editor_dashboard.core.summaries import aggregate_pageviews
from editor_dashboard.sources.base import PageviewSource
from editor_dashboard.sources.http import JsonApiClient
from editor_dashboard.sources.wikimedia.config import (
    PAGEVIEW_ACCESS,
    PAGEVIEW_AGENT,
    PAGEVIEW_DATE_FORMAT,
    PAGEVIEW_GRANULARITY,
)

logger = logging.getLogger(__name__)


class WikimediaRestClient(JsonApiClient, PageviewSource):
    """Per-article pageview source backed by the Wikimedia REST API.

    Args:
        api_base: REST API root, e.g. ``"https://wikimedia.org/api/rest_v1"``.
        wiki_project: Wiki project identifier (``"en.wikipedia"``).
        user_agent: Value of the ``User-Agent`` header.
        http_client: Optional injected :class:`httpx.AsyncClient` for testing.
        **transport: Remaining :class:`~editor_dashboard.sources.http.JsonApiClient`
            options.
    """

    source_name = "wikimedia"

    def __init__(
        self,
        api_base: str,
        wiki_project: str,
        user_agent: str,
        http_client: httpx.AsyncClient | None = None,
        **transport: Any,
    ) -> None:
        super().__init__(user_agent, http_client=http_client, **transport)
        self.api_base = api_base.rstrip("/")
        self.wiki_project = wiki_project

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> WikimediaRestClient:
        return cls(
            settings.wikimedia_rest_api_base,
            settings.wiki_project,
            http_client=http_client,
            **cls.transport_options(settings),
        )

    def pageviews_url(self, title: str, start: date, end: date) -> str:
        encoded = urllib.parse.quote(title.replace(" ", "_"), safe="")
        return (
            f"{self.api_base}/metrics/pageviews/per-article/{self.wiki_project}"
            f"/{PAGEVIEW_ACCESS}/{PAGEVIEW_AGENT}/{encoded}/{PAGEVIEW_GRANULARITY}"
            f"/{start.strftime(PAGEVIEW_DATE_FORMAT)}/{end.strftime(PAGEVIEW_DATE_FORMAT)}"
        )

    async def get_article_pageviews(self, title: str, start: date, end: date) -> ArticlePageviews:
        url = self.pageviews_url(title, start, end)
        try:
            data = await self._get_json(url)
        except UpstreamUnavailableError as exc:
            if exc.status_code == 404:
                logger.debug("wikimedia: no pageview data for %r", title)
                return aggregate_pageviews(title, ())
            raise

        if not isinstance(data, dict):
            raise UpstreamUnavailableError(
                f"wikimedia: unexpected response shape from {url}",
                source=self.source_name,
            )

        daily = []
        for item in data.get("items", []):
            day = _parse_pageview_day(item.get("timestamp"))
            if day is None:
                logger.warning("wikimedia: skipping %r item without a valid timestamp", title)
                continue
            daily.append(DailyPageviews(date=day, views=int(item.get("views") or 0)))
        return aggregate_pageviews(title, daily)


def _parse_pageview_day(value: str | None) -> date | None:
    if not value or len(value) < 8:
        return None
    try:
        return datetime.strptime(value[:8], PAGEVIEW_DATE_FORMAT).date()
    except ValueError:
        return None
