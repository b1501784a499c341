"""Readership impact of an editor's articles, from Wikimedia pageviews."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta, timezone

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import ArticlePageviews
from editor_dashboard.core.exceptions import UpstreamUnavailableError
from editor_dashboard.core.summaries import ImpactMetrics, aggregate_pageviews, summarize_impact
from editor_dashboard.sources.base import PageviewSource

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


class ImpactRepository:
    """Fetch and cache per-article pageviews over a trailing window.

    One failing article does not fail the batch: it is logged and reported
    with zero views.

    Args:
        source: Upstream pageview source.
        cache: Cache owned by this repository, keyed ``title:days``.
        days: Default window length.
        today: Returns the last day of the window (UTC today by default).
    """

    def __init__(
        self,
        source: PageviewSource,
        cache: TTLCache[ArticlePageviews],
        days: int = 30,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._source = source
        self._cache = cache
        self._days = days
        self._today = today

    async def get_article_pageviews(
        self,
        titles: Sequence[str],
        days: int | None = None,
    ) -> tuple[ArticlePageviews, ...]:
        """Return pageviews for each of *titles*, in input order."""
        window = self._days if days is None else days
        end = self._today()
        start = end - timedelta(days=window)
        return tuple(
            await asyncio.gather(*(self._pageviews(title, start, end, window) for title in titles))
        )

    async def get_impact_metrics(
        self,
        titles: Sequence[str],
        days: int | None = None,
    ) -> ImpactMetrics:
        return summarize_impact(await self.get_article_pageviews(titles, days))

    async def _pageviews(self, title: str, start: date, end: date, window: int) -> ArticlePageviews:
        key = f"{title}:{window}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        try:
            views = await self._source.get_article_pageviews(title, start, end)
        except UpstreamUnavailableError as exc:
            logger.warning("impact: pageviews for %r unavailable: %s", title, exc)
            return aggregate_pageviews(title, ())
        self._cache.set(key, views)
        return views
