"""Cached, classified contribution history.

Raw edits from the :class:`~editor_dashboard.sources.base.ContributionSource`
are classified with :func:`~editor_dashboard.core.classifier.to_contribution`
and cached as immutable tuples keyed by ``"{username}:{limit}"``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.classifier import MAJOR_EXPANSION_THRESHOLD_BYTES, to_contribution
from editor_dashboard.core.entities import Contribution
from editor_dashboard.core.formatting import DEFAULT_WIKI_PROJECT, wikipedia_url
from editor_dashboard.sources.base import ContributionSource

logger = logging.getLogger(__name__)

HISTORY_WINDOW: int = 500
"""Number of recent edits searched by the date-range and per-article lookups."""


class ContributionRepository:
    """Fetch, classify and cache a user's recent contributions.

    Args:
        source: Upstream contribution source.
        cache: Cache owned by this repository.
        wiki_project: Wiki project used to build article URLs.
        major_threshold: Byte delta above which an edit is a major expansion.
    """

    def __init__(
        self,
        source: ContributionSource,
        cache: TTLCache[tuple[Contribution, ...]],
        wiki_project: str = DEFAULT_WIKI_PROJECT,
        major_threshold: int = MAJOR_EXPANSION_THRESHOLD_BYTES,
    ) -> None:
        self._source = source
        self._cache = cache
        self._wiki_project = wiki_project
        self._major_threshold = major_threshold

    async def get_recent_contributions(
        self,
        username: str,
        limit: int = 50,
    ) -> tuple[Contribution, ...]:
        """Return at most *limit* classified contributions, newest first."""
        key = f"{username}:{limit}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        raw_edits = await self._source.get_recent_edits(username, limit)
        contributions = tuple(
            to_contribution(
                raw,
                wikipedia_url(raw.title, wiki_project=self._wiki_project),
                self._major_threshold,
            )
            for raw in raw_edits[:limit]
        )
        self._cache.set(key, contributions)
        logger.debug("contributions: cached %d for %s", len(contributions), key)
        return contributions

    async def get_contributions_by_date_range(
        self,
        username: str,
        start: datetime,
        end: datetime,
    ) -> tuple[Contribution, ...]:
        """Return recent contributions with ``start <= timestamp <= end``."""
        recent = await self.get_recent_contributions(username, HISTORY_WINDOW)
        return tuple(c for c in recent if start <= c.timestamp <= end)

    async def get_contributions_for_article(
        self,
        username: str,
        title: str,
    ) -> tuple[Contribution, ...]:
        recent = await self.get_recent_contributions(username, HISTORY_WINDOW)
        return tuple(c for c in recent if c.article_title == title)
