"""Editor statistics assembled from XTools totals and recent contributions."""

from __future__ import annotations

import asyncio
import logging

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import DailyActivity, EditorStats
from editor_dashboard.core.summaries import daily_activity, editor_stats
from editor_dashboard.repositories.contributions import HISTORY_WINDOW, ContributionRepository
from editor_dashboard.sources.base import StatisticsSource

logger = logging.getLogger(__name__)

TYPE_COUNT_WINDOW: int = 100
"""Number of recent contributions whose types feed the per-type counters."""


class StatsRepository:
    """Build :class:`EditorStats` for a user and cache them by username.

    ``total_edits`` comes from the statistics source; the per-type counters
    are taken from the :data:`TYPE_COUNT_WINDOW` most recent contributions
    and the activity series from the :data:`HISTORY_WINDOW` most recent.

    Args:
        source: Upstream aggregate edit-count source.
        contributions: Repository used for the classified edit history.
        cache: Cache owned by this repository.
        activity_days: Length of the daily activity window.
    """

    def __init__(
        self,
        source: StatisticsSource,
        contributions: ContributionRepository,
        cache: TTLCache[EditorStats],
        activity_days: int = 30,
    ) -> None:
        self._source = source
        self._contributions = contributions
        self._cache = cache
        self._activity_days = activity_days

    async def get_editor_stats(self, username: str) -> EditorStats:
        cached = self._cache.get(username)
        if cached is not None:
            return cached

        counts, recent, history = await asyncio.gather(
            self._source.get_edit_counts(username),
            self._contributions.get_recent_contributions(username, TYPE_COUNT_WINDOW),
            self._contributions.get_recent_contributions(username, HISTORY_WINDOW),
        )
        stats = editor_stats(
            counts.live_edit_count,
            recent,
            daily_activity(history, days=self._activity_days),
        )
        self._cache.set(username, stats)
        logger.debug(
            "stats: %s has %d edits, %d active days",
            username,
            stats.total_edits,
            len(stats.recent_activity),
        )
        return stats

    async def get_daily_activity(
        self,
        username: str,
        days: int | None = None,
    ) -> tuple[DailyActivity, ...]:
        """Return per-day edit counts for the last *days* days (default: the configured window)."""
        history = await self._contributions.get_recent_contributions(username, HISTORY_WINDOW)
        return daily_activity(history, days=self._activity_days if days is None else days)
