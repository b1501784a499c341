"""Aggregate dashboard snapshots.

:class:`DashboardRepository` combines the three upstream-backed
repositories with the local collection store into one immutable
:class:`~editor_dashboard.core.entities.EditorDashboard` per username.
A refresh either produces a complete snapshot or raises; the previously
cached snapshot is never overwritten by a failed refresh.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import structlog

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import EditorDashboard
from editor_dashboard.core.logging_config import dashboard_user_var
from editor_dashboard.core.store import LocalCollectionStore
from editor_dashboard.repositories.contributions import ContributionRepository
from editor_dashboard.repositories.stats import StatsRepository
from editor_dashboard.repositories.users import UserRepository

logger = structlog.get_logger(__name__)


class DashboardRepository:
    """Serve cached dashboard snapshots and rebuild them on demand.

    Args:
        users: Profile repository.
        stats: Statistics repository.
        contributions: Contribution repository.
        store: Local drafts, tasks, focus areas and COI disclosures.
        cache: Snapshot cache owned by this repository, keyed by username.
        max_recent_contributions: Length of ``recent_contributions``.
    """

    def __init__(
        self,
        users: UserRepository,
        stats: StatsRepository,
        contributions: ContributionRepository,
        store: LocalCollectionStore,
        cache: TTLCache[EditorDashboard],
        max_recent_contributions: int = 50,
    ) -> None:
        self._users = users
        self._stats = stats
        self._contributions = contributions
        self._store = store
        self._cache = cache
        self._max_recent_contributions = max_recent_contributions

    async def get_dashboard(self, username: str) -> EditorDashboard:
        """Return the cached snapshot for *username*, refreshing it if stale."""
        cached = self._cache.get(username)
        if cached is not None:
            logger.debug("dashboard.cache_hit", username=username)
            return cached
        return await self.refresh_dashboard(username)

    async def refresh_dashboard(self, username: str) -> EditorDashboard:
        """Fetch user, stats and contributions concurrently and cache a new snapshot.

        Raises:
            UserNotFoundError: If any source reports the user as unknown.
            UpstreamUnavailableError: If any source fails.
        """
        token = dashboard_user_var.set(username)
        try:
            user, stats, contributions = await asyncio.gather(
                self._users.get_user(username),
                self._stats.get_editor_stats(username),
                self._contributions.get_recent_contributions(
                    username, self._max_recent_contributions
                ),
            )
            local = self._store.snapshot()
            dashboard = EditorDashboard(
                user=user,
                stats=stats,
                drafts=local.drafts,
                recent_contributions=tuple(contributions),
                focus_areas=local.focus_areas,
                tasks=local.tasks,
                coi_disclosures=local.coi_disclosures,
                last_updated=datetime.now(tz=timezone.utc),
            )
            self._cache.set(username, dashboard)
            logger.info(
                "dashboard.refreshed",
                contributions=len(dashboard.recent_contributions),
                drafts=len(dashboard.drafts),
                tasks=len(dashboard.tasks),
            )
            return dashboard
        finally:
            dashboard_user_var.reset(token)

    def invalidate(self, username: str) -> None:
        """Drop the cached snapshot so the next read refreshes."""
        self._cache.invalidate(username)
