"""Composition root for the dashboard.

Builds the HTTP clients, caches and repositories from
:class:`~editor_dashboard.config.settings.Settings` and exposes the two
operations a presentation layer needs, plus article impact metrics and a
staleness check driven by ``refresh_interval_seconds``.

Usage::

    async with DashboardService.from_settings() as service:
        dashboard = await service.get_dashboard("Example")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import AsyncExitStack
from datetime import datetime, timedelta, timezone
from types import TracebackType

from editor_dashboard.config.settings import Settings, get_settings
from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import EditorDashboard
from editor_dashboard.core.logging_config import configure_logging
from editor_dashboard.core.summaries import ImpactMetrics
from editor_dashboard.core.store import LocalCollectionStore
from editor_dashboard.repositories.contributions import ContributionRepository
from editor_dashboard.repositories.dashboard import DashboardRepository
from editor_dashboard.repositories.impact import ImpactRepository
from editor_dashboard.repositories.stats import StatsRepository
from editor_dashboard.repositories.users import UserRepository
from editor_dashboard.sources.http import JsonApiClient
from editor_dashboard.sources.wikimedia.client import WikimediaRestClient
from editor_dashboard.sources.wikipedia.client import MediaWikiClient
from editor_dashboard.sources.xtools.client import XToolsClient

logger = logging.getLogger(__name__)


class DashboardService:
    """Owns the clients, caches and repositories for one configuration.

    Prefer :meth:`from_settings`; the constructor takes already-built parts
    so tests can wire in doubles.

    Args:
        settings: Runtime configuration.
        repository: Dashboard repository.
        store: Local collection store the repository reads from.
        impact: Pageview repository behind :meth:`get_impact_metrics`.
        clients: HTTP clients closed by :meth:`aclose`.
        caches: Caches cleared by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: Settings,
        repository: DashboardRepository,
        store: LocalCollectionStore,
        impact: ImpactRepository | None = None,
        clients: tuple[JsonApiClient, ...] = (),
        caches: tuple[TTLCache, ...] = (),
    ) -> None:
        self.settings = settings
        self.repository = repository
        self.store = store
        self.impact = impact
        self._clients = clients
        self._caches = caches

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        store: LocalCollectionStore | None = None,
    ) -> DashboardService:
        """Configure logging and build the full object graph."""
        settings = settings or get_settings()
        configure_logging(settings.log_level)
        store = store or LocalCollectionStore()

        mediawiki = MediaWikiClient.from_settings(settings)
        xtools = XToolsClient.from_settings(settings)
        wikimedia = WikimediaRestClient.from_settings(settings)

        user_cache = TTLCache(settings.user_cache_ttl_seconds)
        contribution_cache = TTLCache(settings.contribution_cache_ttl_seconds)
        stats_cache = TTLCache(settings.stats_cache_ttl_seconds)
        dashboard_cache = TTLCache(settings.dashboard_cache_ttl_seconds)
        pageview_cache = TTLCache(settings.pageview_cache_ttl_seconds)

        users = UserRepository(mediawiki, user_cache)
        contributions = ContributionRepository(
            mediawiki,
            contribution_cache,
            wiki_project=settings.wiki_project,
            major_threshold=settings.major_expansion_threshold_bytes,
        )
        stats = StatsRepository(
            xtools,
            contributions,
            stats_cache,
            activity_days=settings.activity_days,
        )
        repository = DashboardRepository(
            users,
            stats,
            contributions,
            store,
            dashboard_cache,
            max_recent_contributions=settings.max_recent_contributions,
        )
        impact = ImpactRepository(wikimedia, pageview_cache, days=settings.pageview_days)
        logger.info("dashboard service ready for %s", settings.wiki_project)
        return cls(
            settings,
            repository,
            store,
            impact=impact,
            clients=(mediawiki, xtools, wikimedia),
            caches=(
                user_cache,
                contribution_cache,
                stats_cache,
                dashboard_cache,
                pageview_cache,
            ),
        )

    async def get_dashboard(self, username: str | None = None) -> EditorDashboard:
        return await self.repository.get_dashboard(self._resolve_username(username))

    async def refresh_dashboard(self, username: str | None = None) -> EditorDashboard:
        return await self.repository.refresh_dashboard(self._resolve_username(username))

    async def get_impact_metrics(
        self,
        titles: Sequence[str],
        days: int | None = None,
    ) -> ImpactMetrics:
        """Sum pageviews of *titles* over the last *days* days (default ``pageview_days``)."""
        if self.impact is None:
            raise RuntimeError("DashboardService was built without an impact repository")
        return await self.impact.get_impact_metrics(titles, days)

    def is_stale(self, dashboard: EditorDashboard, now: datetime | None = None) -> bool:
        """Return True once *dashboard* is older than ``refresh_interval_seconds``."""
        current = now or datetime.now(tz=timezone.utc)
        age = current - dashboard.last_updated
        return age >= timedelta(seconds=self.settings.refresh_interval_seconds)

    def _resolve_username(self, username: str | None) -> str:
        resolved = (username or self.settings.default_username).strip()
        if not resolved:
            raise ValueError(
                "No username given and DEFAULT_USERNAME is not configured"
            )
        return resolved

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close every client and clear every cache, even if one close fails."""
        async with AsyncExitStack() as stack:
            for cache in self._caches:
                stack.callback(cache.clear)
            for client in self._clients:
                stack.push_async_callback(client.aclose)

    async def __aenter__(self) -> DashboardService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
