"""Tests for DashboardRepository.

Covers:
- Snapshot assembly from upstream repositories and the local store
- Cache hit / miss / expiry
- A failed refresh propagates unchanged and keeps the previous snapshot
- The three upstream fetches run concurrently
- dashboard_user_var is set during the refresh and reset afterwards
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import EditCountStats, EditorStats
from editor_dashboard.core.exceptions import UpstreamUnavailableError, UserNotFoundError
from editor_dashboard.core.logging_config import dashboard_user_var
from editor_dashboard.core.store import LocalCollectionStore
from editor_dashboard.repositories.contributions import ContributionRepository
from editor_dashboard.repositories.dashboard import DashboardRepository
from editor_dashboard.repositories.stats import StatsRepository
from editor_dashboard.repositories.users import UserRepository
from editor_dashboard.sources.base import ContributionSource, ProfileSource, StatisticsSource
from tests.factories import (
    CoiDisclosureFactory,
    FocusAreaFactory,
    InDevelopmentDraftFactory,
    RawEditFactory,
    TaskFactory,
    WikiUserFactory,
)

USERNAME = "Example Editor"


class _Sources:
    def __init__(self) -> None:
        self.profiles = AsyncMock(spec=ProfileSource)
        self.profiles.get_user_profile.return_value = WikiUserFactory.build()
        self.contributions = AsyncMock(spec=ContributionSource)
        self.contributions.get_recent_edits.return_value = [
            RawEditFactory.build(revision_id=i) for i in range(3)
        ]
        self.statistics = AsyncMock(spec=StatisticsSource)
        self.statistics.get_edit_counts.return_value = EditCountStats(
            username=USERNAME, user_id=12345, live_edit_count=5000
        )


def _build(
    sources: _Sources,
    clock,
    store: LocalCollectionStore | None = None,
    dashboard_cache: TTLCache | None = None,
) -> DashboardRepository:
    contributions = ContributionRepository(sources.contributions, TTLCache(60, clock=clock))
    return DashboardRepository(
        UserRepository(sources.profiles, TTLCache(300, clock=clock)),
        StatsRepository(sources.statistics, contributions, TTLCache(300, clock=clock)),
        contributions,
        store or LocalCollectionStore(),
        dashboard_cache if dashboard_cache is not None else TTLCache(60, clock=clock),
        max_recent_contributions=2,
    )


@pytest.fixture
def sources() -> _Sources:
    return _Sources()


@pytest.mark.asyncio
class TestRefreshDashboard:
    async def test_assembles_snapshot(self, sources: _Sources, fake_clock) -> None:
        store = LocalCollectionStore(
            drafts=[InDevelopmentDraftFactory.build()],
            tasks=[TaskFactory.build()],
            focus_areas=[FocusAreaFactory.build()],
            coi_disclosures=[CoiDisclosureFactory.build()],
        )
        repo = _build(sources, fake_clock, store)
        before = datetime.now(tz=timezone.utc)

        dashboard = await repo.refresh_dashboard(USERNAME)

        assert dashboard.user.username == USERNAME
        assert dashboard.stats.total_edits == 5000
        assert len(dashboard.recent_contributions) == 2
        assert dashboard.drafts == store.drafts()
        assert dashboard.tasks == store.tasks()
        assert dashboard.focus_areas == store.focus_areas()
        assert dashboard.coi_disclosures == store.coi_disclosures()
        assert dashboard.last_updated >= before
        assert dashboard.last_updated.tzinfo is not None

    async def test_store_changes_after_refresh_do_not_leak(
        self, sources: _Sources, fake_clock
    ) -> None:
        store = LocalCollectionStore()
        repo = _build(sources, fake_clock, store)

        dashboard = await repo.refresh_dashboard(USERNAME)
        store.add_task("Added after refresh")

        assert dashboard.tasks == ()

    async def test_upstream_error_propagates_unchanged(
        self, sources: _Sources, fake_clock
    ) -> None:
        error = UpstreamUnavailableError("xtools: HTTP 503", source="xtools", status_code=503)
        sources.statistics.get_edit_counts.side_effect = error

        with pytest.raises(UpstreamUnavailableError) as excinfo:
            await _build(sources, fake_clock).refresh_dashboard(USERNAME)

        assert excinfo.value is error

    async def test_user_not_found_propagates(self, sources: _Sources, fake_clock) -> None:
        sources.profiles.get_user_profile.side_effect = UserNotFoundError(
            USERNAME, source="mediawiki"
        )
        with pytest.raises(UserNotFoundError):
            await _build(sources, fake_clock).get_dashboard(USERNAME)

    async def test_failed_refresh_keeps_previous_snapshot(
        self, sources: _Sources, fake_clock
    ) -> None:
        # Frozen clock: the snapshot stays fresh while the upstream caches expire.
        repo = _build(sources, fake_clock, dashboard_cache=TTLCache(60, clock=lambda: 0.0))
        first = await repo.refresh_dashboard(USERNAME)

        fake_clock.advance(301)
        sources.profiles.get_user_profile.side_effect = UpstreamUnavailableError(
            "mediawiki: HTTP 502", source="mediawiki", status_code=502
        )
        with pytest.raises(UpstreamUnavailableError):
            await repo.refresh_dashboard(USERNAME)

        assert await repo.get_dashboard(USERNAME) is first

    async def test_fetches_run_concurrently(self, sources: _Sources, fake_clock) -> None:
        in_flight = 0
        peak = 0

        async def _tracked(result):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return result

        user = WikiUserFactory.build()
        counts = EditCountStats(username=USERNAME, user_id=1, live_edit_count=1)

        async def _profile(username):
            return await _tracked(user)

        async def _edits(username, limit):
            return await _tracked([])

        async def _counts(username):
            return await _tracked(counts)

        sources.profiles.get_user_profile.side_effect = _profile
        sources.contributions.get_recent_edits.side_effect = _edits
        sources.statistics.get_edit_counts.side_effect = _counts

        await _build(sources, fake_clock).refresh_dashboard(USERNAME)

        assert peak >= 3

    async def test_dashboard_user_var_set_during_refresh(
        self, sources: _Sources, fake_clock
    ) -> None:
        seen: list[str | None] = []

        async def _profile(username: str):
            seen.append(dashboard_user_var.get())
            return WikiUserFactory.build()

        sources.profiles.get_user_profile.side_effect = _profile

        await _build(sources, fake_clock).refresh_dashboard(USERNAME)

        assert seen == [USERNAME]
        assert dashboard_user_var.get() is None


@pytest.mark.asyncio
class TestGetDashboard:
    async def test_cache_hit_returns_same_snapshot(self, sources: _Sources, fake_clock) -> None:
        repo = _build(sources, fake_clock)

        first = await repo.get_dashboard(USERNAME)
        second = await repo.get_dashboard(USERNAME)

        assert second is first
        sources.profiles.get_user_profile.assert_awaited_once()

    async def test_refreshes_after_ttl(self, sources: _Sources, fake_clock) -> None:
        repo = _build(sources, fake_clock)

        first = await repo.get_dashboard(USERNAME)
        fake_clock.advance(61)
        second = await repo.get_dashboard(USERNAME)

        assert second is not first

    async def test_cached_per_username(self, sources: _Sources, fake_clock) -> None:
        repo = _build(sources, fake_clock)

        await repo.get_dashboard(USERNAME)
        await repo.get_dashboard("Other Editor")

        assert sources.profiles.get_user_profile.await_count == 2

    async def test_invalidate_forces_refresh(self, sources: _Sources, fake_clock) -> None:
        repo = _build(sources, fake_clock)

        first = await repo.get_dashboard(USERNAME)
        repo.invalidate(USERNAME)

        assert await repo.get_dashboard(USERNAME) is not first

    async def test_stats_type_is_editor_stats(self, sources: _Sources, fake_clock) -> None:
        dashboard = await _build(sources, fake_clock).get_dashboard(USERNAME)
        assert isinstance(dashboard.stats, EditorStats)
