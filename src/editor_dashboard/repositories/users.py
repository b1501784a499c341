"""Cached access to Wikipedia user profiles."""

from __future__ import annotations

import logging

from editor_dashboard.core.cache import TTLCache
from editor_dashboard.core.entities import WikiUser
from editor_dashboard.sources.base import ProfileSource

logger = logging.getLogger(__name__)


class UserRepository:
    """Serve :class:`WikiUser` profiles from a TTL cache, fetching on miss.

    Args:
        source: Upstream profile source.
        cache: Cache owned by this repository, keyed by username.
    """

    def __init__(self, source: ProfileSource, cache: TTLCache[WikiUser]) -> None:
        self._source = source
        self._cache = cache

    async def get_user(self, username: str) -> WikiUser:
        cached = self._cache.get(username)
        if cached is not None:
            return cached
        user = await self._source.get_user_profile(username)
        self._cache.set(username, user)
        logger.debug("users: cached profile for %s", username)
        return user

    async def get_edit_count(self, username: str) -> int:
        """Return the profile's edit count (served from the same cache)."""
        user = await self.get_user(username)
        return user.edit_count
