"""Abstract ports for the upstream data the dashboard consumes.

The repositories depend on these interfaces only.  Concrete
implementations live in :mod:`editor_dashboard.sources.wikipedia`,
:mod:`editor_dashboard.sources.xtools` and
:mod:`editor_dashboard.sources.wikimedia`; tests substitute in-memory doubles.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from editor_dashboard.core.entities import ArticlePageviews, EditCountStats, RawEdit, WikiUser


class ProfileSource(ABC):
    """Looks up a Wikipedia user's public profile."""

    @abstractmethod
    async def get_user_profile(self, username: str) -> WikiUser:
        """Return the profile of *username*.

        Raises:
            UserNotFoundError: If the username does not exist upstream.
            UpstreamUnavailableError: If the source cannot be reached.
        """


class ContributionSource(ABC):
    """Lists a user's most recent edits, newest first."""

    @abstractmethod
    async def get_recent_edits(self, username: str, limit: int) -> list[RawEdit]:
        """Return at most *limit* unclassified edits by *username*.

        Raises:
            UserNotFoundError: If the username is rejected upstream.
            UpstreamUnavailableError: If the source cannot be reached.
        """


class StatisticsSource(ABC):
    """Reports aggregate edit counts for a user."""

    @abstractmethod
    async def get_edit_counts(self, username: str) -> EditCountStats:
        """Return aggregate counts for *username*.

        Raises:
            UserNotFoundError: If the username does not exist upstream.
            UpstreamUnavailableError: If the source cannot be reached.
        """


class PageviewSource(ABC):
    """Reports daily pageviews of a single article."""

    @abstractmethod
    async def get_article_pageviews(self, title: str, start: date, end: date) -> ArticlePageviews:
        """Return the daily views of *title* between *start* and *end*, inclusive.

        An article without pageview data yields zero views, not an error.

        Raises:
            UpstreamUnavailableError: If the source cannot be reached.
        """
