"""XTools client implementing :class:`~editor_dashboard.sources.base.StatisticsSource`.

Uses the ``/user/simple_editcount/{project}.org/{username}`` endpoint,
which reports live and deleted edit totals together with the first and
latest edit timestamps.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import httpx

from editor_dashboard.config.settings import Settings
from editor_dashboard.core.entities import EditCountStats
from editor_dashboard.core.exceptions import UpstreamUnavailableError, UserNotFoundError
from editor_dashboard.sources.base import StatisticsSource
from editor_dashboard.sources.http import JsonApiClient, parse_timestamp

logger = logging.getLogger(__name__)


class XToolsClient(JsonApiClient, StatisticsSource):
    """Aggregate edit-count source backed by the XTools REST API.

    Args:
        api_base: XTools API root, e.g. ``"https://xtools.wmcloud.org/api"``.
        wiki_project: Wiki project identifier (``"en.wikipedia"``).
        user_agent: Value of the ``User-Agent`` header.
        http_client: Optional injected :class:`httpx.AsyncClient` for testing.
        **transport: Remaining :class:`~editor_dashboard.sources.http.JsonApiClient`
            options.
    """

    source_name = "xtools"

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
    ) -> XToolsClient:
        return cls(
            settings.xtools_api_base,
            settings.wiki_project,
            http_client=http_client,
            **cls.transport_options(settings),
        )

    def edit_count_url(self, username: str) -> str:
        encoded = urllib.parse.quote(username, safe="")
        return f"{self.api_base}/user/simple_editcount/{self.wiki_project}.org/{encoded}"

    async def get_edit_counts(self, username: str) -> EditCountStats:
        """Fetch live/deleted edit totals for *username*.

        Raises:
            UserNotFoundError: On HTTP 404.
            UpstreamUnavailableError: On any other HTTP or network failure,
                or when the body carries an ``error`` key.
        """
        url = self.edit_count_url(username)
        try:
            data = await self._get_json(url)
        except UpstreamUnavailableError as exc:
            if exc.status_code == 404:
                raise UserNotFoundError(username, source=self.source_name) from exc
            raise

        if not isinstance(data, dict):
            raise UpstreamUnavailableError(
                f"xtools: unexpected response shape from {url}",
                source=self.source_name,
            )
        if data.get("error"):
            raise UpstreamUnavailableError(
                f"xtools: {data['error']}",
                source=self.source_name,
            )

        return EditCountStats(
            username=data.get("username", username),
            user_id=int(data.get("user_id") or 0),
            live_edit_count=int(data.get("live_edit_count") or 0),
            deleted_edit_count=int(data.get("deleted_edit_count") or 0),
            first_edit=parse_timestamp(data.get("first_edit")),
            latest_edit=parse_timestamp(data.get("latest_edit")),
        )
