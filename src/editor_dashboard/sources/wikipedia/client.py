"""MediaWiki Action API client for user profiles and contributions.

Implements :class:`~editor_dashboard.sources.base.ProfileSource` via
``action=query&list=users`` and
:class:`~editor_dashboard.sources.base.ContributionSource` via
``action=query&list=usercontribs``.  Contributions are paginated with
``uccontinue`` tokens in batches of at most
:data:`~editor_dashboard.sources.wikipedia.config.USERCONTRIBS_BATCH_LIMIT`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from editor_dashboard.config.settings import Settings
from editor_dashboard.core.entities import RawEdit, WikiUser
from editor_dashboard.core.exceptions import UpstreamUnavailableError, UserNotFoundError
from editor_dashboard.sources.base import ContributionSource, ProfileSource
from editor_dashboard.sources.http import JsonApiClient, parse_timestamp
from editor_dashboard.sources.wikipedia.config import (
    BAD_USER_ERROR_PREFIX,
    BASE_QUERY_PARAMS,
    USER_PROPS,
    USERCONTRIBS_BATCH_LIMIT,
    USERCONTRIBS_PROPS,
)

logger = logging.getLogger(__name__)


class MediaWikiClient(JsonApiClient, ProfileSource, ContributionSource):
    """Profile and contribution source backed by one wiki's Action API.

    Args:
        endpoint: Fully resolved ``api.php`` URL.
        user_agent: Value of the ``User-Agent`` header.
        http_client: Optional injected :class:`httpx.AsyncClient` for testing.
        **transport: Remaining :class:`~editor_dashboard.sources.http.JsonApiClient`
            options (timeout, concurrency, retry policy).
    """

    source_name = "mediawiki"

    def __init__(
        self,
        endpoint: str,
        user_agent: str,
        http_client: httpx.AsyncClient | None = None,
        **transport: Any,
    ) -> None:
        super().__init__(user_agent, http_client=http_client, **transport)
        self.endpoint = endpoint

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> MediaWikiClient:
        return cls(
            settings.mediawiki_endpoint,
            http_client=http_client,
            **cls.transport_options(settings),
        )

    # ------------------------------------------------------------------
    # ProfileSource
    # ------------------------------------------------------------------

    async def get_user_profile(self, username: str) -> WikiUser:
        """Fetch registration date, edit count and groups for *username*.

        Raises:
            UserNotFoundError: If the API reports the user as missing or
                invalid.
            UpstreamUnavailableError: On HTTP, network or API errors.
        """
        data = await self._query({
            "list": "users",
            "ususers": username,
            "usprop": USER_PROPS,
        }, username)
        users = data.get("query", {}).get("users") or []
        if not users:
            raise UserNotFoundError(username, source=self.source_name)

        entry = users[0]
        if entry.get("missing") or entry.get("invalid"):
            raise UserNotFoundError(username, source=self.source_name)

        return WikiUser(
            username=entry.get("name", username),
            user_id=int(entry.get("userid", 0)),
            registered_at=parse_timestamp(entry.get("registration")),
            edit_count=int(entry.get("editcount") or 0),
            groups=tuple(entry.get("groups") or ()),
        )

    # ------------------------------------------------------------------
    # ContributionSource
    # ------------------------------------------------------------------

    async def get_recent_edits(self, username: str, limit: int = 50) -> list[RawEdit]:
        """Fetch up to *limit* of the user's edits, newest first.

        Paginates via ``uccontinue`` until *limit* edits have been read or
        the API reports no further results.

        Raises:
            UserNotFoundError: If the API rejects the username.
            UpstreamUnavailableError: On HTTP, network or API errors.
        """
        edits: list[RawEdit] = []
        continue_token: str | None = None

        while len(edits) < limit:
            params: dict[str, Any] = {
                "list": "usercontribs",
                "ucuser": username,
                "ucprop": USERCONTRIBS_PROPS,
                "uclimit": min(USERCONTRIBS_BATCH_LIMIT, limit - len(edits)),
                "ucdir": "older",
            }
            if continue_token:
                params["uccontinue"] = continue_token

            data = await self._query(params, username)
            contribs = data.get("query", {}).get("usercontribs") or []

            for contrib in contribs:
                edit = _to_raw_edit(contrib)
                if edit is not None:
                    edits.append(edit)

            continue_token = (data.get("continue") or {}).get("uccontinue")
            if not continue_token or not contribs:
                break

        logger.debug("mediawiki: fetched %d edits for %s", len(edits), username)
        return edits[:limit]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _query(self, params: dict[str, Any], username: str) -> dict[str, Any]:
        """Run one ``action=query`` request and surface API-level errors."""
        data = await self._get_json(self.endpoint, {**BASE_QUERY_PARAMS, **params})
        if not isinstance(data, dict):
            raise UpstreamUnavailableError(
                f"mediawiki: unexpected response shape from {self.endpoint}",
                source=self.source_name,
            )
        error = data.get("error")
        if error:
            code = str(error.get("code", ""))
            if code.startswith(BAD_USER_ERROR_PREFIX):
                raise UserNotFoundError(username, source=self.source_name)
            raise UpstreamUnavailableError(
                f"mediawiki: API error {code}: {error.get('info', '')}",
                source=self.source_name,
            )
        return data


def _to_raw_edit(contrib: dict[str, Any]) -> RawEdit | None:
    """Map one ``usercontribs`` item to a :class:`RawEdit`.

    Returns ``None`` (and logs) for items without a usable timestamp.
    """
    timestamp = parse_timestamp(contrib.get("timestamp"))
    if timestamp is None:
        logger.warning("mediawiki: skipping revision %s without timestamp", contrib.get("revid"))
        return None
    return RawEdit(
        revision_id=int(contrib.get("revid", 0)),
        title=contrib.get("title", ""),
        namespace=int(contrib.get("ns", 0)),
        timestamp=timestamp,
        size_diff=int(contrib.get("sizediff") or 0),
        parent_id=int(contrib.get("parentid") or 0),
        tags=frozenset(contrib.get("tags") or ()),
        minor=bool(contrib.get("minor", False)),
        comment=contrib.get("comment") or "",
    )
