"""MediaWiki Action API constants used by
:class:`~editor_dashboard.sources.wikipedia.client.MediaWikiClient`.

Endpoint URLs, the User-Agent and politeness limits are runtime settings
(:class:`~editor_dashboard.config.settings.Settings`); this module holds
only the fixed request shapes.
"""

from __future__ import annotations

USERCONTRIBS_BATCH_LIMIT: int = 500
"""Maximum ``uclimit`` accepted by the API for unprivileged clients."""

USERCONTRIBS_PROPS: str = "ids|title|timestamp|comment|size|sizediff|flags|tags"
"""``ucprop`` value: everything the classifier and contribution list need."""

USER_PROPS: str = "registration|editcount|groups"
"""``usprop`` value for ``list=users`` profile lookups."""

BASE_QUERY_PARAMS: dict[str, str | int] = {
    "action": "query",
    "format": "json",
    "formatversion": 2,
}
"""Parameters sent with every query.  ``formatversion=2`` yields real
booleans (``"minor": true``) instead of empty-string flags."""

BAD_USER_ERROR_PREFIX: str = "baduser"
"""MediaWiki error codes starting with this mean the username is invalid."""
