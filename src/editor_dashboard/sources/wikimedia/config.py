"""Wikimedia pageview API path segments used by
:class:`~editor_dashboard.sources.wikimedia.client.WikimediaRestClient`.
"""

from __future__ import annotations

PAGEVIEW_ACCESS: str = "all-access"
"""Desktop, mobile web and mobile app views combined."""

PAGEVIEW_AGENT: str = "all-agents"
"""Counts users, spiders and automated agents alike."""

PAGEVIEW_GRANULARITY: str = "daily"

PAGEVIEW_DATE_FORMAT: str = "%Y%m%d"
"""Format of the ``start``/``end`` path segments and the first eight
characters of each item's ``timestamp`` (``"2024050100"``)."""
