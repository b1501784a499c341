"""MediaWiki Action API source for user profiles and contributions."""

from editor_dashboard.sources.wikipedia.client import MediaWikiClient

__all__ = ["MediaWikiClient"]
