"""Wikimedia REST API source for per-article pageviews."""

from editor_dashboard.sources.wikimedia.client import WikimediaRestClient

__all__ = ["WikimediaRestClient"]
