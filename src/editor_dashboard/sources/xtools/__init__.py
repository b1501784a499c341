"""XTools REST API source for aggregate edit counts."""

from editor_dashboard.sources.xtools.client import XToolsClient

__all__ = ["XToolsClient"]
