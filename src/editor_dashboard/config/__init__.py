"""Configuration package for the editor dashboard.

Re-exports the settings symbols so callers can write::

    from editor_dashboard.config import get_settings
"""

from __future__ import annotations

from editor_dashboard.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
