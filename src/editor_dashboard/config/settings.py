"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
tunable of the dashboard core (upstream endpoints, HTTP politeness, cache
lifetimes, classifier threshold) lives here; never call ``os.getenv``
directly elsewhere in the codebase.

Usage::

    from editor_dashboard.config.settings import get_settings

    settings = get_settings()
    ttl = settings.dashboard_cache_ttl_seconds
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dashboard configuration backed by environment variables and an optional .env file.

    No field is required: the defaults describe a read-only dashboard against
    English Wikipedia.  Environment variable names are the upper-cased field
    names (e.g. ``DEFAULT_USERNAME``, ``DASHBOARD_CACHE_TTL_SECONDS``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    default_username: str = ""
    """Wikipedia username the dashboard is built for when the caller passes none."""

    # ------------------------------------------------------------------
    # Upstream endpoints
    # ------------------------------------------------------------------

    wiki_project: str = "en.wikipedia"
    """Wiki project identifier, mapped to the host ``{wiki_project}.org``."""

    mediawiki_api_url: str = "https://{project}.org/w/api.php"
    """MediaWiki Action API URL template.  ``{project}`` is replaced with
    :attr:`wiki_project`."""

    xtools_api_base: str = "https://xtools.wmcloud.org/api"
    """XTools REST API base URL used for aggregate edit counts."""

    wikimedia_rest_api_base: str = "https://wikimedia.org/api/rest_v1"
    """Wikimedia REST API base URL used for per-article pageviews."""

    user_agent: str = (
        "WikiEditorDashboard/1.0 (personal editor dashboard) python-httpx"
    )
    """User-Agent sent on every request.  Wikimedia requires a descriptive value."""

    # ------------------------------------------------------------------
    # HTTP transport
    # ------------------------------------------------------------------

    http_timeout_seconds: float = 30.0
    """Per-request timeout applied by the httpx transport."""

    max_concurrent_requests: int = 5
    """Upper bound on in-flight requests per client."""

    min_request_interval_seconds: float = 0.2
    """Courtesy sleep after every request (5 req/s)."""

    max_retries: int = 3
    """Attempts per request for rate-limited, 5xx and network failures."""

    retry_backoff_seconds: float = 1.0
    """Base delay for exponential backoff between attempts."""

    max_retry_after_seconds: float = 120.0
    """Cap on the wait a server can request through ``Retry-After``."""

    # ------------------------------------------------------------------
    # Caches
    # ------------------------------------------------------------------

    user_cache_ttl_seconds: float = 300.0
    contribution_cache_ttl_seconds: float = 60.0
    stats_cache_ttl_seconds: float = 300.0
    dashboard_cache_ttl_seconds: float = 60.0
    pageview_cache_ttl_seconds: float = 3600.0

    # ------------------------------------------------------------------
    # Dashboard shape
    # ------------------------------------------------------------------

    max_recent_contributions: int = 50
    """Number of recent contributions carried in each dashboard snapshot."""

    activity_days: int = 30
    """Window (in days) of the daily activity series."""

    refresh_interval_seconds: float = 300.0
    """Age after which ``DashboardService.is_stale`` reports a snapshot as due
    for refresh."""

    pageview_days: int = 30
    """Window (in days) summed by the article impact metrics."""

    major_expansion_threshold_bytes: int = 1000
    """Absolute byte delta above which an edit counts as a major expansion."""

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def mediawiki_endpoint(self) -> str:
        """Return the fully resolved MediaWiki Action API URL."""
        return self.mediawiki_api_url.format(project=self.wiki_project)


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton.

    In tests, call ``get_settings.cache_clear()`` after patching environment
    variables.
    """
    return Settings()
