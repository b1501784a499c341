"""Shared JSON-over-HTTP plumbing for the Wikimedia sources.

:class:`JsonApiClient` wraps an :class:`httpx.AsyncClient` with the
politeness rules Wikimedia asks of automated tools:

- a descriptive ``User-Agent`` on every request,
- at most ``max_concurrent_requests`` requests in flight
  (``asyncio.Semaphore``),
- a courtesy sleep of ``min_request_interval`` seconds after each request.

Transport failures are retried here, and only here, with tenacity: HTTP
429, 5xx and network errors are attempted up to ``max_retries`` times with
exponential backoff.  ``Retry-After`` wins when the server sends it, capped
at ``max_retry_after`` seconds.  Other HTTP errors fail immediately.
Everything that still fails is raised as
:class:`~editor_dashboard.core.exceptions.UpstreamUnavailableError` or
:class:`~editor_dashboard.core.exceptions.UpstreamRateLimitError`.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from editor_dashboard.config.settings import Settings
from editor_dashboard.core.exceptions import (
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

_DEFAULT_RETRY_AFTER_SECONDS: float = 60.0


class JsonApiClient:
    """Base class for rate-limited, retrying JSON API clients.

    Args:
        user_agent: Value of the ``User-Agent`` header.
        http_client: Optional injected :class:`httpx.AsyncClient`.  The
            caller keeps ownership of an injected client; a client created
            here is closed by :meth:`aclose`.
        timeout: Transport timeout in seconds for a client created here.
        max_concurrent_requests: Semaphore size.
        min_request_interval: Courtesy sleep after every request, in seconds.
        max_retries: Attempts per request for retryable failures (>= 1).
        retry_backoff: Base backoff delay in seconds.
        max_retry_after: Upper bound on a server-sent ``Retry-After`` wait.
    """

    source_name: str = "http"

    def __init__(
        self,
        user_agent: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        max_concurrent_requests: int = 5,
        min_request_interval: float = 0.2,
        max_retries: int = 3,
        retry_backoff: float = 1.0,
        max_retry_after: float = 120.0,
    ) -> None:
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
        self._user_agent = user_agent
        self._semaphore = asyncio.Semaphore(max_concurrent_requests)
        self._min_request_interval = min_request_interval
        self._max_retries = max(1, max_retries)
        self._retry_backoff = retry_backoff
        self._max_retry_after = max_retry_after

    @staticmethod
    def transport_options(settings: Settings) -> dict[str, Any]:
        """Return constructor keyword arguments derived from *settings*."""
        return {
            "user_agent": settings.user_agent,
            "timeout": settings.http_timeout_seconds,
            "max_concurrent_requests": settings.max_concurrent_requests,
            "min_request_interval": settings.min_request_interval_seconds,
            "max_retries": settings.max_retries,
            "retry_backoff": settings.retry_backoff_seconds,
            "max_retry_after": settings.max_retry_after_seconds,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> JsonApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET *url* and return the decoded JSON body.

        Raises:
            UpstreamRateLimitError: If every attempt was answered with HTTP 429.
            UpstreamUnavailableError: On any other HTTP, network or decoding
                failure that survives the retry policy.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=_RetryAfterOrExponential(self._retry_backoff, self._max_retry_after),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    payload = await self._get_once(url, params)
        except httpx.HTTPStatusError as exc:
            raise self._status_error(exc, url) from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailableError(
                f"{self.source_name}: request error calling {url}: {exc}",
                source=self.source_name,
            ) from exc
        return payload

    async def _get_once(self, url: str, params: dict[str, Any] | None) -> Any:
        async with self._semaphore:
            try:
                response = await self._http_client.get(
                    url,
                    params=params,
                    headers={"User-Agent": self._user_agent},
                )
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as exc:
                    raise UpstreamUnavailableError(
                        f"{self.source_name}: invalid JSON from {url}",
                        source=self.source_name,
                    ) from exc
            finally:
                await asyncio.sleep(self._min_request_interval)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, httpx.HTTPStatusError):
            reason = f"HTTP {exc.response.status_code}"
        else:
            reason = type(exc).__name__
        logger.warning(
            "%s: %s, retrying in %.1f s (attempt %d/%d)",
            self.source_name,
            reason,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
            retry_state.attempt_number,
            self._max_retries,
        )

    def _status_error(self, exc: httpx.HTTPStatusError, url: str) -> UpstreamUnavailableError:
        status = exc.response.status_code
        if status == 429:
            retry_after = _retry_after(exc.response)
            return UpstreamRateLimitError(
                f"{self.source_name}: rate limited (HTTP 429)",
                retry_after=_DEFAULT_RETRY_AFTER_SECONDS if retry_after is None else retry_after,
                source=self.source_name,
            )
        return UpstreamUnavailableError(
            f"{self.source_name}: HTTP {status} from {url}",
            source=self.source_name,
            status_code=status,
        )


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------


def _is_transient(exc: BaseException) -> bool:
    """Return True for HTTP 429, 5xx and network errors."""
    if isinstance(exc, httpx.RequestError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or 500 <= status < 600
    return False


class _RetryAfterOrExponential(wait_base):
    """Wait ``Retry-After`` seconds when the server sent it, else back off exponentially.

    ``Retry-After`` is capped at *max_retry_after*.
    """

    def __init__(self, backoff: float, max_retry_after: float) -> None:
        self._exponential = wait_exponential(multiplier=backoff)
        self._max_retry_after = max_retry_after

    def __call__(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, httpx.HTTPStatusError):
            retry_after = _retry_after(exc.response)
            if retry_after is not None:
                return min(retry_after, self._max_retry_after)
        return self._exponential(retry_state)


def _retry_after(response: httpx.Response) -> float | None:
    """Return the ``Retry-After`` header in seconds, or ``None`` if absent/unparseable."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an API timestamp into a UTC-aware datetime.

    Accepts MediaWiki ISO 8601 (``"2024-05-01T12:00:00Z"``) and XTools
    ``"2024-05-01 12:00:00"`` forms.  Returns ``None`` for empty or
    unparseable values.
    """
    if not value:
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("could not parse timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
