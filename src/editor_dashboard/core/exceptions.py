"""Exception hierarchy for the editor dashboard.

All custom exceptions subclass ``EditorDashboardError`` so callers can catch
the whole hierarchy with a single ``except`` clause.

Hierarchy::

    EditorDashboardError
    ├── UpstreamUnavailableError  (source)
    │   └── UpstreamRateLimitError (retry_after: float)
    ├── UserNotFoundError         (username, source)
    ├── InvalidEntityError        (also a ValueError)
    └── RecordNotFoundError       (also a KeyError)
"""

from __future__ import annotations


class EditorDashboardError(Exception):
    """Base class for all editor dashboard exceptions."""


# ---------------------------------------------------------------------------
# Upstream exceptions
# ---------------------------------------------------------------------------


class UpstreamUnavailableError(EditorDashboardError):
    """Raised when a profile, contribution or statistics source fails.

    Covers HTTP errors, network errors and MediaWiki ``error`` payloads.
    Repositories never retry; the error reaches the caller unchanged.

    Args:
        message: Human-readable description of the failure.
        source: Name of the failing source (e.g. ``"mediawiki"``).
        status_code: HTTP status of the failed response, if there was one.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class UpstreamRateLimitError(UpstreamUnavailableError):
    """Raised when a source keeps answering HTTP 429 after all retries.

    Args:
        message: Human-readable description of the rate limit.
        retry_after: Seconds the upstream asked us to wait.  Defaults to 60.
        source: Name of the rate-limited source.
    """

    def __init__(
        self,
        message: str,
        retry_after: float = 60.0,
        source: str | None = None,
    ) -> None:
        super().__init__(message, source=source, status_code=429)
        self.retry_after = retry_after


class UserNotFoundError(EditorDashboardError):
    """Raised when the requested username does not exist upstream.

    Kept distinct from :class:`UpstreamUnavailableError` so a presentation
    layer can ask the user to correct the name instead of retrying.

    Args:
        username: The username that was looked up.
        source: Name of the source that reported it missing.
    """

    def __init__(self, username: str, source: str | None = None) -> None:
        msg = f"User not found: {username!r}"
        if source:
            msg += f" (source '{source}')"
        super().__init__(msg)
        self.username = username
        self.source = source


# ---------------------------------------------------------------------------
# Programming errors
# ---------------------------------------------------------------------------


class InvalidEntityError(EditorDashboardError, ValueError):
    """Raised when an entity is constructed with inconsistent fields.

    For example a submitted draft without ``submitted_at`` or a task whose
    ``completed_at`` disagrees with its status.  These are programming
    errors and are never coerced.
    """


class RecordNotFoundError(EditorDashboardError, KeyError):
    """Raised when the local collection store has no record with the given id.

    Args:
        collection: Collection name (``"tasks"``, ``"drafts"``, ...).
        record_id: The id that was not found.
    """

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"No {collection} record with id {record_id!r}")
        self.collection = collection
        self.record_id = record_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])
