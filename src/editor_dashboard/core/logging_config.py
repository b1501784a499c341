"""Structured logging configuration using structlog.

Call ``configure_logging()`` once at startup (``DashboardService.from_settings``
does it for you).  Modules then use either the stdlib logging API or
structlog directly:

Stdlib usage::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("message %s", value)

Structlog usage (richer context binding)::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("dashboard.refreshed", username="Example", contributions=50)

While a dashboard refresh is running, ``dashboard_user_var`` holds the
username being refreshed and is merged into every record emitted by the
repositories and HTTP clients underneath it.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# ---------------------------------------------------------------------------
# Context variable, set by DashboardRepository.refresh_dashboard
# ---------------------------------------------------------------------------

dashboard_user_var: ContextVar[str | None] = ContextVar("dashboard_user", default=None)
"""Username of the dashboard currently being refreshed, if any."""


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SENSITIVE_HEADERS: frozenset[str] = frozenset({"authorization", "cookie", "set-cookie"})
"""Lower-cased header names masked wherever they appear in an event dict,
top-level or inside a ``headers`` mapping."""


def _mask_sensitive_headers(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace sensitive header values with ``"[REDACTED]"``."""
    for key in list(event_dict):
        if key.lower() in _SENSITIVE_HEADERS:
            event_dict[key] = "[REDACTED]"
    headers = event_dict.get("headers")
    if isinstance(headers, dict):
        event_dict["headers"] = {
            name: "[REDACTED]" if str(name).lower() in _SENSITIVE_HEADERS else value
            for name, value in headers.items()
        }
    return event_dict


def _inject_dashboard_user(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add ``dashboard_user`` to the event dict while a refresh is running."""
    username = dashboard_user_var.get()
    if username is not None and "dashboard_user" not in event_dict:
        event_dict["dashboard_user"] = username
    return event_dict


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        _inject_dashboard_user,
        _mask_sensitive_headers,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _stdout_handler(pre_chain: list[Processor], renderer: Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and stdlib logging.

    ``DEBUG`` selects structlog's coloured ``ConsoleRenderer``; every other
    level emits newline-delimited JSON.  Each record carries ``timestamp``,
    ``level``, ``logger`` and ``event``, plus ``dashboard_user`` during a
    refresh.  Outside ``DEBUG`` the httpx and httpcore loggers are raised to
    ``WARNING``.

    Calling this more than once is safe: the root handler is replaced, not
    duplicated.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``,
            ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive.
    """
    name = log_level.upper()
    verbose = name == "DEBUG"
    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True) if verbose else structlog.processors.JSONRenderer()
    )
    processors = _shared_processors()

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stdout_handler(processors, renderer))
    root.setLevel(getattr(logging, name, logging.INFO))

    transport_level = logging.NOTSET if verbose else logging.WARNING
    for transport_logger in ("httpx", "httpcore"):
        logging.getLogger(transport_logger).setLevel(transport_level)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
