"""Display helpers shared by presentation layers.

Number formatting, Wikipedia/XTools URL builders and human-readable labels
for the enumerated entity fields.  Colours and icons are a presentation
concern and live outside this package.
"""

from __future__ import annotations

import urllib.parse

from editor_dashboard.core.entities import (
    ContributionType,
    DraftStatus,
    FocusAreaStatus,
    TaskPriority,
    TaskStatus,
)

DEFAULT_WIKI_PROJECT: str = "en.wikipedia"

XTOOLS_BASE: str = "https://xtools.wmcloud.org"

# Characters left unescaped, matching JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_NAMESPACE_PREFIXES: dict[str, str] = {
    "article": "",
    "user": "User:",
    "draft": "Draft:",
    "talk": "Talk:",
}

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

DRAFT_STATUS_LABELS: dict[DraftStatus, str] = {
    DraftStatus.PENDING_REVIEW: "Pending Review",
    DraftStatus.UNDER_REVIEW: "Under Review",
    DraftStatus.ACCEPTED: "Accepted",
    DraftStatus.DECLINED: "Declined",
    DraftStatus.IN_DEVELOPMENT: "In Development",
    DraftStatus.ABANDONED: "Abandoned",
}

CONTRIBUTION_TYPE_LABELS: dict[ContributionType, str] = {
    ContributionType.MAJOR_EXPANSION: "Major Expansion",
    ContributionType.MINOR_EDIT: "Minor Edit",
    ContributionType.NEW_ARTICLE: "New Article",
    ContributionType.REVERT: "Revert",
    ContributionType.TALK_PAGE: "Talk Page",
}

TASK_PRIORITY_LABELS: dict[TaskPriority, str] = {
    TaskPriority.HIGH: "High",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.LOW: "Low",
}

TASK_STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.NOT_STARTED: "Not Started",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.BLOCKED: "Blocked",
}

FOCUS_AREA_STATUS_LABELS: dict[FocusAreaStatus, str] = {
    FocusAreaStatus.ACTIVE: "Active",
    FocusAreaStatus.PLANNED: "Planned",
    FocusAreaStatus.COMPLETED: "Completed",
    FocusAreaStatus.BLOCKED: "Blocked",
}


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def format_byte_diff(byte_diff: int) -> str:
    """Format a signed byte delta, e.g. ``+100``, ``-2.5KB``, ``+1.5MB``.

    Non-negative values carry an explicit ``+``; zero is ``+0``.
    """
    sign = "+" if byte_diff >= 0 else ""
    magnitude = abs(byte_diff)
    if magnitude >= 1_000_000:
        return f"{sign}{byte_diff / 1_000_000:.1f}MB"
    if magnitude >= 1_000:
        return f"{sign}{byte_diff / 1_000:.1f}KB"
    return f"{sign}{byte_diff}"


def format_edit_count(count: int) -> str:
    """Format an edit count, e.g. ``999``, ``1.5K``, ``2.5M``."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


def _encode(value: str) -> str:
    return urllib.parse.quote(value, safe=_URI_COMPONENT_SAFE)


def wikipedia_url(
    title: str,
    namespace: str = "article",
    wiki_project: str = DEFAULT_WIKI_PROJECT,
) -> str:
    """Return the canonical page URL for *title*.

    Args:
        title: Page title without namespace prefix.  Spaces become
            underscores before encoding.
        namespace: One of ``"article"``, ``"user"``, ``"draft"``, ``"talk"``.
        wiki_project: Wiki project identifier (``"en.wikipedia"``).

    Raises:
        ValueError: If *namespace* is not recognised.
    """
    if namespace not in _NAMESPACE_PREFIXES:
        raise ValueError(
            f"Unknown namespace {namespace!r}; expected one of {sorted(_NAMESPACE_PREFIXES)}"
        )
    encoded = _encode(title.replace(" ", "_"))
    return f"https://{wiki_project}.org/wiki/{_NAMESPACE_PREFIXES[namespace]}{encoded}"


def xtools_url(username: str, wiki_project: str = DEFAULT_WIKI_PROJECT) -> str:
    """Return the XTools edit-counter page for *username*."""
    return f"{XTOOLS_BASE}/ec/{wiki_project}.org/{_encode(username)}"


def contributions_url(username: str, wiki_project: str = DEFAULT_WIKI_PROJECT) -> str:
    return f"https://{wiki_project}.org/wiki/Special:Contributions/{_encode(username)}"


def afc_log_url(draft_title: str, wiki_project: str = DEFAULT_WIKI_PROJECT) -> str:
    """Return the AfC review log URL for the draft named *draft_title*."""
    page = _encode(f"Draft:{draft_title}")
    return f"https://{wiki_project}.org/wiki/Special:Log?type=review&page={page}"
