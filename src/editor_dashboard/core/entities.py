"""Domain entities for the editor dashboard.

Every entity is an immutable (frozen, keyword-only) dataclass.  Enumerated
fields use ``str`` enums so values compare equal to their wire strings
(``ContributionType.REVERT == "revert"``).

Drafts are modelled as a tagged union: each review state is its own class
and carries exactly the fields that state guarantees.  A
:class:`SubmittedDraft` always has ``submitted_at`` and ``afc_log_url``; an
:class:`InDevelopmentDraft` never has them.  Constructing a variant with a
missing guaranteed field raises
:class:`~editor_dashboard.core.exceptions.InvalidEntityError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Union

from editor_dashboard.core.exceptions import InvalidEntityError

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ContributionType(str, Enum):
    """Semantic class of a single edit, assigned by the classifier."""

    MAJOR_EXPANSION = "major_expansion"
    MINOR_EDIT = "minor_edit"
    NEW_ARTICLE = "new_article"
    REVERT = "revert"
    TALK_PAGE = "talk_page"


class DraftStatus(str, Enum):
    """Articles for Creation review state of a draft."""

    PENDING_REVIEW = "pending_review"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    IN_DEVELOPMENT = "in_development"
    ABANDONED = "abandoned"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class FocusAreaStatus(str, Enum):
    ACTIVE = "active"
    PLANNED = "planned"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class ArticleQuality(str, Enum):
    """WikiProject assessment class tracked for focus-area articles."""

    STUB = "stub"
    START = "start"
    C_CLASS = "c_class"
    B_CLASS = "b_class"
    GA = "ga"
    FA = "fa"
    DRAFT = "draft"


def _require(entity: object, *names: str) -> None:
    """Raise :class:`InvalidEntityError` if any named attribute is ``None``."""
    missing = [name for name in names if getattr(entity, name) is None]
    if missing:
        raise InvalidEntityError(
            f"{type(entity).__name__} requires {', '.join(missing)}"
        )


# ---------------------------------------------------------------------------
# Edits and contributions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class RawEdit:
    """One edit as reported by a contribution source, before classification.

    Attributes:
        revision_id: Revision id of the edit.
        title: Title of the edited page, including any namespace prefix.
        namespace: Numeric MediaWiki namespace of the page.
        timestamp: When the edit was saved (UTC-aware).
        size_diff: Signed byte delta against the parent revision.
        parent_id: Parent revision id, ``0`` when the edit created the page.
        tags: Change tags attached to the edit.
        minor: Whether the editor flagged the edit as minor.
        comment: Edit summary.
    """

    revision_id: int
    title: str
    namespace: int
    timestamp: datetime
    size_diff: int
    parent_id: int = 0
    tags: frozenset[str] = frozenset()
    minor: bool = False
    comment: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(self.tags))


@dataclass(frozen=True, kw_only=True)
class Contribution:
    """A classified edit as shown on the dashboard.

    ``type`` is derived from the raw edit by
    :func:`editor_dashboard.core.classifier.classify`; build instances with
    :func:`~editor_dashboard.core.classifier.to_contribution`.
    """

    revision_id: int
    article_title: str
    article_url: str
    timestamp: datetime
    type: ContributionType
    byte_diff: int
    summary: str = ""
    is_minor: bool = False
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(self.tags))


# ---------------------------------------------------------------------------
# Drafts (tagged union)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class _DraftBase:
    id: str
    title: str
    page_url: str
    talk_page_url: str
    created_at: datetime
    last_edited_at: datetime
    coi_disclosed: bool = False
    coi_details: str | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if self.created_at > self.last_edited_at:
            raise InvalidEntityError(
                f"Draft {self.id!r}: created_at is after last_edited_at"
            )


@dataclass(frozen=True, kw_only=True)
class InDevelopmentDraft(_DraftBase):
    """A draft still being written; never submitted to AfC."""

    status: DraftStatus = field(default=DraftStatus.IN_DEVELOPMENT, init=False)
    submitted_at: None = field(default=None, init=False)
    afc_log_url: None = field(default=None, init=False)


@dataclass(frozen=True, kw_only=True)
class SubmittedDraft(_DraftBase):
    """A draft waiting in the AfC queue (pending or under review)."""

    status: DraftStatus
    submitted_at: datetime
    afc_log_url: str

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.status not in (DraftStatus.PENDING_REVIEW, DraftStatus.UNDER_REVIEW):
            raise InvalidEntityError(
                f"SubmittedDraft cannot have status {self.status!r}"
            )
        _require(self, "submitted_at", "afc_log_url")


@dataclass(frozen=True, kw_only=True)
class AcceptedDraft(_DraftBase):
    """A draft accepted at AfC and moved to mainspace."""

    status: DraftStatus = field(default=DraftStatus.ACCEPTED, init=False)
    submitted_at: datetime
    afc_log_url: str
    accepted_at: datetime
    article_url: str

    def __post_init__(self) -> None:
        super().__post_init__()
        _require(self, "submitted_at", "afc_log_url", "accepted_at", "article_url")


@dataclass(frozen=True, kw_only=True)
class DeclinedDraft(_DraftBase):
    """A draft declined at AfC."""

    status: DraftStatus = field(default=DraftStatus.DECLINED, init=False)
    submitted_at: datetime
    afc_log_url: str
    declined_at: datetime
    decline_reason: str

    def __post_init__(self) -> None:
        super().__post_init__()
        _require(self, "submitted_at", "afc_log_url", "declined_at", "decline_reason")


@dataclass(frozen=True, kw_only=True)
class AbandonedDraft(_DraftBase):
    """A draft given up on, whether or not it was ever submitted."""

    status: DraftStatus = field(default=DraftStatus.ABANDONED, init=False)
    abandoned_at: datetime
    submitted_at: datetime | None = None
    afc_log_url: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        _require(self, "abandoned_at")


Draft = Union[InDevelopmentDraft, SubmittedDraft, AcceptedDraft, DeclinedDraft, AbandonedDraft]


def is_submitted_draft(draft: Draft) -> bool:
    """Return ``True`` for drafts currently in the AfC queue."""
    return isinstance(draft, SubmittedDraft)


def is_accepted_draft(draft: Draft) -> bool:
    return isinstance(draft, AcceptedDraft)


# ---------------------------------------------------------------------------
# Tasks, focus areas, disclosures
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class Task:
    """A personal to-do item.  ``completed_at`` is set iff the task is completed."""

    id: str
    title: str
    description: str
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime
    due_date: datetime | None = None
    related_articles: tuple[str, ...] = ()
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "related_articles", tuple(self.related_articles))
        is_completed = self.status == TaskStatus.COMPLETED
        if is_completed != (self.completed_at is not None):
            raise InvalidEntityError(
                f"Task {self.id!r}: completed_at must be set iff status is completed"
            )


@dataclass(frozen=True, kw_only=True)
class FocusAreaArticle:
    title: str
    url: str
    quality_status: ArticleQuality
    last_edited: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class FocusArea:
    """A topic the editor is working through, with its tracked articles."""

    id: str
    name: str
    description: str
    status: FocusAreaStatus
    articles: tuple[FocusAreaArticle, ...] = ()
    wiki_projects: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "articles", tuple(self.articles))
        object.__setattr__(self, "wiki_projects", tuple(self.wiki_projects))


@dataclass(frozen=True, kw_only=True)
class CoiDisclosure:
    id: str
    subject: str
    relationship: str
    disclosure_url: str
    disclosed_at: datetime
    is_active: bool = True


# ---------------------------------------------------------------------------
# Upstream views
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class WikiUser:
    username: str
    user_id: int
    registered_at: datetime | None
    edit_count: int
    groups: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(self.groups))


@dataclass(frozen=True, kw_only=True)
class EditCountStats:
    """Aggregate edit counts reported by XTools ``simple_editcount``."""

    username: str
    user_id: int
    live_edit_count: int
    deleted_edit_count: int = 0
    first_edit: datetime | None = None
    latest_edit: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class DailyActivity:
    date: date
    edit_count: int
    bytes_added: int


@dataclass(frozen=True, kw_only=True)
class EditorStats:
    total_edits: int
    articles_created: int
    major_expansions: int
    minor_edits: int
    talk_page_posts: int
    recent_activity: tuple[DailyActivity, ...] = ()


@dataclass(frozen=True, kw_only=True)
class DailyPageviews:
    date: date
    views: int


@dataclass(frozen=True, kw_only=True)
class ArticlePageviews:
    """Pageviews of one article over a date window.

    An article the REST API has no data for (too new, or missing) is
    represented with zero views and an empty series.
    """

    title: str
    total_views: int
    daily_views: tuple[DailyPageviews, ...] = ()
    average_daily: int = 0


# ---------------------------------------------------------------------------
# Aggregate root
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class EditorDashboard:
    """One consistent dashboard snapshot.

    Built from scratch by every refresh and superseded wholesale by the next
    one; nothing patches a snapshot in place.
    """

    user: WikiUser
    stats: EditorStats
    drafts: tuple[Draft, ...]
    recent_contributions: tuple[Contribution, ...]
    focus_areas: tuple[FocusArea, ...]
    tasks: tuple[Task, ...]
    coi_disclosures: tuple[CoiDisclosure, ...]
    last_updated: datetime
