"""Pure aggregation functions behind the dashboard panels.

Every function takes an immutable sequence, walks it once while filling a
local accumulator, and returns a frozen result.  None of them mutates its
input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType

from editor_dashboard.core.entities import (
    ArticlePageviews,
    ArticleQuality,
    Contribution,
    ContributionType,
    DailyActivity,
    DailyPageviews,
    Draft,
    DraftStatus,
    EditorStats,
    FocusArea,
    Task,
    TaskPriority,
    TaskStatus,
)

MOST_EDITED_LIMIT: int = 10
"""Number of articles reported in ``most_edited_articles``."""

TOP_ARTICLES_LIMIT: int = 10
"""Number of articles reported in ``ImpactMetrics.top_articles``."""

COMPLETED_QUALITY_TIER: frozenset[ArticleQuality] = frozenset({
    ArticleQuality.B_CLASS,
    ArticleQuality.GA,
    ArticleQuality.FA,
})
"""Assessment classes that count a focus-area article as done."""

_PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DraftSummary:
    """Draft counts per AfC status.

    ``counts_by_status`` has an entry for every :class:`DraftStatus`,
    including ``abandoned``; ``total`` is the number of drafts summarized.
    """

    total: int
    counts_by_status: Mapping[DraftStatus, int]

    @property
    def pending_review(self) -> int:
        return self.counts_by_status[DraftStatus.PENDING_REVIEW]

    @property
    def under_review(self) -> int:
        return self.counts_by_status[DraftStatus.UNDER_REVIEW]

    @property
    def in_development(self) -> int:
        return self.counts_by_status[DraftStatus.IN_DEVELOPMENT]

    @property
    def accepted(self) -> int:
        return self.counts_by_status[DraftStatus.ACCEPTED]

    @property
    def declined(self) -> int:
        return self.counts_by_status[DraftStatus.DECLINED]


@dataclass(frozen=True)
class ArticleEditCount:
    title: str
    edit_count: int


@dataclass(frozen=True)
class ContributionSummary:
    total_edits: int
    total_bytes_added: int
    counts_by_type: Mapping[ContributionType, int]
    most_edited_articles: tuple[ArticleEditCount, ...]


@dataclass(frozen=True)
class TaskFilter:
    """Conjunction of optional task predicates.

    A field left at ``None`` (or an empty ``search_term``) places no
    constraint on the result.
    """

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search_term: str | None = None


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    blocked: int
    high_priority_open: int


@dataclass(frozen=True)
class FocusAreaProgress:
    id: str
    name: str
    total_articles: int
    completed_articles: int
    progress_percent: int


@dataclass(frozen=True)
class ImpactMetrics:
    """Readership of a set of articles over one pageview window.

    ``article_stats`` keeps the input order; ``top_articles`` holds the
    :data:`TOP_ARTICLES_LIMIT` most viewed, ties in input order.
    """

    total_views: int
    article_stats: tuple[ArticlePageviews, ...]
    top_articles: tuple[ArticlePageviews, ...]


# ---------------------------------------------------------------------------
# Drafts and contributions
# ---------------------------------------------------------------------------


def summarize_drafts(drafts: Sequence[Draft]) -> DraftSummary:
    """Count drafts per status in a single pass."""
    counts: dict[DraftStatus, int] = {status: 0 for status in DraftStatus}
    total = 0
    for draft in drafts:
        counts[draft.status] += 1
        total += 1
    return DraftSummary(total=total, counts_by_status=MappingProxyType(counts))


def summarize_contributions(contributions: Sequence[Contribution]) -> ContributionSummary:
    """Summarize contributions for the overview panel.

    ``total_bytes_added`` sums positive byte deltas only; removals are
    ignored rather than subtracted.  ``most_edited_articles`` holds the
    :data:`MOST_EDITED_LIMIT` most edited titles by descending edit count,
    ties kept in the order the titles were first seen.
    """
    counts_by_type: dict[ContributionType, int] = {kind: 0 for kind in ContributionType}
    article_counts: dict[str, int] = {}
    total_edits = 0
    total_bytes_added = 0

    for contribution in contributions:
        total_edits += 1
        if contribution.byte_diff > 0:
            total_bytes_added += contribution.byte_diff
        counts_by_type[contribution.type] += 1
        article_counts[contribution.article_title] = (
            article_counts.get(contribution.article_title, 0) + 1
        )

    # sorted() is stable and dicts keep insertion order, so ties stay first-seen.
    ranked = sorted(article_counts.items(), key=lambda item: item[1], reverse=True)
    most_edited = tuple(
        ArticleEditCount(title=title, edit_count=count)
        for title, count in ranked[:MOST_EDITED_LIMIT]
    )

    return ContributionSummary(
        total_edits=total_edits,
        total_bytes_added=total_bytes_added,
        counts_by_type=MappingProxyType(counts_by_type),
        most_edited_articles=most_edited,
    )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def filter_tasks(tasks: Sequence[Task], task_filter: TaskFilter | None = None) -> tuple[Task, ...]:
    """Return the tasks matching every constraint set on *task_filter*.

    The search term matches case-insensitively against the title or the
    description.
    """
    if task_filter is None:
        return tuple(tasks)

    term = task_filter.search_term.lower() if task_filter.search_term else None
    matched: list[Task] = []
    for task in tasks:
        if task_filter.status is not None and task.status != task_filter.status:
            continue
        if task_filter.priority is not None and task.priority != task_filter.priority:
            continue
        if term is not None and term not in task.title.lower() and term not in task.description.lower():
            continue
        matched.append(task)
    return tuple(matched)


def sort_tasks_by_priority(tasks: Sequence[Task]) -> tuple[Task, ...]:
    """Return a new sequence ordered high -> medium -> low, stable within a priority."""
    return tuple(sorted(tasks, key=lambda task: _PRIORITY_ORDER[task.priority]))


def summarize_tasks(tasks: Sequence[Task]) -> TaskStats:
    """Count tasks by status; ``high_priority_open`` excludes completed tasks."""
    total = completed = in_progress = blocked = high_priority_open = 0
    for task in tasks:
        total += 1
        if task.status == TaskStatus.COMPLETED:
            completed += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1
        elif task.status == TaskStatus.BLOCKED:
            blocked += 1
        if task.priority == TaskPriority.HIGH and task.status != TaskStatus.COMPLETED:
            high_priority_open += 1
    return TaskStats(
        total=total,
        completed=completed,
        in_progress=in_progress,
        blocked=blocked,
        high_priority_open=high_priority_open,
    )


# ---------------------------------------------------------------------------
# Focus areas
# ---------------------------------------------------------------------------


def calculate_focus_area_progress(areas: Sequence[FocusArea]) -> tuple[FocusAreaProgress, ...]:
    """Return per-area progress towards the completed quality tier.

    ``progress_percent`` is ``completed / total * 100`` rounded half up, and
    ``0`` for an area without articles.
    """
    progress: list[FocusAreaProgress] = []
    for area in areas:
        total = len(area.articles)
        completed = sum(
            1 for article in area.articles if article.quality_status in COMPLETED_QUALITY_TIER
        )
        progress.append(
            FocusAreaProgress(
                id=area.id,
                name=area.name,
                total_articles=total,
                completed_articles=completed,
                progress_percent=_percent_half_up(completed, total),
            )
        )
    return tuple(progress)


def _percent_half_up(part: int, whole: int) -> int:
    return _divide_half_up(part * 100, whole)


def _divide_half_up(numerator: int, denominator: int) -> int:
    if denominator == 0:
        return 0
    return (numerator * 2 + denominator) // (denominator * 2)


# ---------------------------------------------------------------------------
# Editor statistics
# ---------------------------------------------------------------------------


def daily_activity(
    contributions: Iterable[Contribution],
    days: int = 30,
    now: datetime | None = None,
) -> tuple[DailyActivity, ...]:
    """Bucket contributions from the last *days* days by UTC calendar day.

    Returns one :class:`DailyActivity` per day that has at least one edit,
    ascending by date.  ``bytes_added`` counts positive deltas only.
    """
    current = _as_utc(now or datetime.now(tz=timezone.utc))
    cutoff = current - timedelta(days=days)
    buckets: dict[date, list[int]] = {}

    for contribution in contributions:
        timestamp = _as_utc(contribution.timestamp)
        if timestamp < cutoff:
            continue
        bucket = buckets.setdefault(timestamp.date(), [0, 0])
        bucket[0] += 1
        bucket[1] += max(0, contribution.byte_diff)

    return tuple(
        DailyActivity(date=day, edit_count=edits, bytes_added=added)
        for day, (edits, added) in sorted(buckets.items())
    )


def editor_stats(
    total_edits: int,
    contributions: Iterable[Contribution],
    recent_activity: Sequence[DailyActivity] = (),
) -> EditorStats:
    """Combine an upstream edit total with type counts from *contributions*."""
    counts: dict[ContributionType, int] = {kind: 0 for kind in ContributionType}
    for contribution in contributions:
        counts[contribution.type] += 1
    return EditorStats(
        total_edits=total_edits,
        articles_created=counts[ContributionType.NEW_ARTICLE],
        major_expansions=counts[ContributionType.MAJOR_EXPANSION],
        minor_edits=counts[ContributionType.MINOR_EDIT],
        talk_page_posts=counts[ContributionType.TALK_PAGE],
        recent_activity=tuple(recent_activity),
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Pageviews and impact
# ---------------------------------------------------------------------------


def aggregate_pageviews(title: str, daily_views: Iterable[DailyPageviews]) -> ArticlePageviews:
    """Total a daily pageview series; the average is rounded half up."""
    series = tuple(daily_views)
    total = sum(day.views for day in series)
    return ArticlePageviews(
        title=title,
        total_views=total,
        daily_views=series,
        average_daily=_divide_half_up(total, len(series)),
    )


def summarize_impact(
    article_stats: Sequence[ArticlePageviews],
    top_n: int = TOP_ARTICLES_LIMIT,
) -> ImpactMetrics:
    stats = tuple(article_stats)
    ranked = sorted(stats, key=lambda article: -article.total_views)
    return ImpactMetrics(
        total_views=sum(article.total_views for article in stats),
        article_stats=stats,
        top_articles=tuple(ranked[:top_n]),
    )
