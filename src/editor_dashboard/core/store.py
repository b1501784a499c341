"""In-memory store for the editor's locally held collections.

Drafts, tasks, focus areas and COI disclosures are not fetched from
Wikipedia; the presentation layer creates and edits them through this
store.  Each collection is held as a tuple and every mutation swaps in a
new tuple, so a :class:`CollectionSnapshot` handed to the dashboard
repository never changes underneath it.

The store does not validate business rules beyond what the entity
constructors enforce, and it does not persist anything.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, TypeVar

from editor_dashboard.core.entities import (
    CoiDisclosure,
    Draft,
    FocusArea,
    Task,
    TaskPriority,
    TaskStatus,
)
from editor_dashboard.core.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

_R = TypeVar("_R", Draft, Task, FocusArea, CoiDisclosure)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class CollectionSnapshot:
    """The four local collections as they were at one instant."""

    drafts: tuple[Draft, ...] = ()
    tasks: tuple[Task, ...] = ()
    focus_areas: tuple[FocusArea, ...] = ()
    coi_disclosures: tuple[CoiDisclosure, ...] = ()


class LocalCollectionStore:
    """CRUD access to drafts, tasks, focus areas and COI disclosures.

    Args:
        drafts: Initial drafts.
        tasks: Initial tasks.
        focus_areas: Initial focus areas.
        coi_disclosures: Initial COI disclosures.
        clock: Source of "now" for task timestamps.  Injected in tests.
    """

    def __init__(
        self,
        drafts: Sequence[Draft] = (),
        tasks: Sequence[Task] = (),
        focus_areas: Sequence[FocusArea] = (),
        coi_disclosures: Sequence[CoiDisclosure] = (),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._drafts: tuple[Draft, ...] = tuple(drafts)
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._focus_areas: tuple[FocusArea, ...] = tuple(focus_areas)
        self._coi_disclosures: tuple[CoiDisclosure, ...] = tuple(coi_disclosures)
        self._clock = clock

    def snapshot(self) -> CollectionSnapshot:
        return CollectionSnapshot(
            drafts=self._drafts,
            tasks=self._tasks,
            focus_areas=self._focus_areas,
            coi_disclosures=self._coi_disclosures,
        )

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def drafts(self) -> tuple[Draft, ...]:
        return self._drafts

    def get_draft(self, draft_id: str) -> Draft:
        return _find(self._drafts, draft_id, "drafts")

    def get_draft_by_title(self, title: str) -> Draft | None:
        """Return the first draft titled *title*, or ``None``."""
        return next((draft for draft in self._drafts if draft.title == title), None)

    def add_draft(self, draft: Draft) -> Draft:
        self._drafts = self._drafts + (draft,)
        return draft

    def replace_draft(self, draft: Draft) -> Draft:
        """Swap the stored draft with the same id for *draft*.

        Used for status transitions, which change the draft's variant class.
        """
        self._drafts = _replace(self._drafts, draft, "drafts")
        return draft

    def remove_draft(self, draft_id: str) -> None:
        self._drafts = _remove(self._drafts, draft_id, "drafts")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def get_task(self, task_id: str) -> Task:
        return _find(self._tasks, task_id, "tasks")

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.NOT_STARTED,
        due_date: datetime | None = None,
        related_articles: Sequence[str] = (),
    ) -> Task:
        """Create a task with a fresh id and ``created_at`` of now."""
        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            priority=priority,
            status=status,
            created_at=now,
            due_date=due_date,
            related_articles=tuple(related_articles),
            completed_at=now if status == TaskStatus.COMPLETED else None,
        )
        self._tasks = self._tasks + (task,)
        logger.debug("store: added task %s (%s)", task.id, task.priority.value)
        return task

    def update_task(self, task_id: str, **changes: Any) -> Task:
        """Apply *changes* to a task and return the updated copy.

        ``completed_at`` follows the status: it is stamped when the task moves
        to completed and cleared when it leaves completed.  An explicit
        ``completed_at`` in *changes* is ignored.

        Raises:
            RecordNotFoundError: If no task has *task_id*.
        """
        current = self.get_task(task_id)
        changes.pop("completed_at", None)
        status = changes.get("status", current.status)
        if status == TaskStatus.COMPLETED:
            completed_at = current.completed_at or self._clock()
        else:
            completed_at = None
        updated = dataclasses.replace(current, completed_at=completed_at, **changes)
        self._tasks = _replace(self._tasks, updated, "tasks")
        return updated

    def delete_task(self, task_id: str) -> None:
        self._tasks = _remove(self._tasks, task_id, "tasks")

    # ------------------------------------------------------------------
    # Focus areas
    # ------------------------------------------------------------------

    def focus_areas(self) -> tuple[FocusArea, ...]:
        return self._focus_areas

    def add_focus_area(self, area: FocusArea) -> FocusArea:
        self._focus_areas = self._focus_areas + (area,)
        return area

    def update_focus_area(self, area_id: str, **changes: Any) -> FocusArea:
        updated = dataclasses.replace(_find(self._focus_areas, area_id, "focus_areas"), **changes)
        self._focus_areas = _replace(self._focus_areas, updated, "focus_areas")
        return updated

    def remove_focus_area(self, area_id: str) -> None:
        self._focus_areas = _remove(self._focus_areas, area_id, "focus_areas")

    # ------------------------------------------------------------------
    # COI disclosures
    # ------------------------------------------------------------------

    def coi_disclosures(self, active_only: bool = False) -> tuple[CoiDisclosure, ...]:
        if active_only:
            return tuple(d for d in self._coi_disclosures if d.is_active)
        return self._coi_disclosures

    def add_coi_disclosure(self, disclosure: CoiDisclosure) -> CoiDisclosure:
        self._coi_disclosures = self._coi_disclosures + (disclosure,)
        return disclosure

    def remove_coi_disclosure(self, disclosure_id: str) -> None:
        self._coi_disclosures = _remove(self._coi_disclosures, disclosure_id, "coi_disclosures")


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _find(records: tuple[_R, ...], record_id: str, collection: str) -> _R:
    for record in records:
        if record.id == record_id:
            return record
    raise RecordNotFoundError(collection, record_id)


def _replace(records: tuple[_R, ...], new: _R, collection: str) -> tuple[_R, ...]:
    if not any(record.id == new.id for record in records):
        raise RecordNotFoundError(collection, new.id)
    return tuple(new if record.id == new.id else record for record in records)


def _remove(records: tuple[_R, ...], record_id: str, collection: str) -> tuple[_R, ...]:
    remaining = tuple(record for record in records if record.id != record_id)
    if len(remaining) == len(records):
        raise RecordNotFoundError(collection, record_id)
    return remaining
