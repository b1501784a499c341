"""Tests for LocalCollectionStore.

Covers:
- Task creation (fresh id, created_at, completed_at follows status)
- update_task() keeping completed_at consistent with status
- Snapshot isolation: a snapshot taken before a mutation never changes
- Draft replacement across variants, focus-area and COI CRUD
- RecordNotFoundError for unknown ids
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from editor_dashboard.core.entities import (
    DraftStatus,
    FocusAreaStatus,
    SubmittedDraft,
    TaskPriority,
    TaskStatus,
)
from editor_dashboard.core.exceptions import RecordNotFoundError
from editor_dashboard.core.store import LocalCollectionStore
from tests.factories import (
    CoiDisclosureFactory,
    FocusAreaFactory,
    InDevelopmentDraftFactory,
    TaskFactory,
)

T0 = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


class _StepClock:
    """Returns T0, T0+1h, T0+2h, ... on successive calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> datetime:
        value = T0 + timedelta(hours=self.calls)
        self.calls += 1
        return value


@pytest.fixture
def store() -> LocalCollectionStore:
    return LocalCollectionStore(clock=_StepClock())


class TestTasks:
    def test_add_task_assigns_id_and_created_at(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Expand lead", priority=TaskPriority.HIGH)

        assert task.id
        assert task.created_at == T0
        assert task.completed_at is None
        assert store.get_task(task.id) == task
        assert store.tasks() == (task,)

    def test_add_completed_task_stamps_completed_at(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Done already", status=TaskStatus.COMPLETED)
        assert task.completed_at == task.created_at

    def test_ids_are_unique(self, store: LocalCollectionStore) -> None:
        first = store.add_task("One")
        second = store.add_task("Two")
        assert first.id != second.id

    def test_update_to_completed_sets_completed_at(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Write section")
        updated = store.update_task(task.id, status=TaskStatus.COMPLETED)

        assert updated.status == TaskStatus.COMPLETED
        assert updated.completed_at == T0 + timedelta(hours=1)
        assert store.get_task(task.id) == updated

    def test_update_completed_task_keeps_original_completed_at(
        self, store: LocalCollectionStore
    ) -> None:
        task = store.add_task("Write section", status=TaskStatus.COMPLETED)
        updated = store.update_task(task.id, title="Write history section")
        assert updated.completed_at == task.completed_at

    def test_reopening_clears_completed_at(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Write section", status=TaskStatus.COMPLETED)
        reopened = store.update_task(task.id, status=TaskStatus.IN_PROGRESS)
        assert reopened.completed_at is None

    def test_explicit_completed_at_is_ignored(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Write section")
        updated = store.update_task(task.id, completed_at=T0 - timedelta(days=3))
        assert updated.completed_at is None

    def test_delete_task(self, store: LocalCollectionStore) -> None:
        task = store.add_task("Temporary")
        store.delete_task(task.id)
        assert store.tasks() == ()

    @pytest.mark.parametrize("operation", ["get_task", "delete_task"])
    def test_unknown_task_id_raises(self, store: LocalCollectionStore, operation: str) -> None:
        with pytest.raises(RecordNotFoundError) as excinfo:
            getattr(store, operation)("missing")
        assert excinfo.value.collection == "tasks"
        assert "missing" in str(excinfo.value)

    def test_update_unknown_task_raises(self, store: LocalCollectionStore) -> None:
        with pytest.raises(KeyError):
            store.update_task("missing", title="x")


class TestSnapshots:
    def test_snapshot_is_not_affected_by_later_mutations(self) -> None:
        existing = TaskFactory.build()
        store = LocalCollectionStore(tasks=[existing])
        before = store.snapshot()

        store.add_task("Added later")
        store.delete_task(existing.id)

        assert before.tasks == (existing,)
        assert len(store.snapshot().tasks) == 1

    def test_snapshot_carries_all_collections(self) -> None:
        draft = InDevelopmentDraftFactory.build()
        area = FocusAreaFactory.build()
        disclosure = CoiDisclosureFactory.build()
        store = LocalCollectionStore(
            drafts=[draft], focus_areas=[area], coi_disclosures=[disclosure]
        )
        snapshot = store.snapshot()

        assert snapshot.drafts == (draft,)
        assert snapshot.focus_areas == (area,)
        assert snapshot.coi_disclosures == (disclosure,)
        assert snapshot.tasks == ()


class TestDrafts:
    def test_replace_draft_changes_variant(self) -> None:
        draft = InDevelopmentDraftFactory.build(title="Joseph Bennion")
        store = LocalCollectionStore(drafts=[draft])

        submitted = SubmittedDraft(
            id=draft.id,
            title=draft.title,
            page_url=draft.page_url,
            talk_page_url=draft.talk_page_url,
            created_at=draft.created_at,
            last_edited_at=draft.last_edited_at,
            status=DraftStatus.PENDING_REVIEW,
            submitted_at=draft.last_edited_at,
            afc_log_url="https://en.wikipedia.org/wiki/Special:Log?type=review",
        )
        store.replace_draft(submitted)

        assert store.get_draft(draft.id).status == DraftStatus.PENDING_REVIEW
        assert store.get_draft_by_title("Joseph Bennion") is submitted
        assert store.get_draft_by_title("Unknown") is None

    def test_replace_unknown_draft_raises(self) -> None:
        with pytest.raises(RecordNotFoundError):
            LocalCollectionStore().replace_draft(InDevelopmentDraftFactory.build())

    def test_add_and_remove_draft(self) -> None:
        store = LocalCollectionStore()
        draft = store.add_draft(InDevelopmentDraftFactory.build())
        store.remove_draft(draft.id)
        assert store.drafts() == ()


class TestFocusAreasAndDisclosures:
    def test_update_focus_area(self) -> None:
        store = LocalCollectionStore()
        area = store.add_focus_area(FocusAreaFactory.build(status=FocusAreaStatus.PLANNED))

        updated = store.update_focus_area(area.id, status=FocusAreaStatus.ACTIVE)

        assert updated.status == FocusAreaStatus.ACTIVE
        assert store.focus_areas() == (updated,)

    def test_remove_focus_area(self) -> None:
        store = LocalCollectionStore()
        area = store.add_focus_area(FocusAreaFactory.build())
        store.remove_focus_area(area.id)
        assert store.focus_areas() == ()

    def test_active_only_disclosures(self) -> None:
        active = CoiDisclosureFactory.build()
        inactive = CoiDisclosureFactory.build(is_active=False)
        store = LocalCollectionStore(coi_disclosures=[active, inactive])

        assert store.coi_disclosures() == (active, inactive)
        assert store.coi_disclosures(active_only=True) == (active,)

    def test_remove_unknown_disclosure_raises(self) -> None:
        with pytest.raises(RecordNotFoundError):
            LocalCollectionStore().remove_coi_disclosure("missing")
