"""Tests for the contribution classifier.

Covers:
- Rule precedence: talk namespace > revert tag > new page > major expansion > minor edit
- New pages are classified as new_article regardless of byte delta
- Revert/undo tag substring matching
- Configurable major-expansion threshold (strictly greater than)
- to_contribution() field mapping
"""

from __future__ import annotations

import pytest

from editor_dashboard.core.classifier import (
    MAJOR_EXPANSION_THRESHOLD_BYTES,
    TALK_NAMESPACES,
    classify,
    to_contribution,
)
from editor_dashboard.core.entities import ContributionType
from tests.factories import RawEditFactory


class TestTalkNamespaces:
    @pytest.mark.parametrize("namespace", sorted(TALK_NAMESPACES))
    def test_talk_namespace_is_talk_page(self, namespace: int) -> None:
        raw = RawEditFactory.build(namespace=namespace, size_diff=5000, parent_id=0)
        assert classify(raw) == ContributionType.TALK_PAGE

    def test_talk_namespace_wins_over_revert_tag(self) -> None:
        raw = RawEditFactory.build(namespace=1, tags={"mw-undo"})
        assert classify(raw) == ContributionType.TALK_PAGE

    @pytest.mark.parametrize("namespace", [0, 2, 4, 118])
    def test_non_talk_namespaces_are_not_talk_page(self, namespace: int) -> None:
        raw = RawEditFactory.build(namespace=namespace)
        assert classify(raw) != ContributionType.TALK_PAGE


class TestRevertTags:
    @pytest.mark.parametrize("tag", ["mw-undo", "mw-rollback-revert", "mw-manual-revert", "undo"])
    def test_revert_or_undo_tag_is_revert(self, tag: str) -> None:
        raw = RawEditFactory.build(tags={"visualeditor", tag})
        assert classify(raw) == ContributionType.REVERT

    def test_revert_wins_over_new_page(self) -> None:
        raw = RawEditFactory.build(parent_id=0, tags={"mw-manual-revert"})
        assert classify(raw) == ContributionType.REVERT

    def test_unrelated_tags_are_ignored(self) -> None:
        raw = RawEditFactory.build(tags={"visualeditor", "mobile edit"}, size_diff=10)
        assert classify(raw) == ContributionType.MINOR_EDIT


class TestNewArticle:
    @pytest.mark.parametrize("size_diff", [-50, 0, 10, 1000, 25_000])
    def test_parent_zero_is_new_article_regardless_of_size(self, size_diff: int) -> None:
        raw = RawEditFactory.build(parent_id=0, size_diff=size_diff)
        assert classify(raw) == ContributionType.NEW_ARTICLE


class TestSizeThreshold:
    def test_just_above_threshold_is_major_expansion(self) -> None:
        raw = RawEditFactory.build(size_diff=MAJOR_EXPANSION_THRESHOLD_BYTES + 1)
        assert classify(raw) == ContributionType.MAJOR_EXPANSION

    def test_exactly_threshold_is_minor_edit(self) -> None:
        raw = RawEditFactory.build(size_diff=MAJOR_EXPANSION_THRESHOLD_BYTES)
        assert classify(raw) == ContributionType.MINOR_EDIT

    def test_large_removal_is_major_expansion(self) -> None:
        """The threshold applies to the absolute delta."""
        raw = RawEditFactory.build(size_diff=-1500)
        assert classify(raw) == ContributionType.MAJOR_EXPANSION

    def test_custom_threshold(self) -> None:
        raw = RawEditFactory.build(size_diff=300)
        assert classify(raw, major_threshold=250) == ContributionType.MAJOR_EXPANSION
        assert classify(raw, major_threshold=500) == ContributionType.MINOR_EDIT


class TestToContribution:
    def test_maps_raw_fields(self) -> None:
        raw = RawEditFactory.build(
            revision_id=42,
            title="Ada Lovelace",
            size_diff=2048,
            comment="expand early life",
            minor=True,
            tags={"visualeditor"},
        )
        contribution = to_contribution(raw, "https://en.wikipedia.org/wiki/Ada_Lovelace")

        assert contribution.revision_id == 42
        assert contribution.article_title == "Ada Lovelace"
        assert contribution.article_url == "https://en.wikipedia.org/wiki/Ada_Lovelace"
        assert contribution.timestamp == raw.timestamp
        assert contribution.type == ContributionType.MAJOR_EXPANSION
        assert contribution.byte_diff == 2048
        assert contribution.summary == "expand early life"
        assert contribution.is_minor is True
        assert contribution.tags == frozenset({"visualeditor"})
