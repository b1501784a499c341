"""Edit classification.

Maps a :class:`~editor_dashboard.core.entities.RawEdit` to one
:class:`~editor_dashboard.core.entities.ContributionType`.  The rules are
evaluated in order and the first match wins:

1. The page lives in a talk namespace -> ``talk_page``.
2. A change tag contains ``"revert"`` or ``"undo"`` -> ``revert``.
3. The edit has no parent revision -> ``new_article``.
4. The absolute byte delta exceeds the threshold -> ``major_expansion``.
5. Anything else -> ``minor_edit``.

Rule 2 precedes rule 3: a tagged revert of a brand-new page is a revert.
"""

from __future__ import annotations

from editor_dashboard.core.entities import Contribution, ContributionType, RawEdit

TALK_NAMESPACES: frozenset[int] = frozenset({1, 3, 5})
"""Talk (1), User talk (3) and Wikipedia talk (5)."""

REVERT_TAG_MARKERS: tuple[str, ...] = ("revert", "undo")
"""Substrings that mark a change tag as a revert (``mw-undo``, ``mw-manual-revert``)."""

MAJOR_EXPANSION_THRESHOLD_BYTES: int = 1000
"""Edits whose absolute byte delta is strictly above this are major expansions."""


def classify(
    raw: RawEdit,
    major_threshold: int = MAJOR_EXPANSION_THRESHOLD_BYTES,
) -> ContributionType:
    """Return the contribution type of *raw*.

    Args:
        raw: The unclassified edit.
        major_threshold: Byte delta above which a non-new edit is a major
            expansion.

    Returns:
        The first matching :class:`ContributionType`.
    """
    if raw.namespace in TALK_NAMESPACES:
        return ContributionType.TALK_PAGE
    if _is_revert(raw.tags):
        return ContributionType.REVERT
    if raw.parent_id == 0:
        return ContributionType.NEW_ARTICLE
    if abs(raw.size_diff) > major_threshold:
        return ContributionType.MAJOR_EXPANSION
    return ContributionType.MINOR_EDIT


def to_contribution(
    raw: RawEdit,
    article_url: str,
    major_threshold: int = MAJOR_EXPANSION_THRESHOLD_BYTES,
) -> Contribution:
    """Build a dashboard :class:`Contribution` from a raw edit."""
    return Contribution(
        revision_id=raw.revision_id,
        article_title=raw.title,
        article_url=article_url,
        timestamp=raw.timestamp,
        type=classify(raw, major_threshold),
        byte_diff=raw.size_diff,
        summary=raw.comment,
        is_minor=raw.minor,
        tags=raw.tags,
    )


def _is_revert(tags: frozenset[str]) -> bool:
    return any(marker in tag for tag in tags for marker in REVERT_TAG_MARKERS)
