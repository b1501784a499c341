"""Factory Boy factories for test data generation.

Available factories
-------------------
RawEditFactory              - unclassified edit (minor mainspace edit by default)
ContributionFactory         - classified contribution
WikiUserFactory             - MediaWiki user profile
InDevelopmentDraftFactory   - draft never submitted to AfC
SubmittedDraftFactory       - draft pending AfC review
AcceptedDraftFactory        - draft accepted to mainspace
DeclinedDraftFactory        - draft declined at AfC
AbandonedDraftFactory       - abandoned draft
TaskFactory                 - personal task (completed_at follows status)
FocusAreaFactory            - focus area with no articles
FocusAreaArticleFactory     - focus-area article (start class)
CoiDisclosureFactory        - active COI disclosure
"""

from __future__ import annotations

from tests.factories.entities import (
    BASE_TIME,
    AbandonedDraftFactory,
    AcceptedDraftFactory,
    CoiDisclosureFactory,
    ContributionFactory,
    DeclinedDraftFactory,
    FocusAreaArticleFactory,
    FocusAreaFactory,
    InDevelopmentDraftFactory,
    RawEditFactory,
    SubmittedDraftFactory,
    TaskFactory,
    WikiUserFactory,
)

__all__ = [
    "BASE_TIME",
    "AbandonedDraftFactory",
    "AcceptedDraftFactory",
    "CoiDisclosureFactory",
    "ContributionFactory",
    "DeclinedDraftFactory",
    "FocusAreaArticleFactory",
    "FocusAreaFactory",
    "InDevelopmentDraftFactory",
    "RawEditFactory",
    "SubmittedDraftFactory",
    "TaskFactory",
    "WikiUserFactory",
]
