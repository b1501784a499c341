"""Cached repositories over the upstream sources and the local store."""

from editor_dashboard.repositories.contributions import ContributionRepository
from editor_dashboard.repositories.dashboard import DashboardRepository
from editor_dashboard.repositories.impact import ImpactRepository
from editor_dashboard.repositories.stats import StatsRepository
from editor_dashboard.repositories.users import UserRepository

__all__ = [
    "ContributionRepository",
    "DashboardRepository",
    "ImpactRepository",
    "StatsRepository",
    "UserRepository",
]
