"""Personal dashboard for a Wikipedia editor.

Aggregates the editor's profile, statistics and classified contributions
from MediaWiki and XTools with locally held drafts, tasks, focus areas and
COI disclosures.  Entry point: :class:`editor_dashboard.core.dashboard_service.DashboardService`.
"""

__version__ = "0.1.0"
