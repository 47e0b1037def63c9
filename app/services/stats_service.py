# app/services/stats_service.py
"""Per-status visitor counts for the summary cards."""

from collections import Counter
from typing import Iterable

from app.schemas.visitor_row import Stats, VisitorRow, VisitorStatus


def compute_stats(rows: Iterable[VisitorRow]) -> Stats:
    counts = Counter(row.status for row in rows)
    stats = Stats(
        pending=counts[VisitorStatus.PENDING],
        routed=counts[VisitorStatus.ROUTED_FOR_APPROVAL],
        approved=counts[VisitorStatus.APPROVED],
        rejected=counts[VisitorStatus.REJECTED],
        suspended=counts[VisitorStatus.SUSPENDED],
    )
    stats.total = stats.pending + stats.routed + stats.approved + stats.rejected + stats.suspended
    return stats
