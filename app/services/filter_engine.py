# app/services/filter_engine.py
"""
Filtering, request-scoped text search and "load more" pagination over
VisitorRow lists.

Row-level criteria (pass type, status, category, date) are applied first.
Text search then runs per request: a request matches when any of its fields,
or any field of its surviving rows, contains the search text, and all of its
surviving rows are kept.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from app.config import settings
from app.schemas.visitor_row import ASSIGNED_TO_ME, FilterSpec, RequestGroup, VisitorRow
from app.utils.formatting import format_display_datetime, same_uuid


# ── Row predicates ───────────────────────────────────────────────────────────

def _is_assigned_to(row: VisitorRow, user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    if same_uuid(row.visitor.visitor_routed_to, user_id):
        return True
    return (
        same_uuid(row.request.routed_to, user_id)
        and row.request.status == "routed_for_approval"
    )


def _matches_status(row: VisitorRow, filters: FilterSpec) -> bool:
    if filters.status_value == ASSIGNED_TO_ME:
        return _is_assigned_to(row, filters.current_user_id)
    return row.status.value == filters.status_value


def _matches_date(row: VisitorRow, filters: FilterSpec) -> bool:
    return any(
        value is not None and value.date() == filters.date
        for value in (row.request.valid_from, row.request.valid_to)
    )


def _row_matches(row: VisitorRow, filters: FilterSpec) -> bool:
    if filters.pass_type_id and row.visitor.pass_type_id != filters.pass_type_id:
        return False
    if filters.status_value and not _matches_status(row, filters):
        return False
    if filters.category_id and row.request.main_category_id != filters.category_id:
        return False
    if filters.date and not _matches_date(row, filters):
        return False
    return True


# ── Search ───────────────────────────────────────────────────────────────────

def _search_fields(rows: list[VisitorRow], user_names: Mapping[str, str]) -> list[str]:
    first = rows[0]
    request = first.request
    fields = [
        request.request_id,
        request.requested_by,
        user_names.get(request.requested_by or ""),
        request.purpose,
        first.category_name,
        first.sub_category_name,
        format_display_datetime(request.valid_from),
        format_display_datetime(request.valid_to),
        format_display_datetime(request.created_at),
    ]
    for row in rows:
        fields.extend([
            row.visitor_name,
            row.email,
            row.phone,
            row.identification_number,
            row.status_label,
        ])
    return [f for f in fields if f]


def _group(rows: Iterable[VisitorRow]) -> dict[str, list[VisitorRow]]:
    grouped: dict[str, list[VisitorRow]] = {}
    for row in rows:
        grouped.setdefault(row.request.id, []).append(row)
    return grouped


def _search(rows: list[VisitorRow], text: str, user_names: Mapping[str, str]) -> list[VisitorRow]:
    needle = text.lower()
    matched = set()
    for request_id, group in _group(rows).items():
        if any(needle in value.lower() for value in _search_fields(group, user_names)):
            matched.add(request_id)
    return [row for row in rows if row.request.id in matched]


# ── Public API ───────────────────────────────────────────────────────────────

def filter_rows(
    rows: Iterable[VisitorRow],
    filters: FilterSpec,
    user_names: Optional[Mapping[str, str]] = None,
) -> list[VisitorRow]:
    result = [row for row in rows if _row_matches(row, filters)]
    text = (filters.search_text or "").strip()
    if text:
        result = _search(result, text, user_names or {})
    return result


def filter_requests(
    rows: Iterable[VisitorRow],
    filters: FilterSpec,
    user_names: Optional[Mapping[str, str]] = None,
) -> list[RequestGroup]:
    """Filter, then re-group rows under their request. Empty requests drop out."""
    filtered = filter_rows(rows, filters, user_names)
    return [
        RequestGroup(request=group[0].request, rows=group)
        for group in _group(filtered).values()
    ]


# ── Pagination ("load more") ─────────────────────────────────────────────────

@dataclass
class Page:
    items: list
    displayed: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.displayed < self.total


def paginate(items: list, displayed_count: int) -> Page:
    count = max(displayed_count, 0)
    return Page(items=items[:count], displayed=min(count, len(items)), total=len(items))


def next_display_count(current: int, total: int, page_size: int = settings.LIST_PAGE_SIZE) -> int:
    if current >= total:
        return current
    return min(current + page_size, total)


@dataclass
class ListingWindow:
    """
    Tracks the active filters and how many results are displayed.
    Changing filters resets the window to one page.
    """
    page_size: int = settings.LIST_PAGE_SIZE
    filters: FilterSpec = field(default_factory=FilterSpec)
    displayed_count: Optional[int] = None

    def __post_init__(self):
        if self.displayed_count is None:
            self.displayed_count = self.page_size

    def apply(self, filters: FilterSpec) -> None:
        if filters != self.filters:
            self.filters = filters
            self.displayed_count = self.page_size

    def load_more(self, total: int) -> int:
        if self.displayed_count < total:
            self.displayed_count = min(self.displayed_count + self.page_size, total)
        return self.displayed_count

    def view(self, items: list) -> Page:
        return paginate(items, self.displayed_count)
