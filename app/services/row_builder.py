# app/services/row_builder.py
"""
Flattens (request × visitor) pairs into VisitorRow snapshots for the
legislative-facing visitor list.

Only visitors that have left first-tier (HOD) review are shown; see
should_show(). Unresolvable category / pass-type ids degrade to placeholder
names instead of failing the whole list.
"""

from typing import Iterable, Optional

from app.schemas.pass_request import PassRequest, Visitor
from app.schemas.reference import MainCategory, PassTypeItem
from app.schemas.visitor_row import VisitorRow
from app.services.status_resolver import allowed_actions, resolve_visitor_status, status_label
from app.utils.formatting import is_set
from app.utils.logger import get_logger

logger = get_logger(__name__)

NO_REFERENCE = "—"
UNKNOWN_REFERENCE = "Unknown"


def should_show(visitor: Visitor, request: PassRequest) -> bool:
    """Visibility gate: hides visitors still awaiting department/HOD approval."""
    return (
        (request.status == "pending" and is_set(request.routed_to))
        or request.status == "routed_for_approval"
        or request.status == "approved"
        or visitor.pass_generated_at is not None
        or visitor.visitor_status in ("approved", "rejected")
        or is_set(visitor.visitor_routed_to)
    )


def _lookup(names: dict, ref_id: Optional[str]) -> str:
    if not is_set(ref_id):
        return NO_REFERENCE
    return names.get(ref_id, UNKNOWN_REFERENCE)


def _name_maps(categories: Iterable[MainCategory], pass_types: Iterable[PassTypeItem]):
    category_names, sub_category_names = {}, {}
    for category in categories:
        category_names[category.id] = category.name
        for sub in category.sub_categories:
            sub_category_names[sub.id] = sub.name
    pass_type_names = {pt.id: pt.name for pt in pass_types}
    return category_names, sub_category_names, pass_type_names


def build_visitor_rows(
    requests: Iterable[PassRequest],
    categories: Iterable[MainCategory],
    pass_types: Iterable[PassTypeItem],
) -> list[VisitorRow]:
    category_names, sub_category_names, pass_type_names = _name_maps(categories, pass_types)

    rows: list[VisitorRow] = []
    dropped = 0
    for request in requests:
        shown = [v for v in request.visitors if should_show(v, request)]
        if not shown:
            dropped += 1
            continue

        # Snapshot once per request; rows must not see later mutation
        snapshot = request.model_copy(deep=True)
        category_name = _lookup(category_names, request.main_category_id)
        sub_category_name = _lookup(sub_category_names, request.sub_category_id)

        for visitor in shown:
            status = resolve_visitor_status(visitor, request)
            rows.append(VisitorRow(
                row_id=f"{request.id}:{visitor.id}",
                request=snapshot,
                visitor=visitor.model_copy(deep=True),
                status=status,
                status_label=status_label(status),
                actions=allowed_actions(status, visitor),
                request_id=request.request_id,
                visitor_name=visitor.full_name,
                email=visitor.email,
                phone=visitor.phone,
                identification_number=visitor.identification_number,
                requested_by=request.requested_by,
                purpose=request.purpose,
                category_name=category_name,
                sub_category_name=sub_category_name,
                pass_type_name=_lookup(pass_type_names, visitor.pass_type_id),
                valid_from=request.valid_from,
                valid_to=request.valid_to,
                created_at=request.created_at,
                pass_number=visitor.pass_number,
                pass_generated_at=visitor.pass_generated_at,
            ))

    logger.debug(f"Built {len(rows)} visitor rows ({dropped} requests with no visible visitors)")
    return rows
