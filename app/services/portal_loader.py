# app/services/portal_loader.py
"""
Loads everything the visitor list needs from the upstream API.

Each fetch is wrapped on its own: a failing fetch logs and yields an empty
result, so e.g. a sessions outage never blocks categories or requests.
Independent fetches run concurrently; rows are built only once categories
and pass types have resolved.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, TypeVar

from app.schemas.pass_request import PassRequest
from app.schemas.reference import MainCategory, PassTypeItem, Session
from app.schemas.visitor_row import VisitorRow
from app.services.pass_api_client import USER_ROLES, PassApiClient, PassApiError
from app.services.row_builder import build_visitor_rows
from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class ReferenceData:
    categories: list[MainCategory] = field(default_factory=list)
    pass_types: list[PassTypeItem] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)


@dataclass
class PortalView:
    reference: ReferenceData
    requests: list[PassRequest]
    rows: list[VisitorRow]
    user_names: dict[str, str]
    errors: list[str] = field(default_factory=list)


async def safe_fetch(label: str, awaitable: Awaitable[T], default: T, errors: list = None) -> T:
    """Await one upstream fetch; on failure log, note the error and return default."""
    try:
        return await awaitable
    except (PassApiError, ValueError) as e:
        logger.error(f"[LOAD] {label} failed: {e}")
        if errors is not None:
            errors.append(f"{label}: {e}")
        return default


async def load_reference_data(client: PassApiClient, errors: list = None) -> ReferenceData:
    categories, pass_types, sessions = await asyncio.gather(
        safe_fetch("categories", client.get_main_categories(), [], errors),
        safe_fetch("pass types", client.get_all_pass_types(), [], errors),
        safe_fetch("sessions", client.get_sessions(), [], errors),
    )
    return ReferenceData(categories=categories, pass_types=pass_types, sessions=sessions)


async def load_user_directory(client: PassApiClient, errors: list = None) -> dict[str, str]:
    """user id → display name, merged across all approver roles."""
    results = await asyncio.gather(*(
        safe_fetch(f"users[{role}]", client.get_users_by_role(role), [], errors)
        for role in USER_ROLES
    ))
    names: dict[str, str] = {}
    for users in results:
        for user in users:
            names[user.id] = user.display_name
    return names


async def load_portal_view(client: PassApiClient, limit: int = None) -> PortalView:
    errors: list[str] = []
    reference, user_names, requests = await asyncio.gather(
        load_reference_data(client, errors),
        load_user_directory(client, errors),
        safe_fetch("pass requests", client.get_all_pass_requests(limit), [], errors),
    )
    rows = build_visitor_rows(requests, reference.categories, reference.pass_types)
    logger.info(
        f"[LOAD] {len(requests)} requests → {len(rows)} visible visitor rows "
        f"({len(errors)} fetch error(s))"
    )
    return PortalView(reference=reference, requests=requests, rows=rows,
                      user_names=user_names, errors=errors)
