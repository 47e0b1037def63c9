# app/services/pass_api_client.py
"""
Async client for the upstream pass-request REST API.

Reads return validated schema objects; records that fail validation are
skipped with a warning so one malformed row can't blank a whole list.
Mutations are sent as multipart form fields, which is what the upstream
endpoints accept.

Every failure surfaces as PassApiError. A 401 additionally expires the
injected AuthSession and raises AuthExpiredError.
"""

from datetime import datetime
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.config import settings
from app.schemas.action import (
    ActivatePayload,
    GeneratePassPayload,
    RequestStatusPayload,
    RoutePayload,
    SuspendPayload,
)
from app.schemas.pass_request import PassRequest
from app.schemas.reference import Issuer, MainCategory, PassTypeItem, Session, User
from app.services.session_context import AuthSession
from app.utils.logger import get_logger

logger = get_logger(__name__)

USER_ROLES = ("department", "legislative", "peshi", "admin")

M = TypeVar("M", bound=BaseModel)


class PassApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthExpiredError(PassApiError):
    pass


def _require(**values: Optional[str]) -> None:
    """Raise ValueError naming the first blank argument."""
    for name, value in values.items():
        if value is None or not str(value).strip():
            raise ValueError(f"{name} is required")


def _form_fields(fields: dict) -> dict:
    """Multipart fields as httpx 'files' entries; None values are omitted."""
    encoded = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, datetime):
            value = value.isoformat()
        encoded[key] = (None, str(value).strip())
    return encoded


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(response: httpx.Response, data: Any, action: str) -> str:
    detail = data.get("detail") if isinstance(data, dict) else None

    if response.status_code == 422 and isinstance(detail, list):
        lines = []
        for err in detail:
            loc = err.get("loc") if isinstance(err, dict) else None
            field = ".".join(str(p) for p in loc[1:]) if isinstance(loc, list) else "field"
            msg = (err.get("msg") or err.get("message")) if isinstance(err, dict) else None
            lines.append(f"{field}: {msg or 'Invalid value'}")
        return "Validation Error: " + "\n".join(lines)

    if isinstance(detail, list):
        return ", ".join(
            (e.get("msg") or e.get("message") or str(e)) if isinstance(e, dict) else str(e)
            for e in detail
        )
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(data, dict) and (data.get("message") or data.get("error")):
        return str(data.get("message") or data.get("error"))
    if isinstance(data, str) and data.strip():
        return f"Server error: {data.strip()}"
    return f"{action} failed: {response.reason_phrase or f'Status {response.status_code}'}"


def _parse_list(model: Type[M], data: Any, label: str) -> list[M]:
    if not isinstance(data, list):
        logger.warning(f"[API] {label}: expected a list, got {type(data).__name__}")
        return []
    items = []
    for raw in data:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"[API] {label}: skipping malformed record: {e.error_count()} error(s)")
    return items


class PassApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[AuthSession] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session or AuthSession()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.PASS_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.PASS_API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[dict] = None,
        form: Optional[dict] = None,
    ) -> Any:
        headers = {"Accept": "application/json", **self.session.headers()}
        files = _form_fields(form) if form is not None else None
        try:
            response = await self._client.request(method, path, params=params, files=files, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"[API] {method} {path} transport error: {e}")
            raise PassApiError("Network error. Please check your connection.") from e

        data = _decode(response)
        if response.status_code == 401:
            self.session.expire()
            raise AuthExpiredError(_error_message(response, data, action), 401)
        if response.is_error:
            message = _error_message(response, data, action)
            logger.warning(f"[API] {method} {path} → {response.status_code}: {message}")
            raise PassApiError(message, response.status_code)
        return data

    # ── Reference data ───────────────────────────────────────────────────

    async def get_main_categories(self) -> list[MainCategory]:
        data = await self._request("GET", "/api/v1/categories/main", "Fetch categories")
        return [c for c in _parse_list(MainCategory, data, "categories") if c.is_active]

    async def get_category_pass_types(self, category_id: str) -> list[str]:
        _require(category_id=category_id)
        data = await self._request(
            "GET", f"/api/v1/categories/main/{category_id}/pass-types", "Fetch category pass types"
        )
        return [str(item) for item in data] if isinstance(data, list) else []

    async def get_all_pass_types(self) -> list[PassTypeItem]:
        data = await self._request(
            "GET", "/api/v1/categories/pass-types", "Fetch pass types", params={"active_only": "true"}
        )
        return _parse_list(PassTypeItem, data, "pass types")

    async def get_sessions(self) -> list[Session]:
        data = await self._request(
            "GET", "/api/v1/categories/sessions", "Fetch sessions",
            params={"limit": 1000, "active_only": "true"},
        )
        return _parse_list(Session, data, "sessions")

    async def get_issuers(self) -> list[Issuer]:
        data = await self._request(
            "GET", "/api/v1/issuers", "Fetch issuers", params={"limit": 100, "is_active": "true"}
        )
        return _parse_list(Issuer, data, "issuers")

    async def get_users_by_role(self, role: str) -> list[User]:
        if role not in USER_ROLES:
            raise ValueError(f"Unknown role '{role}'")
        data = await self._request("GET", f"/api/v1/pass-requests/users/by-role/{role}", "Fetch users")
        return _parse_list(User, data, f"users[{role}]")

    # ── Requests ─────────────────────────────────────────────────────────

    async def get_all_pass_requests(self, limit: Optional[int] = None) -> list[PassRequest]:
        limit = limit or settings.PASS_REQUEST_FETCH_LIMIT
        data = await self._request(
            "GET", "/api/v1/pass-requests", "Fetch pass requests", params={"limit": limit}
        )
        return _parse_list(PassRequest, data, "pass requests")

    async def get_pass_request(self, request_id: str) -> PassRequest:
        _require(request_id=request_id)
        data = await self._request("GET", f"/api/v1/pass-requests/{request_id}", "Fetch pass request")
        try:
            return PassRequest.model_validate(data)
        except ValidationError as e:
            raise PassApiError(f"Malformed pass request {request_id}: {e.error_count()} error(s)") from e

    # ── Workflow actions ─────────────────────────────────────────────────

    async def update_visitor_status(
        self, visitor_id: str, status: str, acting_user_id: str, comment: Optional[str] = None
    ) -> Any:
        _require(visitor_id=visitor_id, acting_user_id=acting_user_id)
        if status not in ("approved", "rejected"):
            raise ValueError("Status must be 'approved' or 'rejected'")
        return await self._request(
            "PATCH", f"/api/v1/pass-requests/visitors/{visitor_id}/status", "Update visitor status",
            form={"status": status, "current_user_id": acting_user_id, "rejection_reason": comment},
        )

    async def update_pass_request_status(self, request_id: str, payload: RequestStatusPayload) -> Any:
        _require(request_id=request_id, current_user_id=payload.current_user_id)
        return await self._request(
            "PATCH", f"/api/v1/pass-requests/{request_id}/status", "Update request status",
            form=payload.model_dump(),
        )

    async def generate_pass(self, request_id: str, payload: GeneratePassPayload) -> Any:
        _require(request_id=request_id, visitor_id=payload.visitor_id,
                 current_user_id=payload.current_user_id)
        return await self._request(
            "POST", f"/api/v1/pass-requests/{request_id}/generate-pass", "Generate pass",
            form=payload.model_dump(),
        )

    async def route_for_superior_approval(self, request_id: str, payload: RoutePayload) -> Any:
        _require(request_id=request_id, visitor_id=payload.visitor_id, routed_to=payload.routed_to,
                 routed_by=payload.routed_by, current_user_id=payload.current_user_id)
        form = {"status": "routed_for_approval", **payload.model_dump()}
        return await self._request(
            "PATCH", f"/api/v1/pass-requests/{request_id}/status", "Route for approval", form=form,
        )

    async def suspend_visitor(self, visitor_id: str, payload: SuspendPayload) -> Any:
        _require(visitor_id=visitor_id, suspended_by=payload.suspended_by, reason=payload.reason)
        return await self._request(
            "PATCH", f"/api/v1/pass-requests/visitors/{visitor_id}/suspend", "Suspend visitor",
            form=payload.model_dump(),
        )

    async def activate_visitor(self, visitor_id: str, payload: ActivatePayload) -> Any:
        _require(visitor_id=visitor_id, activated_by=payload.activated_by)
        return await self._request(
            "PATCH", f"/api/v1/pass-requests/visitors/{visitor_id}/activate", "Activate visitor",
            form=payload.model_dump(),
        )

    async def resend_whatsapp(self, request_id: str, visitor_id: str) -> Any:
        _require(request_id=request_id, visitor_id=visitor_id)
        return await self._request(
            "POST", f"/api/v1/pass-requests/{request_id}/visitor/{visitor_id}/resend-whatsapp",
            "Resend WhatsApp",
        )


async def get_pass_api_client():
    """FastAPI dependency: yields a client for the configured upstream API and closes it after request."""
    session = AuthSession(
        access_token=settings.PASS_API_TOKEN,
        on_expired=lambda: logger.error("[API] PASS_API_TOKEN rejected; update it in .env"),
    )
    client = PassApiClient(session=session)
    try:
        yield client
    finally:
        await client.aclose()
