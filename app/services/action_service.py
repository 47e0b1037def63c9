# app/services/action_service.py
"""
Workflow actions: each one is a single state transition on the upstream API.

Every forwarded call is recorded in the action_log table, successful or not;
failures are re-raised to the caller after being recorded. Input checks that
need no upstream call (missing rejection reason, nothing pending) raise
ValueError before anything is sent.
"""

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Optional

from sqlalchemy.orm import Session

from app.models.action_log import ActionLog
from app.schemas.action import (
    ActivatePayload,
    BulkDecision,
    GeneratePassPayload,
    RequestStatusPayload,
    RoutePayload,
    SuspendPayload,
    VisitorDecision,
)
from app.services.pass_api_client import PassApiClient, PassApiError
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def record_action(db: Session, action: str, outcome: str, request_id: Optional[str] = None,
                        visitor_id: Optional[str] = None, acting_user_id: Optional[str] = None,
                        comment: Optional[str] = None, detail: Optional[str] = None):
    """Persist one audit row. Always commits immediately."""
    db.add(ActionLog(action=action, outcome=outcome, request_id=request_id, visitor_id=visitor_id,
                     acting_user_id=acting_user_id, comment=comment, detail=detail,
                     created_at=datetime.utcnow()))
    db.commit()
    log = logger.info if outcome == "ok" else logger.warning
    log(f"[ACTION][{action.upper()}] request={request_id} visitor={visitor_id} "
        f"by={acting_user_id} → {outcome}{f' ({detail})' if detail else ''}")


async def _forward(db: Session, action: str, call: Awaitable[Any], **context) -> Any:
    try:
        result = await call
    except (PassApiError, ValueError) as e:
        await record_action(db, action, "failed", detail=str(e), **context)
        raise
    await record_action(db, action, "ok", **context)
    return result


def _require_reason(reason: Optional[str], what: str):
    if not reason or not reason.strip():
        raise ValueError(f"Please provide a reason for {what}.")


async def decide_visitor(client: PassApiClient, db: Session, visitor_id: str,
                         decision: VisitorDecision, request_id: Optional[str] = None) -> Any:
    """Approve or reject a single visitor."""
    if decision.status == "rejected":
        _require_reason(decision.comment, "rejection")
    action = "approve" if decision.status == "approved" else "reject"
    return await _forward(
        db, action,
        client.update_visitor_status(visitor_id, decision.status, decision.acting_user_id, decision.comment),
        request_id=request_id, visitor_id=visitor_id,
        acting_user_id=decision.acting_user_id, comment=decision.comment,
    )


async def _decide_all(client: PassApiClient, db: Session, request_id: str, status: str,
                      body: BulkDecision) -> int:
    request = await client.get_pass_request(request_id)
    pending = [v for v in request.visitors if v.visitor_status == "pending"]
    verb = "approve" if status == "approved" else "reject"
    if not pending:
        raise ValueError(f"There are no pending visitors to {verb}.")

    comment = body.comment or f"Bulk {status} all {len(pending)} visitor(s)"
    results = await asyncio.gather(*(
        _forward(
            db, verb,
            client.update_visitor_status(v.id, status, body.acting_user_id, comment),
            request_id=request_id, visitor_id=v.id,
            acting_user_id=body.acting_user_id, comment=comment,
        )
        for v in pending
    ), return_exceptions=True)

    failures = [r for r in results if isinstance(r, Exception)]
    if failures:
        raise PassApiError(
            f"{len(failures)} of {len(pending)} visitor(s) could not be {status}: {failures[0]}"
        )
    return len(pending)


async def approve_all(client: PassApiClient, db: Session, request_id: str, body: BulkDecision) -> int:
    """Approve every pending visitor of a request. Returns how many were approved."""
    return await _decide_all(client, db, request_id, "approved", body)


async def reject_all(client: PassApiClient, db: Session, request_id: str, body: BulkDecision) -> int:
    _require_reason(body.comment, "rejection")
    return await _decide_all(client, db, request_id, "rejected", body)


async def update_request_status(client: PassApiClient, db: Session, request_id: str,
                                payload: RequestStatusPayload) -> Any:
    """Move a whole request to a new status. Rejecting a request needs a reason."""
    if payload.status == "rejected":
        _require_reason(payload.comments, "rejection")
    return await _forward(
        db, f"request_{payload.status}", client.update_pass_request_status(request_id, payload),
        request_id=request_id, acting_user_id=payload.routed_by or payload.current_user_id,
        comment=payload.comments,
    )


async def route_visitor(client: PassApiClient, db: Session, request_id: str, payload: RoutePayload) -> Any:
    return await _forward(
        db, "route", client.route_for_superior_approval(request_id, payload),
        request_id=request_id, visitor_id=payload.visitor_id,
        acting_user_id=payload.routed_by, comment=payload.comments,
    )


async def generate_pass(client: PassApiClient, db: Session, request_id: str,
                        payload: GeneratePassPayload) -> Any:
    return await _forward(
        db, "generate_pass", client.generate_pass(request_id, payload),
        request_id=request_id, visitor_id=payload.visitor_id, acting_user_id=payload.current_user_id,
    )


async def suspend_visitor(client: PassApiClient, db: Session, visitor_id: str, payload: SuspendPayload) -> Any:
    _require_reason(payload.reason, "suspension")
    return await _forward(
        db, "suspend", client.suspend_visitor(visitor_id, payload),
        visitor_id=visitor_id, acting_user_id=payload.suspended_by, comment=payload.reason,
    )


async def activate_visitor(client: PassApiClient, db: Session, visitor_id: str, payload: ActivatePayload) -> Any:
    return await _forward(
        db, "activate", client.activate_visitor(visitor_id, payload),
        visitor_id=visitor_id, acting_user_id=payload.activated_by,
    )


async def resend_whatsapp(client: PassApiClient, db: Session, request_id: str, visitor_id: str) -> Any:
    return await _forward(
        db, "resend_whatsapp", client.resend_whatsapp(request_id, visitor_id),
        request_id=request_id, visitor_id=visitor_id,
    )
