# app/routers/actions.py
"""
Workflow actions forwarded to the upstream API, plus the local audit log.
Upstream failures map to 502, an expired upstream token to 401, and
missing or invalid input to 422.
"""

from typing import Any, Awaitable, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.action_log import ActionLog
from app.schemas.action import (
    ActionLogOut,
    ActivatePayload,
    BulkDecision,
    GeneratePassPayload,
    RequestStatusPayload,
    RoutePayload,
    SuspendPayload,
    VisitorDecision,
)
from app.services import action_service
from app.services.pass_api_client import AuthExpiredError, PassApiClient, PassApiError, get_pass_api_client

router = APIRouter()


async def _run(call: Awaitable[Any]) -> Any:
    try:
        return await call
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AuthExpiredError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except PassApiError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/actions/visitors/{visitor_id}/decision", summary="Approve or reject one visitor")
async def decide_visitor(visitor_id: str, body: VisitorDecision, request_id: Optional[str] = None,
                         client: PassApiClient = Depends(get_pass_api_client),
                         db: Session = Depends(get_db)):
    result = await _run(action_service.decide_visitor(client, db, visitor_id, body, request_id))
    return {"status": body.status, "visitor_id": visitor_id, "result": result}


@router.post("/actions/requests/{request_id}/approve-all", summary="Approve every pending visitor")
async def approve_all(request_id: str, body: BulkDecision,
                      client: PassApiClient = Depends(get_pass_api_client),
                      db: Session = Depends(get_db)):
    count = await _run(action_service.approve_all(client, db, request_id, body))
    return {"status": "approved", "request_id": request_id, "visitors": count}


@router.post("/actions/requests/{request_id}/reject-all", summary="Reject every pending visitor")
async def reject_all(request_id: str, body: BulkDecision,
                     client: PassApiClient = Depends(get_pass_api_client),
                     db: Session = Depends(get_db)):
    count = await _run(action_service.reject_all(client, db, request_id, body))
    return {"status": "rejected", "request_id": request_id, "visitors": count}


@router.post("/actions/requests/{request_id}/status", summary="Change the status of a whole request")
async def update_request_status(request_id: str, body: RequestStatusPayload,
                                client: PassApiClient = Depends(get_pass_api_client),
                                db: Session = Depends(get_db)):
    result = await _run(action_service.update_request_status(client, db, request_id, body))
    return {"status": body.status, "request_id": request_id, "result": result}


@router.post("/actions/requests/{request_id}/route", summary="Route a visitor to a superior")
async def route_visitor(request_id: str, body: RoutePayload,
                        client: PassApiClient = Depends(get_pass_api_client),
                        db: Session = Depends(get_db)):
    result = await _run(action_service.route_visitor(client, db, request_id, body))
    return {"status": "routed_for_approval", "request_id": request_id, "result": result}


@router.post("/actions/requests/{request_id}/generate-pass", summary="Issue the pass for a visitor")
async def generate_pass(request_id: str, body: GeneratePassPayload,
                        client: PassApiClient = Depends(get_pass_api_client),
                        db: Session = Depends(get_db)):
    result = await _run(action_service.generate_pass(client, db, request_id, body))
    return {"status": "approved", "request_id": request_id, "result": result}


@router.post("/actions/visitors/{visitor_id}/suspend", summary="Suspend an issued pass")
async def suspend_visitor(visitor_id: str, body: SuspendPayload,
                          client: PassApiClient = Depends(get_pass_api_client),
                          db: Session = Depends(get_db)):
    result = await _run(action_service.suspend_visitor(client, db, visitor_id, body))
    return {"status": "suspended", "visitor_id": visitor_id, "result": result}


@router.post("/actions/visitors/{visitor_id}/activate", summary="Lift a suspension")
async def activate_visitor(visitor_id: str, body: ActivatePayload,
                           client: PassApiClient = Depends(get_pass_api_client),
                           db: Session = Depends(get_db)):
    result = await _run(action_service.activate_visitor(client, db, visitor_id, body))
    return {"status": "activated", "visitor_id": visitor_id, "result": result}


@router.post("/actions/requests/{request_id}/visitors/{visitor_id}/resend-whatsapp",
             summary="Resend the pass over WhatsApp")
async def resend_whatsapp(request_id: str, visitor_id: str,
                          client: PassApiClient = Depends(get_pass_api_client),
                          db: Session = Depends(get_db)):
    result = await _run(action_service.resend_whatsapp(client, db, request_id, visitor_id))
    return {"status": "sent", "request_id": request_id, "visitor_id": visitor_id, "result": result}


@router.get("/actions/log", response_model=list[ActionLogOut], summary="Recent forwarded actions")
def list_action_log(visitor_id: Optional[str] = None, request_id: Optional[str] = None,
                    limit: int = 100, db: Session = Depends(get_db)):
    q = db.query(ActionLog)
    if visitor_id:
        q = q.filter(ActionLog.visitor_id == visitor_id)
    if request_id:
        q = q.filter(ActionLog.request_id == request_id)
    return q.order_by(ActionLog.created_at.desc()).limit(limit).all()
