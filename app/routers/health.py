# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + local DB + upstream pass-request API reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "upstream_api": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Upstream categories endpoint needs no auth
    try:
        resp = requests.get(f"{settings.PASS_API_BASE_URL}/api/v1/categories/main", timeout=3)
        result["upstream_api"] = "ok" if resp.status_code == 200 else f"http_{resp.status_code}"
        if resp.status_code != 200:
            result["status"] = "degraded"
    except requests.exceptions.ConnectionError:
        result["upstream_api"] = "unreachable"
        result["status"] = "degraded"
    except requests.exceptions.RequestException as e:
        result["upstream_api"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
