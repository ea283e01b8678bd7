from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session, text

from notevault.db import get_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(session: Session = Depends(get_session)):
    db_status = "ok"
    try:
        session.exec(text("SELECT 1"))
    except Exception:
        logger.exception("Health check database query failed")
        db_status = "error"

    healthy = db_status == "ok"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": "notevault-backend",
            "version": "0.1.0",
            "checks": {"database": db_status},
        },
    )
