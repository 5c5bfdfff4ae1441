"""Health and readiness endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ...repository.store import SqlPredictionStore
from ..deps import get_store

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: ok mientras el proceso esté vivo."""
    return {"status": "ok"}


@router.get("/ready")
def ready(store: SqlPredictionStore = Depends(get_store)):
    """Readiness probe: verifica conectividad con el store."""
    try:
        store.ping()
        return {"status": "ready"}
    except Exception:
        logging.getLogger(__name__).exception("Readiness check failed")
        raise HTTPException(status_code=503, detail="not ready")
