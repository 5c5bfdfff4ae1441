"""Endpoints del estado singleton del sistema.

El POST es la única vía hacia Warning y la única vuelta a Normal:
el pipeline de predicción solo transiciona a Fault.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ...repository.records import SystemStatusUpdate
from ...repository.store import SqlPredictionStore
from ..auth import require_api_key
from ..deps import get_store
from ..schemas import SystemStatusOut, SystemStatusUpdateIn

router = APIRouter(tags=["system-status"])
logger = logging.getLogger(__name__)

_NOT_INITIALISED = {"error": "System status not initialised"}


@router.get(
    "/api/system-status",
    response_model=SystemStatusOut,
    dependencies=[Depends(require_api_key)],
)
def get_system_status(store: SqlPredictionStore = Depends(get_store)):
    try:
        status = store.get_status()
    except Exception as e:
        logger.exception("[STATUS] Error fetching status err=%s", type(e).__name__)
        raise HTTPException(status_code=500, detail={"error": "Status unavailable"})

    if status is None:
        raise HTTPException(status_code=404, detail=_NOT_INITIALISED)
    return status


@router.post(
    "/api/system-status",
    response_model=SystemStatusOut,
    dependencies=[Depends(require_api_key)],
)
def update_system_status(
    payload: Optional[SystemStatusUpdateIn] = Body(default=None),
    store: SqlPredictionStore = Depends(get_store),
):
    """Actualización manual del estado (lee id, luego update)."""
    payload = payload or SystemStatusUpdateIn()
    update = SystemStatusUpdate(
        status=payload.status,
        current_fault=payload.current_fault,
        confidence=payload.confidence,
        last_updated=datetime.now(timezone.utc),
    )

    try:
        status_id = store.read_status_id()
        if not status_id:
            raise HTTPException(status_code=404, detail=_NOT_INITIALISED)
        store.update_status(status_id, update)
        updated = store.get_status()
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[STATUS] Error updating status err=%s", type(e).__name__)
        raise HTTPException(status_code=500, detail={"error": "Status update failed"})

    logger.info(
        "[STATUS] Manual update status=%s current_fault=%s confidence=%.4f",
        update.status.value,
        update.current_fault.value,
        update.confidence,
    )
    if updated is None:
        raise HTTPException(status_code=404, detail=_NOT_INITIALISED)
    return updated
