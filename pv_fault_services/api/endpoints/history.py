"""Endpoint de historial de fallas."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ...repository.store import SqlPredictionStore
from ..auth import require_api_key
from ..deps import get_store
from ..schemas import HistoryResponse

router = APIRouter(tags=["history"])
logger = logging.getLogger(__name__)


@router.get(
    "/api/history",
    response_model=HistoryResponse,
    dependencies=[Depends(require_api_key)],
)
def get_history(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: SqlPredictionStore = Depends(get_store),
):
    """Historial de fallas, más reciente primero."""
    logger.info("[HISTORY] Fetching fault history: limit=%d, offset=%d", limit, offset)
    try:
        page = store.list_history(limit=limit, offset=offset)
    except Exception as e:
        logger.exception("[HISTORY] Error fetching history err=%s", type(e).__name__)
        raise HTTPException(status_code=500, detail={"error": "History unavailable"})

    logger.info("[HISTORY] Returning %d records", len(page.items))
    return HistoryResponse(
        history=page.items,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
