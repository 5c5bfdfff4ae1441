"""Endpoint de predicción de fallas."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from ...pipeline.recorder import PersistenceError, PredictionRecorder
from ...pipeline.validation import PredictionValidationError
from ..auth import require_api_key
from ..deps import get_recorder
from ..schemas import PredictionResponse

router = APIRouter(tags=["predictions"])
logger = logging.getLogger(__name__)


@router.post(
    "/api/predict",
    response_model=PredictionResponse,
    dependencies=[Depends(require_api_key)],
)
def predict(
    payload: Dict[str, Any] = Body(...),
    recorder: PredictionRecorder = Depends(get_recorder),
):
    """Clasifica un batch de telemetría y aplica el protocolo de persistencia.

    Los fallos de persistencia no cambian el resultado: se reflejan en
    persisted / historyRecorded / statusUpdated.
    """
    try:
        outcome = recorder.record_payload(payload)
    except PredictionValidationError as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})
    except PersistenceError:
        raise HTTPException(
            status_code=500,
            detail={"error": "Prediction could not be persisted"},
        )
    except Exception as e:
        logger.exception("[PREDICT] Prediction error err=%s", type(e).__name__)
        raise HTTPException(status_code=500, detail={"error": "Prediction failed"})

    return outcome.to_response()
