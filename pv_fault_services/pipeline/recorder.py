"""Orquestación del pipeline de predicción y protocolo de persistencia.

Pasos de escritura, en orden, cada uno aislado de los demás:
1. Siempre: guardar el PredictionRecord con la distribución completa.
2. Solo si la predicción líder califica (no Normal y probabilidad > umbral):
   a. append al historial de fallas
   b. sobrescribir la fila singleton de system_status (leer id, luego update)
3. Si no califica, system_status no se toca (nunca vuelve a Normal desde aquí).

La respuesta siempre contiene el resultado calculado; los fallos de
persistencia se registran en logs y se reflejan en los flags de la respuesta.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

from ..classification.fault_classifier import ClassificationResult, FaultClassifier
from ..classification.models import FaultType, ScoredPrediction, Severity, SystemState
from ..common.config import Settings, get_settings
from ..repository.records import HistoryRecord, PredictionRecord, SystemStatusUpdate
from .validation import PredictionRequest, PredictionValidationError, validate_prediction_request

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Fallo de escritura tratado como fatal (solo en modo auditoría estricta)."""


class PredictionStore(Protocol):
    def insert_prediction(self, record: PredictionRecord) -> str: ...

    def insert_history(self, record: HistoryRecord) -> str: ...

    def read_status_id(self) -> Optional[str]: ...

    def update_status(self, status_id: str, update: SystemStatusUpdate) -> int: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PredictionOutcome:
    predictions: List[ScoredPrediction]
    top_prediction: ScoredPrediction
    severity: Severity
    timestamp: datetime
    prediction_id: Optional[str] = None
    history_recorded: bool = False
    status_updated: bool = False
    classification: Optional[ClassificationResult] = field(default=None, repr=False)

    @property
    def persisted(self) -> bool:
        return self.prediction_id is not None

    def to_response(self) -> Dict[str, Any]:
        return {
            "predictions": [p.to_dict() for p in self.predictions],
            "topPrediction": self.top_prediction.to_dict(),
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "predictionId": self.prediction_id,
            "persisted": self.persisted,
            "historyRecorded": self.history_recorded,
            "statusUpdated": self.status_updated,
        }


class PredictionRecorder:
    """Ejecuta clasificación + protocolo de escritura para un request validado."""

    def __init__(
        self,
        store: PredictionStore,
        *,
        classifier: Optional[FaultClassifier] = None,
        settings: Optional[Settings] = None,
        rng_factory: Optional[Callable[[], random.Random]] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._classifier = classifier or FaultClassifier()
        self._settings = settings or get_settings()
        self._rng_factory = rng_factory or self._default_rng_factory
        self._clock = clock

    @property
    def settings(self) -> Settings:
        return self._settings

    def _default_rng_factory(self) -> random.Random:
        # Un Random por invocación: sin estado compartido entre requests.
        return random.Random(self._settings.random_seed)

    def is_qualifying(self, top: ScoredPrediction) -> bool:
        return (
            top.fault_type is not FaultType.NORMAL
            and top.probability > self._settings.history_confidence_threshold
        )

    def record_payload(self, body: Any) -> PredictionOutcome:
        """Valida un body crudo y ejecuta el pipeline.

        Raises:
            PredictionValidationError: si el body no es válido
        """
        result = validate_prediction_request(
            body,
            max_rows=self._settings.max_batch_rows,
            max_dataset_name_length=self._settings.max_dataset_name_length,
            default_dataset_name=self._settings.default_dataset_name,
        )
        if not result.valid or result.request is None:
            raise PredictionValidationError(result.error or "Invalid request")
        for warning in result.warnings:
            logger.info("[PREDICT] %s", warning)
        return self.record(result.request)

    def record(self, request: PredictionRequest) -> PredictionOutcome:
        logger.info(
            "[PREDICT] Received prediction request: %d rows, features: %s",
            request.row_count,
            ", ".join(request.features),
        )

        classification = self._classifier.classify(
            request.rows, request.features, self._rng_factory()
        )
        top = classification.top_prediction
        severity = classification.severity
        now = self._clock()

        logger.info(
            "[PREDICT] Top prediction: %s (%.4f) severity=%s rules=%s",
            top.fault_type.value,
            top.probability,
            severity.value,
            ",".join(classification.scored.triggered_rules) or "-",
        )

        outcome = PredictionOutcome(
            predictions=classification.predictions,
            top_prediction=top,
            severity=severity,
            timestamp=now,
            classification=classification,
        )

        outcome.prediction_id = self._save_prediction(request, classification, now)

        if self.is_qualifying(top):
            outcome.history_recorded = self._save_history(request, top, severity, now)
            outcome.status_updated = self._update_status(top, now)

        return outcome

    # ------------------------------------------------------------------
    # Pasos de persistencia
    # ------------------------------------------------------------------

    def _save_prediction(
        self,
        request: PredictionRequest,
        classification: ClassificationResult,
        now: datetime,
    ) -> Optional[str]:
        record = PredictionRecord(
            predicted_fault=classification.top_prediction.fault_type,
            probabilities=tuple(classification.predictions),
            features=request.features,
            row_count=request.row_count,
            dataset_name=request.dataset_name,
            created_at=now,
        )
        try:
            return self._store.insert_prediction(record)
        except Exception as e:
            logger.exception("[PREDICT] Error saving prediction: %s", type(e).__name__)
            if self._settings.strict_prediction_audit:
                raise PersistenceError("failed to persist prediction record") from e
            return None

    def _save_history(
        self,
        request: PredictionRequest,
        top: ScoredPrediction,
        severity: Severity,
        now: datetime,
    ) -> bool:
        record = HistoryRecord(
            timestamp=now,
            fault_type=top.fault_type,
            severity=severity,
            confidence=top.probability,
            dataset_name=request.dataset_name,
            features_used=request.features,
        )
        try:
            self._store.insert_history(record)
            return True
        except Exception as e:
            logger.exception("[PREDICT] Error saving to history: %s", type(e).__name__)
            return False

    def _update_status(self, top: ScoredPrediction, now: datetime) -> bool:
        update = SystemStatusUpdate(
            status=SystemState.FAULT,
            current_fault=top.fault_type,
            confidence=top.probability,
            last_updated=now,
        )
        try:
            status_id = self._store.read_status_id()
            if not status_id:
                logger.error("[STATUS] system_status row not found; status not updated")
                return False
            rows = self._store.update_status(status_id, update)
            if rows == 0:
                logger.warning("[STATUS] system_status id=%s vanished before update", status_id)
                return False
            return True
        except Exception as e:
            logger.exception("[STATUS] Error updating status: %s", type(e).__name__)
            return False
