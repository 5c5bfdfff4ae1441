"""Registros persistidos en el store externo."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from ..classification.models import FaultType, ScoredPrediction, Severity, SystemState


@dataclass(frozen=True)
class PredictionRecord:
    """Una fila por invocación del pipeline. Inmutable una vez escrita."""

    predicted_fault: FaultType
    probabilities: Tuple[ScoredPrediction, ...]
    features: Tuple[str, ...]
    row_count: int
    dataset_name: str
    created_at: datetime

    @property
    def input_features(self) -> dict:
        return {"features": list(self.features), "rowCount": self.row_count}


@dataclass(frozen=True)
class HistoryRecord:
    """Entrada append-only del historial de fallas."""

    timestamp: datetime
    fault_type: FaultType
    severity: Severity
    confidence: float
    dataset_name: str
    features_used: Tuple[str, ...]
    id: Optional[str] = None
    duration: Optional[str] = None


@dataclass(frozen=True)
class SystemStatusUpdate:
    """Campos que se sobrescriben en la fila singleton de system_status."""

    status: SystemState
    current_fault: FaultType
    confidence: float
    last_updated: datetime


@dataclass
class HistoryPage:
    items: List[dict] = field(default_factory=list)
    total: int = 0
    limit: int = 50
    offset: int = 0
