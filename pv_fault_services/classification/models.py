"""Modelos de datos para clasificación de fallas FV.

Enums y dataclasses compartidos por el agregador, las reglas,
el sintetizador de distribución y el recorder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class FaultType(str, Enum):
    """Clases de falla. El orden de declaración es el orden canónico."""

    NORMAL = "Normal"
    LINE_LINE_FAULT = "Line-Line Fault"
    GROUND_FAULT = "Ground Fault"
    OPEN_CIRCUIT = "Open Circuit"
    PARTIAL_SHADING = "Partial Shading"
    DEGRADATION = "Degradation"
    ARC_FAULT = "Arc Fault"


# Orden canónico para iterar y desempatar
FAULT_TYPES: Tuple[FaultType, ...] = tuple(FaultType)


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class SystemState(str, Enum):
    """Estados del registro singleton system_status."""

    NORMAL = "Normal"
    WARNING = "Warning"
    FAULT = "Fault"


@dataclass(frozen=True)
class FeatureStats:
    """Estadísticas de una feature sobre el batch.

    mean y variance se calculan solo sobre valores > 0.
    drop_count solo aplica a Power (0 para el resto).
    """

    name: str
    row_count: int
    positive_count: int
    mean: float
    variance: float
    drop_count: int = 0

    @property
    def has_positive_values(self) -> bool:
        return self.positive_count > 0


@dataclass(frozen=True)
class ScoredLabel:
    """Salida del scorer: etiqueta líder y probabilidad base (previa al ruido)."""

    label: FaultType
    base: float
    score: float = 0.0
    triggered_rules: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScoredPrediction:
    fault_type: FaultType
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {"faultType": self.fault_type.value, "probability": self.probability}
