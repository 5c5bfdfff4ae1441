"""Agregación de features de telemetría FV.

Reduce un batch ordenado de filas a estadísticas por feature.
Sin efectos secundarios.
"""

from __future__ import annotations

from statistics import fmean, pvariance
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..common.numeric import safe_float
from .models import FeatureStats


ALLOWED_FEATURES: tuple[str, ...] = ("Voltage", "Current", "Power", "Irradiance", "Temperature")
DEFAULT_FEATURES: tuple[str, ...] = ("Voltage", "Current", "Power")

# Feature sobre la que se cuentan caídas entre filas adyacentes
DROP_FEATURE = "Power"
DROP_RATIO = 0.5

_CANONICAL_BY_LOWER = {name.lower(): name for name in ALLOWED_FEATURES}


def canonical_feature_name(name: Any) -> Optional[str]:
    """Devuelve el nombre canónico de la feature o None si no es válida."""
    if not isinstance(name, str):
        return None
    return _CANONICAL_BY_LOWER.get(name.strip().lower())


def row_value(row: Mapping[str, Any], feature: str) -> float:
    """Lee una feature de una fila aceptando variantes de mayúsculas.

    Faltante, nulo, NaN o no numérico cuenta como 0.
    """
    value = row.get(feature)
    if value is None:
        value = row.get(feature.lower())
    if value is None:
        target = feature.lower()
        for key, candidate in row.items():
            if isinstance(key, str) and key.lower() == target:
                value = candidate
                break
    return safe_float(value)


def count_drops(values: Sequence[float], ratio: float = DROP_RATIO) -> int:
    """Cuenta filas cuyo valor cae por debajo de ratio * valor anterior."""
    return sum(1 for prev, cur in zip(values, values[1:]) if cur < prev * ratio)


def aggregate_feature(rows: Sequence[Mapping[str, Any]], feature: str) -> FeatureStats:
    values = [row_value(row, feature) for row in rows]
    positives = [v for v in values if v > 0]

    if positives:
        mean = fmean(positives)
        variance = pvariance(positives, mu=mean)
    else:
        mean = 0.0
        variance = 0.0

    drop_count = count_drops(values) if feature == DROP_FEATURE else 0

    return FeatureStats(
        name=feature,
        row_count=len(values),
        positive_count=len(positives),
        mean=float(mean),
        variance=float(variance),
        drop_count=drop_count,
    )


def aggregate_features(
    rows: Sequence[Mapping[str, Any]],
    features: Iterable[str],
) -> Dict[str, FeatureStats]:
    """Calcula FeatureStats para cada feature solicitada y permitida.

    Features fuera de ALLOWED_FEATURES se ignoran (la validación
    del request ya las rechaza antes de llegar aquí).
    """
    requested: List[str] = []
    for name in features:
        canonical = canonical_feature_name(name)
        if canonical and canonical not in requested:
            requested.append(canonical)

    return {feature: aggregate_feature(rows, feature) for feature in requested}
