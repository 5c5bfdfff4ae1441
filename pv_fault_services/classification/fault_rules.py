"""Reglas heurísticas de detección de fallas FV.

Las reglas se evalúan en orden. Todas las que disparan suman su delta
al score; la etiqueta se decide según el modo de cada regla:

- OVERRIDE: reemplaza la etiqueta actual.
- IF_UNSET: solo aplica si la etiqueta sigue en Normal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence

from .models import FaultType, FeatureStats, ScoredLabel


BASE_PROBABILITY = 0.5
MAX_PROBABILITY = 0.95

StatsPredicate = Callable[[Mapping[str, FeatureStats]], bool]


class LabelMode(Enum):
    OVERRIDE = "override"
    IF_UNSET = "if_unset"


@dataclass(frozen=True)
class FaultRule:
    name: str
    predicate: StatsPredicate
    score_delta: float
    label: FaultType
    mode: LabelMode

    def matches(self, stats: Mapping[str, FeatureStats]) -> bool:
        return bool(self.predicate(stats))


def _positive(stats: Mapping[str, FeatureStats], feature: str) -> Optional[FeatureStats]:
    s = stats.get(feature)
    if s is None or not s.has_positive_values:
        return None
    return s


def _voltage_variance_high(stats: Mapping[str, FeatureStats]) -> bool:
    s = _positive(stats, "Voltage")
    return s is not None and s.variance > 50


def _voltage_mean_low(stats: Mapping[str, FeatureStats]) -> bool:
    s = _positive(stats, "Voltage")
    return s is not None and s.mean < 35


def _current_mean_high(stats: Mapping[str, FeatureStats]) -> bool:
    s = _positive(stats, "Current")
    return s is not None and s.mean > 7


def _power_drops_frequent(stats: Mapping[str, FeatureStats]) -> bool:
    s = stats.get("Power")
    if s is None or s.row_count < 2:
        return False
    return s.drop_count > s.row_count * 0.2


DEFAULT_FAULT_RULES: tuple[FaultRule, ...] = (
    FaultRule(
        name="voltage_variance_high",
        predicate=_voltage_variance_high,
        score_delta=0.3,
        label=FaultType.LINE_LINE_FAULT,
        mode=LabelMode.OVERRIDE,
    ),
    FaultRule(
        name="voltage_mean_low",
        predicate=_voltage_mean_low,
        score_delta=0.4,
        label=FaultType.LINE_LINE_FAULT,
        mode=LabelMode.OVERRIDE,
    ),
    FaultRule(
        name="current_mean_high",
        predicate=_current_mean_high,
        score_delta=0.2,
        label=FaultType.GROUND_FAULT,
        mode=LabelMode.IF_UNSET,
    ),
    FaultRule(
        name="power_drops_frequent",
        predicate=_power_drops_frequent,
        score_delta=0.25,
        label=FaultType.OPEN_CIRCUIT,
        mode=LabelMode.IF_UNSET,
    ),
)


def score_features(
    stats: Mapping[str, FeatureStats],
    rules: Sequence[FaultRule] = DEFAULT_FAULT_RULES,
) -> ScoredLabel:
    """Evalúa las reglas en orden y devuelve (etiqueta, probabilidad base).

    base = min(0.95, 0.5 + score). Sin reglas disparadas: Normal con 0.5.
    """
    label = FaultType.NORMAL
    score = 0.0
    triggered = []

    for rule in rules:
        if not rule.matches(stats):
            continue
        score += rule.score_delta
        triggered.append(rule.name)
        if rule.mode is LabelMode.OVERRIDE or label is FaultType.NORMAL:
            label = rule.label

    base = min(MAX_PROBABILITY, BASE_PROBABILITY + score)

    return ScoredLabel(label=label, base=base, score=score, triggered_rules=tuple(triggered))
