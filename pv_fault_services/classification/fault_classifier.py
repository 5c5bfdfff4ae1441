"""Clasificador principal: encadena agregación, reglas, distribución y severidad."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .distribution import synthesize_distribution
from .fault_rules import DEFAULT_FAULT_RULES, FaultRule, score_features
from .features import aggregate_features
from .models import FeatureStats, ScoredLabel, ScoredPrediction, Severity
from .severity import classify_severity


@dataclass(frozen=True)
class ClassificationResult:
    stats: Dict[str, FeatureStats]
    scored: ScoredLabel
    predictions: List[ScoredPrediction]
    severity: Severity

    @property
    def top_prediction(self) -> ScoredPrediction:
        return self.predictions[0]


class FaultClassifier:
    """Clasificador de fallas sin estado ni I/O.

    Puede compartirse entre requests concurrentes siempre que cada
    llamada reciba su propio rng (random.Random no es thread-safe
    en cuanto a reproducibilidad).
    """

    def __init__(self, rules: Sequence[FaultRule] = DEFAULT_FAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[FaultRule, ...]:
        return self._rules

    def classify(
        self,
        rows: Sequence[Mapping[str, Any]],
        features: Sequence[str],
        rng: Optional[random.Random] = None,
    ) -> ClassificationResult:
        stats = aggregate_features(rows, features)
        scored = score_features(stats, self._rules)
        predictions = synthesize_distribution(scored.label, scored.base, rng)
        severity = classify_severity(predictions[0].probability)

        return ClassificationResult(
            stats=stats,
            scored=scored,
            predictions=predictions,
            severity=severity,
        )
