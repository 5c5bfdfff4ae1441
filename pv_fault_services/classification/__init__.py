"""Módulo de clasificación de fallas FV.

Estructura modular:
- models.py: FaultType, Severity, SystemState y dataclasses de resultado
- features.py: Agregación de estadísticas por feature
- fault_rules.py: Tabla ordenada de reglas heurísticas y scorer
- distribution.py: Distribución de probabilidad sobre las 7 clases
- severity.py: Severidad por umbrales
- fault_classifier.py: Clasificador que encadena todo lo anterior
"""

from .models import (
    FAULT_TYPES,
    FaultType,
    FeatureStats,
    ScoredLabel,
    ScoredPrediction,
    Severity,
    SystemState,
)
from .features import ALLOWED_FEATURES, DEFAULT_FEATURES, aggregate_features, canonical_feature_name
from .fault_rules import DEFAULT_FAULT_RULES, FaultRule, LabelMode, score_features
from .distribution import synthesize_distribution
from .severity import classify_severity
from .fault_classifier import ClassificationResult, FaultClassifier

__all__ = [
    "FAULT_TYPES",
    "FaultType",
    "FeatureStats",
    "ScoredLabel",
    "ScoredPrediction",
    "Severity",
    "SystemState",
    "ALLOWED_FEATURES",
    "DEFAULT_FEATURES",
    "aggregate_features",
    "canonical_feature_name",
    "DEFAULT_FAULT_RULES",
    "FaultRule",
    "LabelMode",
    "score_features",
    "synthesize_distribution",
    "classify_severity",
    "ClassificationResult",
    "FaultClassifier",
]
