from __future__ import annotations

from .models import Severity


CRITICAL_THRESHOLD = 0.9
HIGH_THRESHOLD = 0.75
MEDIUM_THRESHOLD = 0.5


def classify_severity(confidence: float) -> Severity:
    """Severidad por umbrales fijos, límite inferior inclusivo."""
    if confidence >= CRITICAL_THRESHOLD:
        return Severity.CRITICAL
    if confidence >= HIGH_THRESHOLD:
        return Severity.HIGH
    if confidence >= MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW
