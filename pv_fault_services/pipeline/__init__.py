from .validation import (
    PredictionRequest,
    PredictionValidationError,
    ValidationResult,
    validate_prediction_request,
)
from .recorder import PersistenceError, PredictionOutcome, PredictionRecorder

__all__ = [
    "PredictionRequest",
    "PredictionValidationError",
    "ValidationResult",
    "validate_prediction_request",
    "PersistenceError",
    "PredictionOutcome",
    "PredictionRecorder",
]
