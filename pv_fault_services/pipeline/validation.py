"""Validación de requests de predicción.

Valida y normaliza el body de /api/predict antes de cualquier cálculo:
- data: lista no vacía de objetos, con tope de filas
- features: opcional, no vacía, solo nombres permitidos (case-insensitive)
- datasetName: opcional, string con tope de longitud, saneado
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, validator

from ..classification.features import ALLOWED_FEATURES, DEFAULT_FEATURES, canonical_feature_name
from ..common.config import get_settings

logger = logging.getLogger(__name__)


_UNSAFE_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


class PredictionValidationError(ValueError):
    """Request rechazado por culpa del caller."""


class PredictionRequestPayload(BaseModel):
    """Schema del body de predicción.

    Formato esperado:
    {
        "data": [{"Voltage": 48.1, "Current": 5.2, "Power": 250.0}, ...],
        "features": ["Voltage", "Current", "Power"],
        "datasetName": "planta_norte.xlsx"
    }
    """

    data: List[Dict[str, Any]]
    features: Optional[List[str]] = None
    dataset_name: Optional[str] = Field(default=None, alias="datasetName")

    class Config:
        populate_by_name = True

    @validator("data", pre=True)
    def validate_data(cls, v):
        if v is None:
            raise ValueError("No data provided")
        if not isinstance(v, list):
            raise ValueError("data must be an array of rows")
        if not v:
            raise ValueError("No data provided")
        for i, row in enumerate(v):
            if not isinstance(row, dict):
                raise ValueError(f"Row {i} must be an object mapping feature names to numbers")
        return v

    @validator("features", pre=True)
    def validate_features(cls, v):
        if v is None:
            return None
        if not isinstance(v, list) or not v:
            raise ValueError("features must be a non-empty array")

        resolved: List[str] = []
        for name in v:
            canonical = canonical_feature_name(name)
            if canonical is None:
                raise ValueError(
                    f"Invalid feature {name!r}. Allowed features: {', '.join(ALLOWED_FEATURES)}"
                )
            if canonical not in resolved:
                resolved.append(canonical)
        return resolved

    @validator("dataset_name", pre=True)
    def validate_dataset_name(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("datasetName must be a string")
        return v


@dataclass(frozen=True)
class PredictionRequest:
    """Request validado y normalizado, listo para el pipeline."""

    rows: Tuple[Mapping[str, Any], ...]
    features: Tuple[str, ...]
    dataset_name: str

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class ValidationResult:
    """Resultado de validación."""

    valid: bool
    request: Optional[PredictionRequest] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def sanitize_dataset_name(name: Optional[str], default: str) -> str:
    if name is None:
        return default
    cleaned = _UNSAFE_NAME_CHARS.sub("_", name).strip()
    return cleaned or default


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    msg = str(first.get("msg", ""))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    if first.get("type") == "missing" and loc == "data":
        return "No data provided"
    return msg if first.get("type") == "value_error" else f"{loc}: {msg}"


def validate_prediction_request(
    data: Any,
    *,
    max_rows: Optional[int] = None,
    max_dataset_name_length: Optional[int] = None,
    default_dataset_name: Optional[str] = None,
) -> ValidationResult:
    """Valida el body de una petición de predicción.

    Args:
        data: Body JSON ya decodificado
        max_rows: Tope de filas (default: settings.max_batch_rows)
        max_dataset_name_length: Tope del nombre (default: settings)
        default_dataset_name: Nombre placeholder (default: settings)

    Returns:
        ValidationResult con el request normalizado o el error
    """
    if max_rows is None or max_dataset_name_length is None or default_dataset_name is None:
        settings = get_settings()
        max_rows = settings.max_batch_rows if max_rows is None else max_rows
        if max_dataset_name_length is None:
            max_dataset_name_length = settings.max_dataset_name_length
        if default_dataset_name is None:
            default_dataset_name = settings.default_dataset_name

    warnings: List[str] = []

    if not isinstance(data, Mapping):
        return ValidationResult(valid=False, error="Request body must be a JSON object")

    body = dict(data)
    if "datasetName" not in body and "dataset_name" in body:
        body["datasetName"] = body.pop("dataset_name")
        warnings.append("Used snake_case dataset_name instead of datasetName")

    # El tope se comprueba antes de validar fila por fila.
    rows = body.get("data")
    if isinstance(rows, list) and len(rows) > max_rows:
        return ValidationResult(
            valid=False,
            error=f"Batch too large: {len(rows)} rows (max {max_rows})",
        )

    name = body.get("datasetName")
    if isinstance(name, str) and len(name) > max_dataset_name_length:
        return ValidationResult(
            valid=False,
            error=f"datasetName too long: {len(name)} characters (max {max_dataset_name_length})",
        )

    try:
        payload = PredictionRequestPayload(**body)
    except ValidationError as e:
        error = _first_error_message(e)
        logger.warning("[PREDICT_VALIDATOR] Validation failed: %s", error)
        return ValidationResult(valid=False, error=error)

    features = tuple(payload.features) if payload.features is not None else DEFAULT_FEATURES

    return ValidationResult(
        valid=True,
        request=PredictionRequest(
            rows=tuple(payload.data),
            features=features,
            dataset_name=sanitize_dataset_name(payload.dataset_name, default_dataset_name),
        ),
        warnings=warnings,
    )
