"""Funciones canónicas de precisión numérica.

Política de precisión:
- Cálculos internos: Python float (IEEE 754 double)
- Probabilidades: redondeo a 4 decimales SOLO en la frontera (respuesta / BD)
"""

from __future__ import annotations

import math

# Decimales con los que se publican las probabilidades
PROBABILITY_PRECISION = 4


def safe_float(value, default: float = 0.0) -> float:
    """Convierte un valor a float con validación de NaN/Infinity.

    Args:
        value: Valor a convertir (puede ser None, str, Decimal, etc.)
        default: Valor por defecto si es inválido

    Returns:
        Float válido o default si el valor es None, NaN, Infinity o no numérico
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(value)
        if not math.isfinite(f):
            return default
        return f
    except (TypeError, ValueError):
        return default


def round_probability(value: float) -> float:
    return round(float(value), PROBABILITY_PRECISION)
