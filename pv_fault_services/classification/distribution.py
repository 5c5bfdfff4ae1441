"""Síntesis de la distribución de probabilidad sobre todas las clases.

La clase líder recibe la probabilidad base del scorer. El resto de la masa
(1 - base) se reparte entre las otras seis clases con un multiplicador
aleatorio en [0.5, 1.0) por clase, de modo que las minoritarias no salen
uniformes. La fuente aleatoria es inyectable para poder sembrarla en tests.
"""

from __future__ import annotations

import random
from typing import List, Optional

from ..common.numeric import round_probability
from .models import FAULT_TYPES, FaultType, ScoredPrediction


MIN_PROBABILITY = 0.001
SPREAD_LOW = 0.5
SPREAD_HIGH = 1.0


def synthesize_distribution(
    label: FaultType,
    base: float,
    rng: Optional[random.Random] = None,
) -> List[ScoredPrediction]:
    """Expande (label, base) a una ScoredPrediction por FaultType.

    Invariantes del resultado:
    - 7 entradas, una por clase, ordenadas de mayor a menor probabilidad
      (empates por orden canónico de FaultType)
    - la suma es 1.0 tras redondear a 4 decimales
    - la probabilidad de la líder es base redondeada; solo las minoritarias
      dependen de rng
    """
    if rng is None:
        rng = random.Random()

    remaining = 1.0 - base
    others = [ft for ft in FAULT_TYPES if ft is not label]
    share = remaining / len(others)

    weights = {}
    for ft in others:
        spread = SPREAD_LOW + rng.random() * (SPREAD_HIGH - SPREAD_LOW)
        weights[ft] = max(MIN_PROBABILITY, share * spread)

    # Las minoritarias se reescalan para ocupar exactamente 1 - base.
    weight_sum = sum(weights.values())
    raw = {label: base}
    for ft, w in weights.items():
        raw[ft] = w * remaining / weight_sum if weight_sum > 0 else share

    total = sum(raw.values())
    rounded = {ft: round_probability(raw[ft] / total) for ft in FAULT_TYPES}

    # Residuo de redondeo a la minoritaria más grande; la líder no se toca.
    residual = round_probability(1.0 - sum(rounded.values()))
    if residual and others:
        largest = max(others, key=lambda ft: rounded[ft])
        rounded[largest] = round_probability(rounded[largest] + residual)

    predictions = [ScoredPrediction(fault_type=ft, probability=rounded[ft]) for ft in FAULT_TYPES]
    # sorted() es estable: los empates conservan el orden canónico.
    return sorted(predictions, key=lambda p: -p.probability)
