"""Módulo de endpoints HTTP.

Contiene todos los endpoints de la API organizados por función.
"""

from .health import router as health_router
from .predict import router as predict_router
from .history import router as history_router
from .system_status import router as system_status_router

__all__ = [
    "health_router",
    "predict_router",
    "history_router",
    "system_status_router",
]
