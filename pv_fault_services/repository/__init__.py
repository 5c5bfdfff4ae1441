"""Persistencia en el store externo (SQLAlchemy Core)."""

from .records import HistoryPage, HistoryRecord, PredictionRecord, SystemStatusUpdate
from .schema_setup import bootstrap, ensure_schema, seed_system_status
from .store import SqlPredictionStore

__all__ = [
    "HistoryPage",
    "HistoryRecord",
    "PredictionRecord",
    "SystemStatusUpdate",
    "bootstrap",
    "ensure_schema",
    "seed_system_status",
    "SqlPredictionStore",
]
