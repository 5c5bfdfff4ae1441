"""Store SQL del pipeline de predicción.

Cada operación abre su propia transacción corta, de modo que un fallo
en un paso no revierte los pasos anteriores.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from . import prediction_repository as predictions
from . import status_repository as status
from .records import HistoryPage, HistoryRecord, PredictionRecord, SystemStatusUpdate


class SqlPredictionStore:
    """Colaborador de persistencia: predicciones, historial y estado."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # ------------------------------------------------------------------
    # Escrituras usadas por el PredictionRecorder
    # ------------------------------------------------------------------

    def insert_prediction(self, record: PredictionRecord) -> str:
        with self._engine.begin() as conn:
            return predictions.insert_prediction(conn, record)

    def insert_history(self, record: HistoryRecord) -> str:
        with self._engine.begin() as conn:
            return predictions.insert_fault_history(conn, record)

    def read_status_id(self) -> Optional[str]:
        with self._engine.connect() as conn:
            return status.get_status_id(conn)

    def update_status(self, status_id: str, update: SystemStatusUpdate) -> int:
        with self._engine.begin() as conn:
            return status.update_system_status(conn, status_id, update)

    # ------------------------------------------------------------------
    # Lecturas
    # ------------------------------------------------------------------

    def get_status(self) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            return status.get_system_status(conn)

    def list_history(self, *, limit: int = 50, offset: int = 0) -> HistoryPage:
        with self._engine.connect() as conn:
            items: List[dict] = predictions.list_fault_history(conn, limit=limit, offset=offset)
            total = predictions.count_fault_history(conn)
        return HistoryPage(items=items, total=total, limit=limit, offset=offset)

    def count_predictions(self) -> int:
        with self._engine.connect() as conn:
            return predictions.count_predictions(conn)

    def ping(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))
