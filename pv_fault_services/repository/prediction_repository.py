from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Connection

from .records import HistoryRecord, PredictionRecord


def db_timestamp(ts: datetime) -> str:
    """Timestamp UTC naive en ISO-8601, comparable como texto."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts.isoformat()


def insert_prediction(conn: Connection, record: PredictionRecord) -> str:
    prediction_id = str(uuid.uuid4())
    conn.execute(
        text(
            """
            INSERT INTO predictions (
              id, predicted_fault, probabilities, input_features, dataset_name, created_at
            )
            VALUES (
              :id, :predicted_fault, :probabilities, :input_features, :dataset_name, :created_at
            )
            """
        ),
        {
            "id": prediction_id,
            "predicted_fault": record.predicted_fault.value,
            "probabilities": json.dumps([p.to_dict() for p in record.probabilities]),
            "input_features": json.dumps(record.input_features),
            "dataset_name": record.dataset_name,
            "created_at": db_timestamp(record.created_at),
        },
    )
    return prediction_id


def insert_fault_history(conn: Connection, record: HistoryRecord) -> str:
    history_id = record.id or str(uuid.uuid4())
    conn.execute(
        text(
            """
            INSERT INTO fault_history (
              id, timestamp, fault_type, severity, confidence, duration, dataset_name, features_used
            )
            VALUES (
              :id, :timestamp, :fault_type, :severity, :confidence, :duration, :dataset_name, :features_used
            )
            """
        ),
        {
            "id": history_id,
            "timestamp": db_timestamp(record.timestamp),
            "fault_type": record.fault_type.value,
            "severity": record.severity.value,
            "confidence": float(record.confidence),
            "duration": record.duration,
            "dataset_name": record.dataset_name,
            "features_used": json.dumps(list(record.features_used)),
        },
    )
    return history_id


def _load_json(raw: Any, default: Any) -> Any:
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return default


def list_fault_history(conn: Connection, *, limit: int, offset: int) -> List[Dict[str, Any]]:
    """Historial más reciente primero."""
    rows = conn.execute(
        text(
            """
            SELECT id, timestamp, fault_type, severity, confidence, duration, dataset_name, features_used
            FROM fault_history
            ORDER BY timestamp DESC, id ASC
            LIMIT :limit OFFSET :offset
            """
        ),
        {"limit": int(limit), "offset": int(offset)},
    ).mappings().all()

    return [
        {
            "id": str(row["id"]),
            "timestamp": row["timestamp"],
            "fault_type": str(row["fault_type"]),
            "severity": str(row["severity"]),
            "confidence": float(row["confidence"]),
            "duration": row["duration"],
            "dataset_name": row["dataset_name"],
            "features_used": _load_json(row["features_used"], None),
        }
        for row in rows
    ]


def count_fault_history(conn: Connection) -> int:
    row = conn.execute(text("SELECT COUNT(*) AS cnt FROM fault_history")).fetchone()
    return int(row.cnt) if row and row.cnt else 0


def count_predictions(conn: Connection) -> int:
    row = conn.execute(text("SELECT COUNT(*) AS cnt FROM predictions")).fetchone()
    return int(row.cnt) if row and row.cnt else 0
