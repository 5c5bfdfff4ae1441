"""Acceso a BD para la fila singleton de system_status."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection

from .prediction_repository import db_timestamp
from .records import SystemStatusUpdate


def get_status_id(conn: Connection) -> Optional[str]:
    row = conn.execute(
        text("SELECT id FROM system_status ORDER BY id ASC LIMIT 1")
    ).fetchone()
    return str(row.id) if row else None


def get_system_status(conn: Connection) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        text(
            """
            SELECT id, status, current_fault, confidence, last_updated
            FROM system_status
            ORDER BY id ASC
            LIMIT 1
            """
        )
    ).mappings().first()

    if not row:
        return None

    return {
        "id": str(row["id"]),
        "status": str(row["status"]),
        "current_fault": str(row["current_fault"]),
        "confidence": float(row["confidence"]),
        "last_updated": row["last_updated"],
    }


def update_system_status(conn: Connection, status_id: str, update: SystemStatusUpdate) -> int:
    """Sobrescribe la fila singleton. Retorna rows affected."""
    result = conn.execute(
        text(
            """
            UPDATE system_status
            SET status = :status,
                current_fault = :current_fault,
                confidence = :confidence,
                last_updated = :last_updated
            WHERE id = :id
            """
        ),
        {
            "id": status_id,
            "status": update.status.value,
            "current_fault": update.current_fault.value,
            "confidence": float(update.confidence),
            "last_updated": db_timestamp(update.last_updated),
        },
    )
    return result.rowcount if hasattr(result, "rowcount") else 1


def insert_system_status(conn: Connection, status_id: str, update: SystemStatusUpdate) -> None:
    conn.execute(
        text(
            """
            INSERT INTO system_status (id, status, current_fault, confidence, last_updated)
            VALUES (:id, :status, :current_fault, :confidence, :last_updated)
            """
        ),
        {
            "id": status_id,
            "status": update.status.value,
            "current_fault": update.current_fault.value,
            "confidence": float(update.confidence),
            "last_updated": db_timestamp(update.last_updated),
        },
    )
