"""Creación del esquema y bootstrap del estado singleton.

Ambas operaciones son idempotentes: se pueden ejecutar en cada arranque.
"""

from __future__ import annotations

import logging
import pathlib
import uuid
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ..classification.models import FaultType, SystemState
from .records import SystemStatusUpdate
from .status_repository import get_status_id, insert_system_status

logger = logging.getLogger(__name__)


MIGRATIONS_DIR = pathlib.Path(__file__).parent / "migrations"

DEFAULT_STATUS_CONFIDENCE = 0.95


def ensure_schema(engine: Engine) -> None:
    """Crea las tablas si no existen. Safe to call multiple times."""
    logger.info("[SCHEMA] Ensuring schema exists")

    sql_files = sorted(MIGRATIONS_DIR.glob("*.sql"))
    if not sql_files:
        logger.warning("[SCHEMA] No migration files found in %s", MIGRATIONS_DIR)
        return

    try:
        with engine.begin() as conn:
            for sql_file in sql_files:
                statements = [s.strip() for s in sql_file.read_text().split(";") if s.strip()]
                for statement in statements:
                    conn.execute(text(statement))
                logger.info("[SCHEMA] Applied %s (%d statements)", sql_file.name, len(statements))
    except Exception as e:
        logger.exception("[SCHEMA] Schema creation failed: %s", e)
        raise


def seed_system_status(engine: Engine) -> str:
    """Crea la fila singleton de system_status si la tabla está vacía.

    Returns:
        id de la fila singleton (existente o recién creada)
    """
    with engine.begin() as conn:
        existing = get_status_id(conn)
        if existing:
            logger.info("[SCHEMA] system_status already initialised id=%s", existing)
            return existing

        status_id = str(uuid.uuid4())
        insert_system_status(
            conn,
            status_id,
            SystemStatusUpdate(
                status=SystemState.NORMAL,
                current_fault=FaultType.NORMAL,
                confidence=DEFAULT_STATUS_CONFIDENCE,
                last_updated=datetime.now(timezone.utc),
            ),
        )
        logger.info("[SCHEMA] system_status seeded id=%s", status_id)
        return status_id


def bootstrap(engine: Engine) -> str:
    ensure_schema(engine)
    return seed_system_status(engine)
