"""Fixtures compartidas: settings de test, store SQLite en memoria y filas."""

from typing import Any, Dict, List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from pv_fault_services.common.config import Settings
from pv_fault_services.repository.schema_setup import bootstrap
from pv_fault_services.repository.store import SqlPredictionStore


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Evita que un .env local o variables del host afecten a los tests."""
    monkeypatch.setenv("PV_ENV_FILE", str(tmp_path / "missing.env"))
    for name in ("PV_API_KEY", "ENVIRONMENT", "STRICT_PREDICTION_AUDIT", "PREDICTION_RANDOM_SEED"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        max_batch_rows=1000,
        max_dataset_name_length=255,
        default_dataset_name="uploaded_data.xlsx",
        history_confidence_threshold=0.5,
        strict_prediction_audit=False,
        random_seed=None,
        api_key=None,
        environment="",
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    bootstrap(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> SqlPredictionStore:
    return SqlPredictionStore(engine)


def make_rows(n: int = 10, **values: float) -> List[Dict[str, Any]]:
    row = {"Voltage": 48.0, "Current": 5.0, "Power": 240.0, "Irradiance": 800.0, "Temperature": 25.0}
    row.update(values)
    return [dict(row) for _ in range(n)]


@pytest.fixture
def flat_rows() -> List[Dict[str, Any]]:
    """Batch sin anomalías: Voltage 48 constante, Current 5, sin caídas de Power."""
    return make_rows(10)


@pytest.fixture
def low_voltage_rows() -> List[Dict[str, Any]]:
    return make_rows(10, Voltage=28.0)
