from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


DEFAULT_DATABASE_URL = "sqlite:///./pv_fault_monitor.db"


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return int(raw)


@dataclass(frozen=True)
class Settings:
    database_url: str

    max_batch_rows: int
    max_dataset_name_length: int
    default_dataset_name: str
    history_confidence_threshold: float

    # Si es True, un fallo al guardar el PredictionRecord aborta la respuesta.
    strict_prediction_audit: bool
    random_seed: Optional[int]

    api_key: Optional[str]
    environment: str
    cors_origins: Tuple[str, ...] = field(default=("*",))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("PV_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    max_batch_rows = int(os.getenv("PREDICT_MAX_ROWS", "1000"))
    max_dataset_name_length = int(os.getenv("DATASET_NAME_MAX_LENGTH", "255"))
    default_dataset_name = os.getenv("DEFAULT_DATASET_NAME", "uploaded_data.xlsx")
    history_confidence_threshold = float(os.getenv("HISTORY_CONFIDENCE_THRESHOLD", "0.5"))

    cors_raw = os.getenv("CORS_ORIGINS", "*")
    cors_origins = tuple(o.strip() for o in cors_raw.split(",") if o.strip()) or ("*",)

    return Settings(
        database_url=database_url,
        max_batch_rows=max_batch_rows,
        max_dataset_name_length=max_dataset_name_length,
        default_dataset_name=default_dataset_name,
        history_confidence_threshold=history_confidence_threshold,
        strict_prediction_audit=_env_flag("STRICT_PREDICTION_AUDIT"),
        random_seed=_env_optional_int("PREDICTION_RANDOM_SEED"),
        api_key=os.getenv("PV_API_KEY") or None,
        environment=os.getenv("ENVIRONMENT", "").strip().lower(),
        cors_origins=cors_origins,
    )
