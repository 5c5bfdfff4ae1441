"""Dependencias FastAPI compartidas por los routers."""

from __future__ import annotations

from fastapi import Depends

from ..common.config import get_settings
from ..common.db import get_engine
from ..pipeline.recorder import PredictionRecorder
from ..repository.store import SqlPredictionStore


def get_store() -> SqlPredictionStore:
    return SqlPredictionStore(get_engine())


def get_recorder(store: SqlPredictionStore = Depends(get_store)) -> PredictionRecorder:
    return PredictionRecorder(store, settings=get_settings())
