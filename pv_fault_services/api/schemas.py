from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..classification.models import FaultType, Severity, SystemState


class ScoredPredictionOut(BaseModel):
    fault_type: FaultType = Field(..., alias="faultType")
    probability: float

    class Config:
        populate_by_name = True


class PredictionResponse(BaseModel):
    predictions: List[ScoredPredictionOut]
    top_prediction: ScoredPredictionOut = Field(..., alias="topPrediction")
    severity: Severity
    timestamp: str
    prediction_id: Optional[str] = Field(default=None, alias="predictionId")
    persisted: bool
    history_recorded: bool = Field(..., alias="historyRecorded")
    status_updated: bool = Field(..., alias="statusUpdated")

    class Config:
        populate_by_name = True


class HistoryRecordOut(BaseModel):
    id: str
    timestamp: datetime
    fault_type: str
    severity: Severity
    confidence: float
    duration: Optional[str] = None
    dataset_name: Optional[str] = None
    features_used: Optional[List[str]] = None


class HistoryResponse(BaseModel):
    history: List[HistoryRecordOut] = Field(default_factory=list)
    total: int
    limit: int
    offset: int


class SystemStatusOut(BaseModel):
    id: str
    status: SystemState
    current_fault: str
    confidence: float
    last_updated: datetime


class SystemStatusUpdateIn(BaseModel):
    status: SystemState = SystemState.NORMAL
    current_fault: FaultType = Field(default=FaultType.NORMAL, alias="currentFault")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    class Config:
        populate_by_name = True
