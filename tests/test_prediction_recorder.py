"""Tests del PredictionRecorder: orquestación y protocolo de persistencia.

El store se reemplaza por un MagicMock para verificar qué escrituras
se intentan en cada caso.
"""

import dataclasses
import random
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from pv_fault_services.classification import FaultType, Severity, SystemState
from pv_fault_services.pipeline import (
    PersistenceError,
    PredictionRecorder,
    PredictionValidationError,
)
from pv_fault_services.repository.records import HistoryRecord, PredictionRecord, SystemStatusUpdate
from tests.conftest import make_rows


FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def mock_store():
    store = MagicMock()
    store.insert_prediction = MagicMock(return_value="pred-1")
    store.insert_history = MagicMock(return_value="hist-1")
    store.read_status_id = MagicMock(return_value="status-1")
    store.update_status = MagicMock(return_value=1)
    return store


@pytest.fixture
def recorder(mock_store, settings):
    return PredictionRecorder(
        mock_store,
        settings=settings,
        rng_factory=lambda: random.Random(11),
        clock=lambda: FIXED_NOW,
    )


# =============================================================================
# PREDICCIÓN QUE CALIFICA
# =============================================================================

class TestQualifyingPrediction:

    def test_writes_prediction_history_and_status(self, recorder, mock_store, low_voltage_rows):
        outcome = recorder.record_payload(
            {"data": low_voltage_rows, "features": ["Voltage"], "datasetName": "north.xlsx"}
        )

        assert outcome.top_prediction.fault_type is FaultType.LINE_LINE_FAULT
        assert outcome.top_prediction.probability == pytest.approx(0.9)
        assert outcome.severity is Severity.CRITICAL
        assert outcome.prediction_id == "pred-1"
        assert outcome.history_recorded is True
        assert outcome.status_updated is True

        mock_store.insert_prediction.assert_called_once()
        mock_store.insert_history.assert_called_once()
        mock_store.read_status_id.assert_called_once()
        mock_store.update_status.assert_called_once_with(
            "status-1",
            SystemStatusUpdate(
                status=SystemState.FAULT,
                current_fault=FaultType.LINE_LINE_FAULT,
                confidence=outcome.top_prediction.probability,
                last_updated=FIXED_NOW,
            ),
        )

    def test_history_record_contents(self, recorder, mock_store, low_voltage_rows):
        recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        record = mock_store.insert_history.call_args.args[0]
        assert isinstance(record, HistoryRecord)
        assert record.fault_type is FaultType.LINE_LINE_FAULT
        assert record.severity is Severity.CRITICAL
        assert record.confidence == pytest.approx(0.9)
        assert record.dataset_name == "uploaded_data.xlsx"
        assert record.features_used == ("Voltage",)
        assert record.timestamp == FIXED_NOW

    def test_prediction_record_contents(self, recorder, mock_store, low_voltage_rows):
        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["voltage"]})

        record = mock_store.insert_prediction.call_args.args[0]
        assert isinstance(record, PredictionRecord)
        assert record.predicted_fault is FaultType.LINE_LINE_FAULT
        assert list(record.probabilities) == outcome.predictions
        assert record.input_features == {"features": ["Voltage"], "rowCount": 10}
        assert record.created_at == FIXED_NOW


# =============================================================================
# PREDICCIÓN QUE NO CALIFICA
# =============================================================================

class TestNonQualifyingPrediction:

    def test_normal_prediction_writes_only_prediction(self, recorder, mock_store, flat_rows):
        outcome = recorder.record_payload({"data": flat_rows})

        assert outcome.top_prediction.fault_type is FaultType.NORMAL
        assert outcome.top_prediction.probability == 0.5
        assert outcome.history_recorded is False
        assert outcome.status_updated is False

        mock_store.insert_prediction.assert_called_once()
        mock_store.insert_history.assert_not_called()
        mock_store.read_status_id.assert_not_called()
        mock_store.update_status.assert_not_called()

    def test_threshold_is_strict(self, mock_store, settings, low_voltage_rows):
        # Con umbral 0.9 una líder de exactamente 0.9 ya no califica.
        strict = dataclasses.replace(settings, history_confidence_threshold=0.9)
        recorder = PredictionRecorder(mock_store, settings=strict, rng_factory=lambda: random.Random(1))

        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        assert outcome.top_prediction.probability == pytest.approx(0.9)
        mock_store.insert_history.assert_not_called()
        mock_store.update_status.assert_not_called()


# =============================================================================
# FALLOS DE PERSISTENCIA
# =============================================================================

class TestPersistenceFailures:

    def test_prediction_write_failure_degrades_response(self, recorder, mock_store, low_voltage_rows):
        mock_store.insert_prediction.side_effect = RuntimeError("db down")

        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        assert outcome.persisted is False
        assert outcome.prediction_id is None
        assert outcome.to_response()["persisted"] is False
        assert len(outcome.predictions) == 7
        # Los pasos siguientes se intentan igualmente.
        assert outcome.history_recorded is True
        assert outcome.status_updated is True

    def test_strict_audit_makes_first_write_fatal(self, mock_store, settings, low_voltage_rows):
        strict = dataclasses.replace(settings, strict_prediction_audit=True)
        recorder = PredictionRecorder(mock_store, settings=strict)
        mock_store.insert_prediction.side_effect = RuntimeError("db down")

        with pytest.raises(PersistenceError):
            recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        mock_store.insert_history.assert_not_called()

    def test_history_failure_does_not_block_status_update(self, recorder, mock_store, low_voltage_rows):
        mock_store.insert_history.side_effect = RuntimeError("constraint")

        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        assert outcome.history_recorded is False
        assert outcome.status_updated is True
        mock_store.update_status.assert_called_once()

    def test_missing_status_row_skips_update(self, recorder, mock_store, low_voltage_rows):
        mock_store.read_status_id.return_value = None

        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        assert outcome.status_updated is False
        mock_store.update_status.assert_not_called()

    def test_status_update_failure_is_swallowed(self, recorder, mock_store, low_voltage_rows):
        mock_store.update_status.side_effect = RuntimeError("timeout")

        outcome = recorder.record_payload({"data": low_voltage_rows, "features": ["Voltage"]})

        assert outcome.status_updated is False
        assert outcome.history_recorded is True


# =============================================================================
# VALIDACIÓN E IDEMPOTENCIA
# =============================================================================

class TestRecorderRequests:

    def test_identical_requests_produce_independent_records(self, recorder, mock_store, flat_rows):
        body = {"data": flat_rows, "datasetName": "same.xlsx"}

        recorder.record_payload(body)
        recorder.record_payload(body)

        assert mock_store.insert_prediction.call_count == 2

    def test_invalid_request_writes_nothing(self, recorder, mock_store):
        with pytest.raises(PredictionValidationError, match="No data provided"):
            recorder.record_payload({"data": []})

        mock_store.insert_prediction.assert_not_called()

    def test_oversized_batch_rejected_before_classification(self, recorder, mock_store):
        with pytest.raises(PredictionValidationError):
            recorder.record_payload({"data": make_rows(1001)})

        mock_store.insert_prediction.assert_not_called()

    def test_response_shape(self, recorder, flat_rows):
        response = recorder.record_payload({"data": flat_rows}).to_response()

        assert set(response) >= {"predictions", "topPrediction", "severity", "timestamp"}
        assert len(response["predictions"]) == 7
        assert response["topPrediction"] == response["predictions"][0]
        assert response["severity"] == "Medium"
        assert response["timestamp"] == FIXED_NOW.isoformat()
