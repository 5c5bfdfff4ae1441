"""Tests de validación del request de predicción."""

import pytest

from pv_fault_services.pipeline.validation import (
    sanitize_dataset_name,
    validate_prediction_request,
)
from tests.conftest import make_rows


def _validate(body):
    return validate_prediction_request(
        body,
        max_rows=1000,
        max_dataset_name_length=255,
        default_dataset_name="uploaded_data.xlsx",
    )


# =============================================================================
# DATA
# =============================================================================

class TestDataValidation:

    def test_exactly_max_rows_is_accepted(self):
        result = _validate({"data": make_rows(1000)})

        assert result.valid is True
        assert result.request.row_count == 1000

    def test_one_over_max_rows_is_rejected(self):
        result = _validate({"data": make_rows(1001)})

        assert result.valid is False
        assert "1001" in result.error

    @pytest.mark.parametrize("body", [{"data": []}, {"data": None}, {}])
    def test_empty_or_missing_data_is_rejected(self, body):
        result = _validate(body)

        assert result.valid is False
        assert result.error == "No data provided"

    def test_non_array_data_is_rejected(self):
        result = _validate({"data": {"Voltage": 48.0}})

        assert result.valid is False
        assert "array" in result.error

    def test_non_object_row_is_rejected(self):
        result = _validate({"data": [{"Voltage": 48.0}, 12]})

        assert result.valid is False
        assert "Row 1" in result.error

    def test_non_object_body_is_rejected(self):
        result = _validate([{"Voltage": 48.0}])
        assert result.valid is False

    def test_cap_comes_from_settings_when_not_given(self, monkeypatch):
        monkeypatch.setenv("PREDICT_MAX_ROWS", "5")
        result = validate_prediction_request({"data": make_rows(6)})
        assert result.valid is False


# =============================================================================
# FEATURES
# =============================================================================

class TestFeatureValidation:

    def test_defaults_when_omitted(self):
        result = _validate({"data": make_rows(2)})
        assert result.request.features == ("Voltage", "Current", "Power")

    def test_unknown_feature_names_allowed_set(self):
        result = _validate({"data": make_rows(2), "features": ["Voltage", "Pressure"]})

        assert result.valid is False
        assert "Pressure" in result.error
        for name in ("Voltage", "Current", "Power", "Irradiance", "Temperature"):
            assert name in result.error

    def test_empty_feature_list_is_rejected(self):
        result = _validate({"data": make_rows(2), "features": []})
        assert result.valid is False

    def test_case_variants_are_canonicalised_and_deduplicated(self):
        result = _validate({"data": make_rows(2), "features": ["voltage", "Voltage", "irradiance"]})

        assert result.valid is True
        assert result.request.features == ("Voltage", "Irradiance")

    def test_non_string_feature_is_rejected(self):
        result = _validate({"data": make_rows(2), "features": [1]})
        assert result.valid is False


# =============================================================================
# DATASET NAME
# =============================================================================

class TestDatasetNameValidation:

    def test_default_when_absent(self):
        result = _validate({"data": make_rows(1)})
        assert result.request.dataset_name == "uploaded_data.xlsx"

    def test_unsafe_characters_are_replaced(self):
        result = _validate({"data": make_rows(1), "datasetName": 'plant<1>:"a/b\\c|d?e*.xlsx'})
        assert result.request.dataset_name == "plant_1___a_b_c_d_e_.xlsx"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_falls_back_to_default(self, name):
        result = _validate({"data": make_rows(1), "datasetName": name})
        assert result.request.dataset_name == "uploaded_data.xlsx"

    def test_length_cap(self):
        assert _validate({"data": make_rows(1), "datasetName": "a" * 255}).valid is True
        assert _validate({"data": make_rows(1), "datasetName": "a" * 256}).valid is False

    def test_non_string_name_is_rejected(self):
        result = _validate({"data": make_rows(1), "datasetName": 42})

        assert result.valid is False
        assert "datasetName" in result.error

    def test_snake_case_key_is_accepted_with_warning(self):
        result = _validate({"data": make_rows(1), "dataset_name": "north.xlsx"})

        assert result.request.dataset_name == "north.xlsx"
        assert result.warnings

    def test_sanitize_helper(self):
        assert sanitize_dataset_name(None, "x") == "x"
        assert sanitize_dataset_name("a<b>:c", "x") == "a_b__c"
