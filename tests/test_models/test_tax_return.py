"""Tests for the TaxReturn input model."""

import pytest
from pydantic import ValidationError

from taxtrace.models.tax_forms import W2
from taxtrace.models.tax_return import StateReturnConfig, TaxReturn


class TestTaxReturn:
    def test_json_round_trip(self, full_return: TaxReturn):
        parsed = TaxReturn.model_validate_json(full_return.model_dump_json())
        assert parsed == full_return

    def test_state_code_upper_cased(self):
        assert StateReturnConfig(state_code=" nc ").state_code == "NC"

    def test_duplicate_document_ids_rejected(self, simple_return: TaxReturn):
        w2 = W2(id="dup", employer_name="A", box1_wages=1)
        data = simple_return.model_dump()
        data["w2s"] = [w2.model_dump(), w2.model_dump()]
        with pytest.raises(ValidationError, match="Duplicate ids in w2s"):
            TaxReturn.model_validate(data)

    def test_same_state_twice_rejected(self, simple_return: TaxReturn):
        data = simple_return.model_dump()
        data["state_returns"] = [{"state_code": "CA"}, {"state_code": "ca"}]
        with pytest.raises(ValidationError, match="only once"):
            TaxReturn.model_validate(data)

    def test_defaults(self, simple_return: TaxReturn):
        assert simple_return.tax_year == 2025
        assert simple_return.detect_wash_sales is True
        assert simple_return.deductions.method == "standard"

    def test_float_amount_rejected(self, simple_return: TaxReturn):
        data = simple_return.model_dump()
        data["estimated_tax_payments"] = 4000.0
        with pytest.raises(ValidationError, match="estimated_tax_payments"):
            TaxReturn.model_validate(data)
