"""Tests for the CapitalTransaction model."""

from datetime import date

import pytest
from pydantic import ValidationError

from taxtrace.models.enums import Form8949Category
from taxtrace.models.transactions import CapitalTransaction


def _row(**overrides) -> dict:
    row = {
        "id": "t1",
        "description": "100 sh ACME",
        "date_acquired": "2024-01-15",
        "date_sold": "2025-02-01",
        "proceeds": 150000,
        "reported_basis": 100000,
        "category": "D",
    }
    row.update(overrides)
    return row


class TestDerivedFields:
    def test_fills_basis_gain_and_term(self):
        txn = CapitalTransaction.model_validate(_row())
        assert txn.adjusted_basis == 100000
        assert txn.gain_loss == 50000
        assert txn.long_term is True
        assert txn.category == Form8949Category.D

    def test_various_acquisition_date_is_unknown(self):
        txn = CapitalTransaction.model_validate(_row(date_acquired="VARIOUS"))
        assert txn.date_acquired is None

    def test_adjustment_enters_gain(self):
        txn = CapitalTransaction.model_validate(_row(adjustment_amount=2500))
        assert txn.gain_loss == 52500

    def test_normalized_description(self):
        txn = CapitalTransaction.model_validate(_row(description="  Acme Corp "))
        assert txn.normalized_description == "acme corp"


class TestConsistency:
    def test_inconsistent_gain_rejected(self):
        with pytest.raises(ValidationError, match="gain_loss"):
            CapitalTransaction.model_validate(_row(gain_loss=1))

    def test_category_contradicting_term_rejected(self):
        with pytest.raises(ValidationError, match="contradicts"):
            CapitalTransaction.model_validate(_row(category="A", long_term=True))

    def test_is_loss(self):
        txn = CapitalTransaction.model_validate(_row(proceeds=90000))
        assert txn.is_loss
        assert txn.date_sold == date(2025, 2, 1)

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="proceeds"):
            CapitalTransaction.model_validate(_row(proceeds=150000.0))

    def test_float_amount_rejected_from_json(self):
        payload = (
            '{"id": "t1", "description": "ACME", "date_sold": "2025-02-01",'
            ' "proceeds": 1000.0, "reported_basis": 500, "category": "A"}'
        )
        with pytest.raises(ValidationError, match="proceeds"):
            CapitalTransaction.model_validate_json(payload)
