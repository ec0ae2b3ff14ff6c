"""Tests for tax form models."""

import pytest
from pydantic import ValidationError

from taxtrace.models.tax_forms import W2, Form1099DIV, Form1099R
from taxtrace.money import cents


class TestW2:
    def test_create_w2(self, sample_w2: W2):
        assert sample_w2.box1_wages == cents(100000)
        assert sample_w2.box15_state == "CA"

    def test_negative_wages_rejected(self):
        with pytest.raises(ValidationError):
            W2(id="x", employer_name="x", box1_wages=-1)

    def test_float_wages_rejected(self):
        with pytest.raises(ValidationError, match="box1_wages"):
            W2(id="x", employer_name="x", box1_wages=100000.0)


class TestForm1099DIV:
    def test_defaults(self):
        form = Form1099DIV(id="d", payer_name="Fund", box1a_ordinary_dividends=100)
        assert form.box1b_qualified_dividends == 0
        assert form.box11_exempt_interest_dividends == 0


class TestForm1099R:
    def test_pension_by_default(self):
        form = Form1099R(id="r", payer_name="Plan", box1_gross_distribution=10, box2a_taxable_amount=10)
        assert form.ira is False
