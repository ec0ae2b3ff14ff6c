"""Tests for the TracedValue provenance model."""

import pytest
from pydantic import ValidationError

from taxtrace.models.enums import ValueUnit
from taxtrace.models.traced import (
    DocumentSource,
    TracedValue,
    computed,
    constant,
    from_document,
    from_user_entry,
)


class TestLeaves:
    def test_document_leaf(self):
        value = from_document(1234, "w2", "w2-acme", "box1", "Form W-2, Box 1")
        assert value.is_leaf
        assert value.node_id == "w2:w2-acme:box1"
        assert value.inputs == ()
        assert isinstance(value.source, DocumentSource)

    def test_user_entry_leaf(self):
        value = from_user_entry(50000, "estimatedPayments")
        assert value.is_leaf
        assert value.node_id == "user:estimatedPayments"


class TestComputed:
    def test_inputs_are_node_ids(self):
        a = from_document(100, "1099int", "bank", "box1")
        b = from_document(200, "1099int", "credit-union", "box1")
        total = computed("scheduleB.line4", 300, [a, b])
        assert not total.is_leaf
        assert total.node_id == "scheduleB.line4"
        assert total.inputs == ("1099int:bank:box1", "1099int:credit-union:box1")

    def test_duplicate_inputs_collapse(self):
        a = from_document(100, "w2", "x", "box1")
        total = computed("form1040.line1a", 200, [a, a])
        assert total.inputs == ("w2:x:box1",)

    def test_constant_has_no_inputs(self):
        value = constant("form1040.standardDeduction", 1500000)
        assert value.inputs == ()
        assert not value.is_leaf
        assert value.unit == ValueUnit.CENTS


class TestValidation:
    def test_amount_must_be_integer_cents(self):
        with pytest.raises(ValidationError):
            TracedValue.model_validate(
                {"amount": 1.5, "source": {"kind": "user-entry", "field": "x"}}
            )

    def test_frozen(self):
        value = from_user_entry(1, "x")
        with pytest.raises(ValidationError):
            value.amount = 2

    def test_json_round_trip_keeps_source_kind(self):
        value = computed("a.b", 5, [from_user_entry(5, "x")], "cite", ValueUnit.COUNT)
        assert TracedValue.model_validate_json(value.model_dump_json()) == value
