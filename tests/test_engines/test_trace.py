"""Tests for trace building and explanation."""

import pytest

from taxtrace.engines.orchestrator import compute
from taxtrace.engines.trace import (
    build_trace,
    explain,
    flatten_trace,
    format_value,
    leaf_sources,
    node_label,
)
from taxtrace.exceptions import MissingNodeError
from taxtrace.models.enums import ValueUnit
from taxtrace.models.traced import DocumentSource, computed, from_user_entry


@pytest.fixture
def result(simple_return):
    return compute(simple_return)


class TestBuildTrace:
    def test_tree_follows_inputs(self, result):
        trace = build_trace(result, "scheduleD.line21")
        assert trace.node_id == "scheduleD.line21"
        assert trace.label == "Allowed capital gain or (loss)"
        assert [child.node_id for child in trace.inputs] == ["scheduleD.line16"]
        assert trace.citation == "Schedule D, Line 21"

    def test_reaches_document_leaf(self, result):
        trace = build_trace(result, "form8949.D.gainLoss")
        leaf = trace.inputs[0]
        assert leaf.node_id == "1099b:sale-d:gainLoss"
        assert leaf.inputs == []
        assert isinstance(leaf.output.source, DocumentSource)

    def test_unknown_node(self, result):
        with pytest.raises(MissingNodeError):
            build_trace(result, "form1040.line99")


class TestExplain:
    def test_text_tree(self, result):
        text = explain(result, "scheduleD.line16")
        lines = text.splitlines()
        assert lines[0].startswith("Combined net capital gain or (loss): $2,000.00")
        assert any("[1099b:sale-d:gainLoss]" in line for line in lines)
        assert any(line.startswith("  ") for line in lines[1:])

    def test_user_entries_marked(self, result):
        text = explain(result, "scheduleD.line6")
        assert "[user:priorYear.shortTermLoss, user entry]" in text


class TestFlatten:
    def test_leaves_first_and_distinct(self, result):
        order = flatten_trace(result, "form1040.line11")
        assert order[-1] == "form1040.line11"
        assert len(order) == len(set(order))
        position = {node_id: i for i, node_id in enumerate(order)}
        for node_id in order:
            for input_id in result[node_id].inputs:
                assert position[input_id] < position[node_id]

    def test_leaf_sources(self, result):
        leaves = leaf_sources(result, "scheduleD.line21")
        refs = {leaf.node_id for leaf in leaves}
        assert "1099b:sale-d:gainLoss" in refs
        assert "user:priorYear.longTermLoss" in refs
        assert all(leaf.is_leaf for leaf in leaves)


class TestLabels:
    @pytest.mark.parametrize(
        "node_id, label",
        [
            ("form1040.line15", "Taxable income"),
            ("form8949.A.gainLoss", "Form 8949 box A gainLoss"),
            ("washSale.lot-7.disallowed", "Wash sale loss disallowed (lot-7)"),
            ("ca.totalTax", "CA Total state tax"),
            ("unknown.node", "unknown.node"),
        ],
    )
    def test_node_label(self, node_id, label):
        assert node_label(node_id) == label

    def test_leaf_description_used(self):
        value = from_user_entry(1, "x", description="Something entered")
        assert node_label(value.node_id, value) == "Something entered"

    def test_format_value_by_unit(self):
        assert format_value(computed("a", 250000, [])) == "$2,500.00"
        assert format_value(computed("a", 500000, [], unit=ValueUnit.RATIO)) == "0.500000"
        assert format_value(computed("a", 2, [], unit=ValueUnit.COUNT)) == "2"
        assert format_value(computed("a", 1, [], unit=ValueUnit.FLAG)) == "yes"
