"""Tests for Form 8949 category totals."""

from datetime import date

import pytest

from taxtrace.engines.form8949 import group_by_category, total_node
from taxtrace.engines.orchestrator import compute
from taxtrace.exceptions import UnsupportedCategoryError
from taxtrace.models.enums import FilingStatus, Form8949Category
from taxtrace.models.tax_return import TaxReturn
from taxtrace.money import cents


class TestGrouping:
    def test_all_categories_present(self, make_transaction):
        grouped = group_by_category([make_transaction("a", 1, 1)])
        assert list(grouped) == [Form8949Category.A, Form8949Category.B, Form8949Category.D, Form8949Category.E]
        assert [t.id for t in grouped[Form8949Category.A]] == ["a"]
        assert grouped[Form8949Category.E] == []

    def test_unknown_category_raises(self, make_transaction):
        bad = make_transaction("bad", 1, 1).model_copy(update={"category": "C"})
        with pytest.raises(UnsupportedCategoryError) as exc_info:
            group_by_category([bad])
        assert exc_info.value.transaction_id == "bad"

    def test_total_node(self):
        assert total_node(Form8949Category.D, "gainLoss") == "form8949.D.gainLoss"


class TestTotals:
    def test_every_category_and_column_emitted(self, simple_return: TaxReturn):
        result = compute(simple_return)
        for category in "ABDE":
            for column in ("proceeds", "basis", "adjustment", "gainLoss"):
                assert total_node(category, column) in result

    def test_long_term_totals(self, simple_return: TaxReturn):
        result = compute(simple_return)
        assert result.amount("form8949.D.proceeds") == cents(7000)
        assert result.amount("form8949.D.basis") == cents(5000)
        assert result.amount("form8949.D.gainLoss") == cents(2000)
        assert result.amount("form8949.A.gainLoss") == 0
        assert result["form8949.D.gainLoss"].inputs == ("1099b:sale-d:gainLoss",)

    def test_wash_sale_nodes_replace_document_values(self, wash_sale_return: TaxReturn):
        result = compute(wash_sale_return)
        assert result.amount("form8949.A.proceeds") == cents(2000)
        assert result.amount("form8949.A.basis") == cents(2200)
        assert result.amount("form8949.A.adjustment") == cents(200)
        assert result.amount("form8949.A.gainLoss") == 0
        assert result["form8949.A.gainLoss"].inputs == (
            "washSale.loss.gainLoss",
            "washSale.repl.gainLoss",
        )

    def test_columns_tie_out(self, taxpayer, make_transaction):
        rows = (
            make_transaction("s1", cents(500), cents(700), category=Form8949Category.B),
            make_transaction(
                "s2", cents(900), cents(100), description="OTHER", category=Form8949Category.B,
                date_acquired=date(2025, 6, 1), date_sold=date(2025, 7, 1),
            ),
        )
        result = compute(
            TaxReturn(filing_status=FilingStatus.SINGLE, taxpayer=taxpayer, capital_transactions=rows)
        )
        proceeds = result.amount("form8949.B.proceeds")
        basis = result.amount("form8949.B.basis")
        adjustment = result.amount("form8949.B.adjustment")
        assert result.amount("form8949.B.gainLoss") == proceeds - basis + adjustment == cents(600)
