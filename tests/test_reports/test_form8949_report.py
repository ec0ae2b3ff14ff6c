"""Tests for Form 8949 report generation."""

from datetime import date

from taxtrace.engines.wash_sale import match_wash_sales
from taxtrace.models.enums import AdjustmentCode, Form8949Category
from taxtrace.money import cents
from taxtrace.reports.form8949 import Form8949Generator


class TestForm8949Generator:
    def test_generate_lines(self, wash_sale_pair):
        adjusted = match_wash_sales(wash_sale_pair).adjusted_transactions
        lines = Form8949Generator().generate_lines(list(adjusted))
        assert len(lines) == 2
        assert lines[0].adjustment_code == AdjustmentCode.WASH_SALE
        assert lines[0].adjustment_amount == cents(200)
        assert lines[0].gain_loss == 0
        assert lines[1].cost_basis == cents(1200)

    def test_sections_skip_empty_categories(self, wash_sale_pair, long_term_sale):
        sections = Form8949Generator().generate_sections([*wash_sale_pair, long_term_sale])
        assert [s.category for s in sections] == [Form8949Category.A, Form8949Category.D]
        short = sections[0]
        assert short.total_proceeds == cents(2000)
        assert short.total_basis == cents(2000)
        assert short.total_gain_loss == 0

    def test_render(self, make_transaction, long_term_sale):
        various = make_transaction(
            "v", cents(300), cents(100), description="Mutual Fund", date_acquired=None,
            date_sold=date(2025, 4, 1), category=Form8949Category.B,
        )
        output = Form8949Generator().render([various, long_term_sale])
        assert "FORM 8949" in output
        assert "PART I - SHORT-TERM (BOX B)" in output
        assert "PART II - LONG-TERM (BOX D)" in output
        assert "VARIOUS" in output
        assert "$2,000.00" in output

    def test_render_empty(self):
        assert "No capital transactions." in Form8949Generator().render([])
