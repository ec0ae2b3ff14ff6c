"""Tests for Schedule D netting and the capital loss limitation (IRC Section 1211(b))."""

from datetime import date

import pytest

from taxtrace.engines.orchestrator import compute
from taxtrace.engines.schedule_d import apply_loss_limit
from taxtrace.models.enums import FilingStatus, Form8949Category
from taxtrace.models.tax_forms import Form1099DIV
from taxtrace.models.tax_return import PriorYearCarryover, TaxReturn
from taxtrace.money import cents


class TestLossLimit:
    @pytest.mark.parametrize(
        "net, allowed, carryforward",
        [
            (cents(2000), cents(2000), 0),
            (0, 0, 0),
            (-cents(3000), -cents(3000), 0),
            (-cents(3000) - 1, -cents(3000), 1),
            (-cents(5000), -cents(3000), cents(2000)),
        ],
    )
    def test_single(self, net, allowed, carryforward):
        assert apply_loss_limit(net, FilingStatus.SINGLE) == (allowed, carryforward)

    def test_married_filing_separately(self):
        assert apply_loss_limit(-cents(5000), FilingStatus.MFS) == (-cents(1500), cents(3500))


@pytest.fixture
def short_term_return(taxpayer, make_transaction) -> TaxReturn:
    """Box A +$3,000 and box B -$600."""
    return TaxReturn(
        filing_status=FilingStatus.SINGLE,
        taxpayer=taxpayer,
        capital_transactions=(
            make_transaction("a-gain", cents(13000), cents(10000), category=Form8949Category.A),
            make_transaction(
                "b-loss", cents(4000), cents(4600), description="BETA", category=Form8949Category.B
            ),
        ),
    )


class TestScheduleD:
    def test_short_term_lines_tie_to_8949(self, short_term_return):
        result = compute(short_term_return)
        assert result.amount("scheduleD.line1a") == cents(3000)
        assert result.amount("scheduleD.line1b") == -cents(600)
        assert result.amount("scheduleD.line7") == cents(2400)
        assert result.amount("scheduleD.line16") == cents(2400)
        assert result.amount("scheduleD.line21") == cents(2400)
        assert result["scheduleD.line1a"].inputs == ("form8949.A.gainLoss",)

    def test_line16_is_line7_plus_line15(self, full_return):
        result = compute(full_return)
        assert result.amount("scheduleD.line16") == (
            result.amount("scheduleD.line7") + result.amount("scheduleD.line15")
        )

    def test_long_term_end_to_end(self, simple_return):
        result = compute(simple_return)
        assert result.amount("scheduleD.line15") == cents(2000)
        assert result.amount("scheduleD.line16") == cents(2000)
        assert result.amount("scheduleD.line21") == cents(2000)
        assert result.amount("form1040.line7") == cents(2000)

    def test_carryovers_and_distributions(self, taxpayer, long_term_sale):
        tax_return = TaxReturn(
            filing_status=FilingStatus.SINGLE,
            taxpayer=taxpayer,
            capital_transactions=(long_term_sale,),
            form1099_divs=(
                Form1099DIV(
                    id="fund", payer_name="Fund", box1a_ordinary_dividends=0,
                    box2a_capital_gain_distributions=cents(300),
                ),
            ),
            prior_year=PriorYearCarryover(short_term_loss=cents(1000), long_term_loss=cents(200)),
        )
        result = compute(tax_return)
        assert result.amount("scheduleD.line6") == -cents(1000)
        assert result.amount("scheduleD.line7") == -cents(1000)
        assert result.amount("scheduleD.line13") == cents(300)
        assert result.amount("scheduleD.line14") == -cents(200)
        assert result.amount("scheduleD.line15") == cents(2100)
        assert result.amount("scheduleD.line16") == cents(1100)

    def test_large_loss_limited_with_carryforward(self, taxpayer, make_transaction):
        tax_return = TaxReturn(
            filing_status=FilingStatus.SINGLE,
            taxpayer=taxpayer,
            capital_transactions=(
                make_transaction(
                    "big-loss", cents(1000), cents(6000),
                    date_acquired=date(2020, 1, 1), category=Form8949Category.D,
                ),
            ),
        )
        result = compute(tax_return)
        assert result.amount("scheduleD.line16") == -cents(5000)
        assert result.amount("scheduleD.line21") == -cents(3000)
        assert result.amount("scheduleD.carryforward") == cents(2000)
        assert "loss limited" in result["scheduleD.line21"].citation
        assert any("carry forward" in w for w in result.warnings)
