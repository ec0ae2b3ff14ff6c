"""Tests for Schedule B totals and the filing requirement flag."""

import pytest

from taxtrace.engines.orchestrator import compute
from taxtrace.models.enums import FilingStatus, ValueUnit
from taxtrace.models.tax_forms import Form1099DIV, Form1099INT
from taxtrace.models.tax_return import TaxReturn
from taxtrace.money import cents


def _with_interest(taxpayer, amount: int) -> TaxReturn:
    return TaxReturn(
        filing_status=FilingStatus.SINGLE,
        taxpayer=taxpayer,
        form1099_ints=(Form1099INT(id="bank", payer_name="Bank", box1_interest=amount),),
    )


class TestScheduleB:
    @pytest.mark.parametrize(
        "interest, required", [(cents(1500), 0), (cents(1500) + 1, 1), (0, 0)]
    )
    def test_required_above_threshold(self, taxpayer, interest, required):
        result = compute(_with_interest(taxpayer, interest))
        assert result.amount("scheduleB.line4") == interest
        assert result.amount("scheduleB.required") == required
        assert result["scheduleB.required"].unit == ValueUnit.FLAG

    def test_dividends_total(self, taxpayer):
        tax_return = TaxReturn(
            filing_status=FilingStatus.SINGLE,
            taxpayer=taxpayer,
            form1099_divs=(
                Form1099DIV(id="f1", payer_name="Fund 1", box1a_ordinary_dividends=cents(1000)),
                Form1099DIV(id="f2", payer_name="Fund 2", box1a_ordinary_dividends=cents(800)),
            ),
        )
        result = compute(tax_return)
        assert result.amount("scheduleB.line6") == cents(1800)
        assert result.amount("scheduleB.required") == 1
        assert result.amount("form1040.line3b") == cents(1800)
