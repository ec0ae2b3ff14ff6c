"""Tests for bracket tax and the Qualified Dividends and Capital Gain Tax Worksheet."""

from taxtrace.engines.brackets import FEDERAL_LTCG_BRACKETS
from taxtrace.engines.tax_computation import (
    capital_gain_worksheet,
    federal_tax,
    net_capital_gain,
    stacked_tax,
)
from taxtrace.models.enums import FilingStatus
from taxtrace.money import cents

SINGLE = FilingStatus.SINGLE


class TestFederalTax:
    def test_zero_income(self):
        assert federal_tax(0, SINGLE, 2025) == 0

    def test_negative_income_is_zero(self):
        assert federal_tax(-cents(100), SINGLE, 2025) == 0

    def test_top_of_first_bracket(self):
        assert federal_tax(cents(11925), SINGLE, 2025) == cents("1192.50")

    def test_single_50k(self):
        # 1,192.50 + 12% x 36,550 + 22% x 1,525
        assert federal_tax(cents(50000), SINGLE, 2025) == cents("5914.00")

    def test_mfj_100k(self):
        # 2,385 + 12% x 73,100 + 22% x 3,050
        assert federal_tax(cents(100000), FilingStatus.MFJ, 2025) == cents(11828)


class TestCapitalGainWorksheet:
    def test_gain_inside_zero_bracket(self):
        ws = capital_gain_worksheet(cents(40000), 0, cents(10000), SINGLE, 2025)
        assert ws.preferential_income == cents(10000)
        assert ws.ordinary_income == cents(30000)
        assert ws.preferential_tax == 0
        assert ws.ordinary_tax == cents("3361.50")
        assert ws.regular_tax == cents("4561.50")
        assert ws.tax == cents("3361.50")

    def test_gain_straddles_zero_bracket(self):
        ws = capital_gain_worksheet(cents(60000), 0, cents(20000), SINGLE, 2025)
        # 8,350 at 0%, 11,650 at 15%
        assert ws.preferential_tax == cents("1747.50")

    def test_preferential_limited_to_taxable_income(self):
        ws = capital_gain_worksheet(cents(5000), cents(3000), cents(4000), SINGLE, 2025)
        assert ws.preferential_income == cents(5000)
        assert ws.ordinary_income == 0
        assert ws.tax == 0

    def test_never_above_regular_tax(self):
        ws = capital_gain_worksheet(cents(800000), cents(100), cents(700000), SINGLE, 2025)
        assert ws.tax <= ws.regular_tax


class TestHelpers:
    def test_net_capital_gain(self):
        assert net_capital_gain(cents(2000), cents(1500)) == cents(1500)
        assert net_capital_gain(-1, cents(5)) == 0
        assert net_capital_gain(cents(5), -1) == 0

    def test_stacked_tax_nothing_preferential(self):
        brackets = FEDERAL_LTCG_BRACKETS[2025][SINGLE]
        assert stacked_tax(0, cents(100000), brackets) == 0

    def test_stacked_tax_top_rate(self):
        brackets = FEDERAL_LTCG_BRACKETS[2025][SINGLE]
        assert stacked_tax(cents(1000), cents(1000000), brackets) == cents(200)
