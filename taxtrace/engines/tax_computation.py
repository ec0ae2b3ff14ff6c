"""Bracket tax and the Qualified Dividends and Capital Gain Tax Worksheet.

Pure functions over integer cents. Each bracket sum is accumulated as an
exact rational and rounded once.
"""

from fractions import Fraction

from pydantic import BaseModel

from taxtrace.engines.brackets import (
    FEDERAL_BRACKETS,
    FEDERAL_LTCG_BRACKETS,
    Brackets,
    lookup,
)
from taxtrace.models.enums import FilingStatus
from taxtrace.money import round_half_up, to_fraction


def apply_brackets(income: int, brackets: Brackets) -> int:
    """Apply progressive tax brackets to income."""
    tax = Fraction(0)
    prev_bound = 0

    for upper_bound, rate in brackets:
        if upper_bound is None:
            taxable_in_bracket = max(income - prev_bound, 0)
        else:
            taxable_in_bracket = max(min(income, upper_bound) - prev_bound, 0)
        tax += taxable_in_bracket * to_fraction(rate)
        if upper_bound is None or income <= upper_bound:
            break
        prev_bound = upper_bound

    return round_half_up(tax)


def stacked_tax(preferential: int, taxable_income: int, brackets: Brackets) -> int:
    """Tax preferential income stacked on top of ordinary income.

    Ordinary income fills the bottom of the brackets first; the portion of
    the preferential income that falls in each bracket is taxed at that
    bracket's rate.
    """
    if preferential <= 0:
        return 0

    ordinary_top = max(taxable_income - preferential, 0)
    tax = Fraction(0)
    remaining = preferential
    prev_bound = 0

    for upper_bound, rate in brackets:
        if remaining <= 0:
            break
        if upper_bound is None:
            tax += remaining * to_fraction(rate)
            remaining = 0
            break
        bracket_start = max(prev_bound, ordinary_top)
        if bracket_start < upper_bound:
            taxed_here = min(remaining, upper_bound - bracket_start)
            tax += taxed_here * to_fraction(rate)
            remaining -= taxed_here
        prev_bound = upper_bound

    return round_half_up(tax)


def federal_tax(taxable_income: int, filing_status: FilingStatus, tax_year: int) -> int:
    """Federal ordinary income tax using progressive brackets."""
    brackets = lookup(FEDERAL_BRACKETS, tax_year, filing_status, "FEDERAL_BRACKETS")
    return apply_brackets(max(taxable_income, 0), brackets)


class CapitalGainWorksheet(BaseModel):
    """Intermediate lines of the Qualified Dividends and Capital Gain Tax Worksheet."""

    preferential_income: int  # worksheet line 4, limited to taxable income
    ordinary_income: int  # line 5
    ordinary_tax: int  # line 22
    preferential_tax: int  # lines 18 + 21
    regular_tax: int  # line 24, all income at ordinary rates
    tax: int  # line 25


def net_capital_gain(line15: int, line16: int) -> int:
    """Smaller of Schedule D lines 15 and 16 when both are gains, else zero."""
    if line15 <= 0 or line16 <= 0:
        return 0
    return min(line15, line16)


def capital_gain_worksheet(
    taxable_income: int,
    qualified_dividends: int,
    capital_gain: int,
    filing_status: FilingStatus,
    tax_year: int,
) -> CapitalGainWorksheet:
    taxable_income = max(taxable_income, 0)
    preferential = min(taxable_income, max(qualified_dividends, 0) + max(capital_gain, 0))
    ordinary = taxable_income - preferential
    ltcg_brackets = lookup(FEDERAL_LTCG_BRACKETS, tax_year, filing_status, "FEDERAL_LTCG_BRACKETS")

    ordinary_tax = federal_tax(ordinary, filing_status, tax_year)
    preferential_tax = stacked_tax(preferential, taxable_income, ltcg_brackets)
    regular_tax = federal_tax(taxable_income, filing_status, tax_year)
    return CapitalGainWorksheet(
        preferential_income=preferential,
        ordinary_income=ordinary,
        ordinary_tax=ordinary_tax,
        preferential_tax=preferential_tax,
        regular_tax=regular_tax,
        tax=min(ordinary_tax + preferential_tax, regular_tax),
    )
