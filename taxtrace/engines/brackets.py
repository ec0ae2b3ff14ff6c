"""Tax bracket configuration.

Federal brackets, standard deductions, and thresholds, in integer cents.
Keyed by tax year and filing status. Never hardcode brackets in computation functions.
State tables live beside their state modules in ``taxtrace.engines.states``.

Sources:
  - 2025: IRS Rev. Proc. 2024-40, Pub. L. 119-21 (SALT cap, child tax credit)
"""

from decimal import Decimal
from typing import TypeVar

from taxtrace.exceptions import UnsupportedFilingStatusError, UnsupportedTaxYearError
from taxtrace.models.enums import FilingStatus
from taxtrace.money import cents

T = TypeVar("T")

Brackets = list[tuple[int | None, Decimal]]

SUPPORTED_TAX_YEARS = (2025,)

# ---------------------------------------------------------------------------
# Federal ordinary income brackets: {year: {filing_status: [(upper_bound, rate), ...]}}
# Upper bound is cents or None for the top bracket.
# ---------------------------------------------------------------------------
_MFJ_2025: Brackets = [
    (cents(23850), Decimal("0.10")),
    (cents(96950), Decimal("0.12")),
    (cents(206700), Decimal("0.22")),
    (cents(394600), Decimal("0.24")),
    (cents(501050), Decimal("0.32")),
    (cents(751600), Decimal("0.35")),
    (None, Decimal("0.37")),
]

FEDERAL_BRACKETS: dict[int, dict[FilingStatus, Brackets]] = {
    2025: {
        FilingStatus.SINGLE: [
            (cents(11925), Decimal("0.10")),
            (cents(48475), Decimal("0.12")),
            (cents(103350), Decimal("0.22")),
            (cents(197300), Decimal("0.24")),
            (cents(250525), Decimal("0.32")),
            (cents(626350), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.MFJ: _MFJ_2025,
        FilingStatus.MFS: [
            (cents(11925), Decimal("0.10")),
            (cents(48475), Decimal("0.12")),
            (cents(103350), Decimal("0.22")),
            (cents(197300), Decimal("0.24")),
            (cents(250525), Decimal("0.32")),
            (cents(375800), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (cents(17000), Decimal("0.10")),
            (cents(64850), Decimal("0.12")),
            (cents(103350), Decimal("0.22")),
            (cents(197300), Decimal("0.24")),
            (cents(250500), Decimal("0.32")),
            (cents(626350), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.QSS: _MFJ_2025,
    },
}

# ---------------------------------------------------------------------------
# Federal standard deduction
# ---------------------------------------------------------------------------
FEDERAL_STANDARD_DEDUCTION: dict[int, dict[FilingStatus, int]] = {
    2025: {
        FilingStatus.SINGLE: cents(15000),
        FilingStatus.MFJ: cents(30000),
        FilingStatus.MFS: cents(15000),
        FilingStatus.HOH: cents(22500),
        FilingStatus.QSS: cents(30000),
    },
}

# ---------------------------------------------------------------------------
# Federal LTCG rate brackets: (upper_bound, rate)
# Taxable-income thresholds for the 0%/15%/20% rates, IRC Section 1(h).
# ---------------------------------------------------------------------------
FEDERAL_LTCG_BRACKETS: dict[int, dict[FilingStatus, Brackets]] = {
    2025: {
        FilingStatus.SINGLE: [
            (cents(48350), Decimal("0.00")),
            (cents(533400), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFJ: [
            (cents(96700), Decimal("0.00")),
            (cents(600050), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.MFS: [
            (cents(48350), Decimal("0.00")),
            (cents(300025), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.HOH: [
            (cents(64750), Decimal("0.00")),
            (cents(566700), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
        FilingStatus.QSS: [
            (cents(96700), Decimal("0.00")),
            (cents(600050), Decimal("0.15")),
            (None, Decimal("0.20")),
        ],
    },
}

# ---------------------------------------------------------------------------
# Capital loss limitation per IRC Section 1211(b)
# ---------------------------------------------------------------------------
CAPITAL_LOSS_LIMIT: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(3000),
    FilingStatus.MFJ: cents(3000),
    FilingStatus.MFS: cents(1500),
    FilingStatus.HOH: cents(3000),
    FilingStatus.QSS: cents(3000),
}

# ---------------------------------------------------------------------------
# Wash sale window per IRC Section 1091(a): 30 days before or after the sale
# ---------------------------------------------------------------------------
WASH_SALE_WINDOW_DAYS = 30

# Schedule B is required when interest or ordinary dividends exceed this
SCHEDULE_B_THRESHOLD = cents(1500)

# ---------------------------------------------------------------------------
# Itemized deductions (Schedule A)
# ---------------------------------------------------------------------------
MEDICAL_EXPENSE_AGI_FLOOR = Decimal("0.075")  # 7.5% of AGI, IRC Section 213(a)

# SALT cap per IRC Section 164(b)(6) as amended for 2025:
# cap = max(floor, base - 30% x (MAGI - threshold))
SALT_BASE_CAP: dict[int, dict[FilingStatus, int]] = {
    2025: {
        FilingStatus.SINGLE: cents(40000),
        FilingStatus.MFJ: cents(40000),
        FilingStatus.MFS: cents(20000),
        FilingStatus.HOH: cents(40000),
        FilingStatus.QSS: cents(40000),
    },
}
SALT_PHASEOUT_THRESHOLD: dict[int, dict[FilingStatus, int]] = {
    2025: {
        FilingStatus.SINGLE: cents(500000),
        FilingStatus.MFJ: cents(500000),
        FilingStatus.MFS: cents(250000),
        FilingStatus.HOH: cents(500000),
        FilingStatus.QSS: cents(500000),
    },
}
SALT_PHASEOUT_RATE = Decimal("0.30")
SALT_FLOOR: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(10000),
    FilingStatus.MFJ: cents(10000),
    FilingStatus.MFS: cents(5000),
    FilingStatus.HOH: cents(10000),
    FilingStatus.QSS: cents(10000),
}

# ---------------------------------------------------------------------------
# Qualified business income deduction (IRC Section 199A, Form 8995 / 8995-A)
# Threshold is the start of the phase-in range.
# ---------------------------------------------------------------------------
QBI_THRESHOLD: dict[int, dict[FilingStatus, int]] = {
    2025: {
        FilingStatus.SINGLE: cents(197300),
        FilingStatus.MFJ: cents(394600),
        FilingStatus.MFS: cents(197300),
        FilingStatus.HOH: cents(197300),
        FilingStatus.QSS: cents(394600),
    },
}
QBI_PHASE_IN_RANGE: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(50000),
    FilingStatus.MFJ: cents(100000),
    FilingStatus.MFS: cents(50000),
    FilingStatus.HOH: cents(50000),
    FilingStatus.QSS: cents(100000),
}
QBI_DEDUCTION_RATE = Decimal("0.20")
QBI_WAGE_RATE = Decimal("0.50")
QBI_ALT_WAGE_RATE = Decimal("0.25")
QBI_UBIA_RATE = Decimal("0.025")

# ---------------------------------------------------------------------------
# Child tax credit / credit for other dependents (IRC Section 24, Schedule 8812)
# Phase-out thresholds are statutory, not inflation-adjusted.
# ---------------------------------------------------------------------------
CTC_QUALIFYING_AGE = 17  # child must be under this age on Dec 31
CTC_PER_QUALIFYING_CHILD: dict[int, int] = {2025: cents(2200)}
CTC_PER_OTHER_DEPENDENT = cents(500)
CTC_REFUNDABLE_MAX_PER_CHILD: dict[int, int] = {2025: cents(1700)}
CTC_EARNED_INCOME_THRESHOLD = cents(2500)
CTC_REFUNDABLE_RATE = Decimal("0.15")
CTC_PHASEOUT_STEP = cents(1000)
CTC_PHASEOUT_PER_STEP = cents(50)
CTC_PHASEOUT_THRESHOLD: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(200000),
    FilingStatus.MFJ: cents(400000),
    FilingStatus.MFS: cents(200000),
    FilingStatus.HOH: cents(200000),
    FilingStatus.QSS: cents(200000),
}


def by_year(table: dict[int, T], tax_year: int, name: str) -> T:
    """Return the entry for ``tax_year`` or raise UnsupportedTaxYearError."""
    try:
        return table[tax_year]
    except KeyError:
        raise UnsupportedTaxYearError(tax_year, name) from None


def by_status(table: dict[FilingStatus, T], filing_status: FilingStatus, name: str) -> T:
    """Return the entry for ``filing_status`` or raise UnsupportedFilingStatusError."""
    try:
        return table[filing_status]
    except (KeyError, TypeError):
        raise UnsupportedFilingStatusError(filing_status, name) from None


def lookup(
    table: dict[int, dict[FilingStatus, T]],
    tax_year: int,
    filing_status: FilingStatus,
    name: str,
) -> T:
    """Two-level lookup used by every rule module: year, then filing status."""
    return by_status(by_year(table, tax_year, name), filing_status, name)


def check_supported(tax_year: int, filing_status: object) -> None:
    """Fail fast on a return the tables cannot compute."""
    if tax_year not in SUPPORTED_TAX_YEARS:
        raise UnsupportedTaxYearError(tax_year)
    if filing_status not in set(FilingStatus):
        raise UnsupportedFilingStatusError(filing_status)
