"""Qualified business income deduction (IRC Section 199A).

Below the threshold the simplified Form 8995 applies: 20% of total QBI,
capped at 20% of taxable income. At or above it, Form 8995-A limits each
activity by its W-2 wages and UBIA, phased in linearly across the range:

    wage limitation = max(50% x wages, 25% x wages + 2.5% x UBIA)
    factor          = clamp((TI - threshold) / range, 0, 1)
    deductible      = 20% x QBI - factor x max(0, 20% x QBI - limitation)

A specified service trade or business first scales its QBI, wages and UBIA
by (1 - factor), so it drops out entirely above the range. Loss activities
are never limited; they net against the others.
"""

from fractions import Fraction

from taxtrace.engines.brackets import (
    QBI_ALT_WAGE_RATE,
    QBI_DEDUCTION_RATE,
    QBI_PHASE_IN_RANGE,
    QBI_THRESHOLD,
    QBI_UBIA_RATE,
    QBI_WAGE_RATE,
    by_status,
    lookup,
)
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import user_node
from taxtrace.models.enums import ValueUnit
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import BusinessActivity, TaxReturn
from taxtrace.models.traced import RATIO_SCALE, TracedValue
from taxtrace.money import apply_rate, clamp_fraction, round_half_up

MODULE = "form8995"


def phase_in_factor(taxable_income: int, threshold: int, phase_in_range: int) -> Fraction:
    """Exact fraction of the phase-in range consumed: 0 at the threshold, 1 at its end."""
    return clamp_fraction(Fraction(taxable_income - threshold, phase_in_range))


def wage_limitation(w2_wages: int, ubia: int) -> int:
    return max(
        apply_rate(w2_wages, QBI_WAGE_RATE),
        apply_rate(w2_wages, QBI_ALT_WAGE_RATE) + apply_rate(ubia, QBI_UBIA_RATE),
    )


def activity_deduction(
    qbi: int,
    w2_wages: int,
    ubia: int,
    specified_service: bool,
    factor: Fraction,
) -> tuple[int, int, int]:
    """Return (tentative, wage limitation, deductible) for one activity above the threshold."""
    if specified_service:
        applicable = 1 - factor
        qbi = round_half_up(qbi * applicable)
        w2_wages = round_half_up(w2_wages * applicable)
        ubia = round_half_up(ubia * applicable)

    tentative = apply_rate(qbi, QBI_DEDUCTION_RATE)
    limitation = wage_limitation(w2_wages, ubia)
    if tentative <= 0:
        return tentative, limitation, tentative

    excess = max(0, tentative - limitation)
    return tentative, limitation, round_half_up(tentative - factor * excess)


def _activity_nodes(
    b: ModuleBuilder,
    activity: BusinessActivity,
    factor: Fraction,
    factor_node: TracedValue,
) -> TracedValue:
    prefix = f"form8995.{activity.id}"
    qbi = b.read(user_node(f"business.{activity.id}.qbi"))
    wages = b.read(user_node(f"business.{activity.id}.w2Wages"))
    ubia = b.read(user_node(f"business.{activity.id}.ubia"))
    tentative, limitation, deductible = activity_deduction(
        qbi.amount, wages.amount, ubia.amount, activity.specified_service, factor
    )

    scaled = [factor_node] if activity.specified_service else []
    tentative_node = b.compute(
        f"{prefix}.tentative", tentative, [qbi, *scaled], "Form 8995-A, Part II, Line 3"
    )
    limitation_node = b.compute(
        f"{prefix}.wageLimitation", limitation, [wages, ubia, *scaled], "Form 8995-A, Part II, Line 10"
    )
    return b.compute(
        f"{prefix}.deductible",
        deductible,
        [tentative_node, limitation_node, factor_node],
        "Form 8995-A, Part III, Line 26",
    )


def compute_qbi(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)
    status = tax_return.filing_status

    agi = b.read("form1040.line11")
    deduction = b.read("form1040.line12")
    raw_income = agi.amount - deduction.amount
    citation = "Form 8995, Line 11"
    if raw_income < 0:
        citation = "Form 8995, Line 11 (negative, clamped to zero)"
    taxable = b.compute("form8995.taxableIncomeBeforeQbi", max(0, raw_income), [agi, deduction], citation)

    activities = [b.read(user_node(f"business.{a.id}.qbi")) for a in tax_return.businesses]
    total = b.compute(
        "form8995.totalQbi", sum(v.amount for v in activities), activities, "Form 8995, Line 2"
    )

    threshold_amount = lookup(QBI_THRESHOLD, tax_return.tax_year, status, "QBI_THRESHOLD")
    phase_in_range = by_status(QBI_PHASE_IN_RANGE, status, "QBI_PHASE_IN_RANGE")
    threshold = b.constant("form8995.threshold", threshold_amount, "IRC §199A(e)(2)")
    factor = phase_in_factor(taxable.amount, threshold_amount, phase_in_range)
    factor_node = b.compute(
        "form8995.phaseInFactor",
        round_half_up(factor * RATIO_SCALE),
        [taxable, threshold],
        "Form 8995-A, Part II, Line 24",
        ValueUnit.RATIO,
    )

    if taxable.amount < threshold_amount:
        component = b.compute(
            "form8995.qbiComponent",
            apply_rate(total.amount, QBI_DEDUCTION_RATE),
            [total],
            "Form 8995, Line 5",
        )
    else:
        deductibles = [
            _activity_nodes(b, activity, factor, factor_node) for activity in tax_return.businesses
        ]
        component = b.compute(
            "form8995.qbiComponent",
            sum(v.amount for v in deductibles),
            deductibles,
            "Form 8995-A, Line 27",
        )

    income_limit = b.compute(
        "form8995.incomeLimitation",
        apply_rate(taxable.amount, QBI_DEDUCTION_RATE),
        [taxable],
        "Form 8995, Line 14",
    )
    if component.amount < 0:
        b.warn(f"Net qualified business loss of {-component.amount} cents; QBI deduction is zero")
    b.compute(
        "form8995.deduction",
        min(max(0, component.amount), income_limit.amount),
        [component, income_limit],
        "Form 8995, Line 15",
    )
    return b.build()
