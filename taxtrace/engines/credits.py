"""Child tax credit, credit for other dependents, and additional child tax credit.

Schedule 8812. The nonrefundable part is limited by the tax on Form 1040
line 18; the refundable part (ACTC) is the smaller of the unused credit,
$1,700 per qualifying child, and 15% of earned income over $2,500.
"""

from datetime import date

from taxtrace.engines.brackets import (
    CTC_EARNED_INCOME_THRESHOLD,
    CTC_PER_OTHER_DEPENDENT,
    CTC_PER_QUALIFYING_CHILD,
    CTC_PHASEOUT_PER_STEP,
    CTC_PHASEOUT_STEP,
    CTC_PHASEOUT_THRESHOLD,
    CTC_QUALIFYING_AGE,
    CTC_REFUNDABLE_MAX_PER_CHILD,
    CTC_REFUNDABLE_RATE,
    by_status,
    by_year,
)
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.models.enums import ValueUnit
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import Dependent, TaxReturn
from taxtrace.money import apply_rate

MODULE = "credits.ctc"
CITATION = "Schedule 8812"

QUALIFYING_CHILD_RELATIONSHIPS = frozenset({
    "son", "daughter", "stepchild", "foster child", "brother", "sister",
    "half brother", "half sister", "stepbrother", "stepsister", "sibling",
    "grandchild", "niece", "nephew",
})


def age_at_year_end(date_of_birth: date, tax_year: int) -> int:
    # everyone has had their birthday by Dec 31
    return tax_year - date_of_birth.year


def is_qualifying_child(dependent: Dependent, tax_year: int) -> bool:
    if dependent.date_of_birth is None or not dependent.has_ssn:
        return False
    if dependent.relationship.strip().lower() not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dependent.months_lived <= 6:
        return False
    return 0 <= age_at_year_end(dependent.date_of_birth, tax_year) < CTC_QUALIFYING_AGE


def phase_out_reduction(agi: int, threshold: int) -> int:
    """$50 for each $1,000, or fraction of $1,000, of AGI over the threshold."""
    excess = max(0, agi - threshold)
    steps = -(-excess // CTC_PHASEOUT_STEP)
    return steps * CTC_PHASEOUT_PER_STEP


def compute_child_tax_credit(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)
    year = tax_return.tax_year

    children = sum(1 for d in tax_return.dependents if is_qualifying_child(d, year))
    others = len(tax_return.dependents) - children
    children_node = b.compute(
        "ctc.qualifyingChildren", children, (), "Schedule 8812, Line 4", ValueUnit.COUNT
    )
    others_node = b.compute(
        "ctc.otherDependents", others, (), "Schedule 8812, Line 6", ValueUnit.COUNT
    )

    per_child = by_year(CTC_PER_QUALIFYING_CHILD, year, "CTC_PER_QUALIFYING_CHILD")
    initial = b.compute(
        "ctc.initialCredit",
        children * per_child + others * CTC_PER_OTHER_DEPENDENT,
        [children_node, others_node],
        "Schedule 8812, Line 8",
    )

    agi = b.read("form1040.line11")
    threshold = by_status(CTC_PHASEOUT_THRESHOLD, tax_return.filing_status, "CTC_PHASEOUT_THRESHOLD")
    reduction = b.compute(
        "ctc.phaseOut",
        min(phase_out_reduction(agi.amount, threshold), initial.amount),
        [agi, initial],
        "Schedule 8812, Line 11",
    )
    after = b.compute(
        "ctc.creditAfterPhaseOut", initial.amount - reduction.amount, [initial, reduction],
        "Schedule 8812, Line 12",
    )

    tax = b.read("form1040.line18")
    nonrefundable = b.compute(
        "ctc.nonRefundable", min(after.amount, tax.amount), [after, tax], "Schedule 8812, Line 14"
    )
    if after.amount > nonrefundable.amount:
        b.warn(f"Child tax credit limited by tax liability; {after.amount - nonrefundable.amount} cents unused")

    earned = b.read("form1040.line1z")
    unused = after.amount - nonrefundable.amount
    max_refundable = children * by_year(CTC_REFUNDABLE_MAX_PER_CHILD, year, "CTC_REFUNDABLE_MAX_PER_CHILD")
    earned_based = apply_rate(max(0, earned.amount - CTC_EARNED_INCOME_THRESHOLD), CTC_REFUNDABLE_RATE)
    b.compute(
        "ctc.additional",
        min(unused, max_refundable, earned_based),
        [after, nonrefundable, children_node, earned],
        "Schedule 8812, Line 27",
    )
    return b.build()
