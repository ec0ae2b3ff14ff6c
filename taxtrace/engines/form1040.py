"""Form 1040 core lines.

Split into three rule modules so the QBI deduction and the child tax
credit can run between them:

  form1040.income    lines 1a-12 (and Schedule A when itemizing)
  form1040.tax       lines 13-18
  form1040.payments  lines 19-37
"""

import logging

from taxtrace.engines.brackets import (
    FEDERAL_STANDARD_DEDUCTION,
    MEDICAL_EXPENSE_AGI_FLOOR,
    SALT_BASE_CAP,
    SALT_FLOOR,
    SALT_PHASEOUT_RATE,
    SALT_PHASEOUT_THRESHOLD,
    by_status,
    lookup,
)
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import ITEMIZED_FIELDS, div_node, int_node, r_node, user_node, w2_node
from taxtrace.engines.tax_computation import capital_gain_worksheet, federal_tax, net_capital_gain
from taxtrace.models.enums import DeductionMethod, FilingStatus
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import TaxReturn
from taxtrace.models.traced import TracedValue
from taxtrace.money import apply_rate

logger = logging.getLogger(__name__)

INCOME_MODULE = "form1040.income"
TAX_MODULE = "form1040.tax"
PAYMENTS_MODULE = "form1040.payments"


def line(number: str) -> str:
    return f"form1040.line{number}"


def _sum(b: ModuleBuilder, node_id: str, inputs: list[TracedValue], citation: str) -> TracedValue:
    return b.compute(node_id, sum(v.amount for v in inputs), inputs, citation)


def salt_cap(filing_status: FilingStatus, tax_year: int, magi: int) -> int:
    """cap = max(floor, base cap - 30% x (MAGI - threshold))."""
    base = lookup(SALT_BASE_CAP, tax_year, filing_status, "SALT_BASE_CAP")
    threshold = lookup(SALT_PHASEOUT_THRESHOLD, tax_year, filing_status, "SALT_PHASEOUT_THRESHOLD")
    floor = by_status(SALT_FLOOR, filing_status, "SALT_FLOOR")
    reduction = apply_rate(max(0, magi - threshold), SALT_PHASEOUT_RATE)
    return max(floor, base - reduction)


# ---------------------------------------------------------------------------
# Income: lines 1a-12
# ---------------------------------------------------------------------------


def _schedule_a(b: ModuleBuilder, tax_return: TaxReturn, agi: TracedValue) -> TracedValue:
    """Schedule A itemized deductions; returns line 17."""
    entries = {attr: b.read(user_node(field)) for attr, field in ITEMIZED_FIELDS.items()}

    medical = entries["medical_expenses"]
    floor = b.compute(
        "scheduleA.line3", apply_rate(agi.amount, MEDICAL_EXPENSE_AGI_FLOOR), [agi], "Schedule A, Line 3"
    )
    line4 = b.compute(
        "scheduleA.line4", max(0, medical.amount - floor.amount), [medical, floor], "Schedule A, Line 4"
    )

    taxes = entries["state_local_taxes"]
    cap = salt_cap(tax_return.filing_status, tax_return.tax_year, agi.amount)
    salt_citation = "Schedule A, Line 7"
    if taxes.amount > cap:
        salt_citation = "Schedule A, Line 7 (limited by SALT cap, IRC §164(b)(6))"
        b.warn(
            f"SALT cap: {taxes.amount} cents of state and local taxes exceeds the "
            f"{cap} cent limit; {taxes.amount - cap} cents is not deductible"
        )
    line7 = b.compute("scheduleA.line7", min(taxes.amount, cap), [taxes, agi], salt_citation)

    line8a = b.compute(
        "scheduleA.line8a", entries["mortgage_interest"].amount, [entries["mortgage_interest"]],
        "Schedule A, Line 8a",
    )
    line14 = b.compute(
        "scheduleA.line14", entries["charitable_contributions"].amount,
        [entries["charitable_contributions"]], "Schedule A, Line 14",
    )
    line16 = b.compute(
        "scheduleA.line16", entries["other_deductions"].amount, [entries["other_deductions"]],
        "Schedule A, Line 16",
    )
    return _sum(b, "scheduleA.line17", [line4, line7, line8a, line14, line16], "Schedule A, Line 17")


def compute_income(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(INCOME_MODULE, store)

    wages = [b.read(w2_node(w2.id, "box1")) for w2 in tax_return.w2s]
    line1a = _sum(b, line("1a"), wages, "Form 1040, Line 1a")
    line1z = b.compute(line("1z"), line1a.amount, [line1a], "Form 1040, Line 1z")

    exempt = [b.read(int_node(f.id, "box8")) for f in tax_return.form1099_ints]
    exempt += [b.read(div_node(f.id, "box11")) for f in tax_return.form1099_divs]
    _sum(b, line("2a"), exempt, "Form 1040, Line 2a")
    interest = b.read("scheduleB.line4")
    line2b = b.compute(line("2b"), interest.amount, [interest], "Form 1040, Line 2b")

    qualified = [b.read(div_node(f.id, "box1b")) for f in tax_return.form1099_divs]
    _sum(b, line("3a"), qualified, "Form 1040, Line 3a")
    dividends = b.read("scheduleB.line6")
    line3b = b.compute(line("3b"), dividends.amount, [dividends], "Form 1040, Line 3b")

    iras = [f for f in tax_return.form1099_rs if f.ira]
    pensions = [f for f in tax_return.form1099_rs if not f.ira]
    _sum(b, line("4a"), [b.read(r_node(f.id, "box1")) for f in iras], "Form 1040, Line 4a")
    line4b = _sum(b, line("4b"), [b.read(r_node(f.id, "box2a")) for f in iras], "Form 1040, Line 4b")
    _sum(b, line("5a"), [b.read(r_node(f.id, "box1")) for f in pensions], "Form 1040, Line 5a")
    line5b = _sum(b, line("5b"), [b.read(r_node(f.id, "box2a")) for f in pensions], "Form 1040, Line 5b")

    capital = b.read("scheduleD.line21")
    line7 = b.compute(line("7"), capital.amount, [capital], "Form 1040, Line 7")
    other = b.read("schedule1.line10")
    line8 = b.compute(line("8"), other.amount, [other], "Form 1040, Line 8")

    line9 = _sum(b, line("9"), [line1z, line2b, line3b, line4b, line5b, line7, line8], "Form 1040, Line 9")
    # no adjustments to income (Schedule 1, Part II) are modeled
    line11 = b.compute(line("11"), line9.amount, [line9], "Form 1040, Line 11")

    standard = b.constant(
        "form1040.standardDeduction",
        lookup(
            FEDERAL_STANDARD_DEDUCTION, tax_return.tax_year, tax_return.filing_status,
            "FEDERAL_STANDARD_DEDUCTION",
        ),
        "Form 1040, Line 12 instructions (Rev. Proc. 2024-40)",
    )
    deductions = tax_return.deductions
    if deductions.method == DeductionMethod.ITEMIZED and deductions.itemized is not None:
        itemized = _schedule_a(b, tax_return, line11)
        if itemized.amount < standard.amount:
            b.warn(
                f"Itemized deductions ({itemized.amount} cents) are less than the "
                f"standard deduction ({standard.amount} cents)"
            )
        b.compute(line("12"), itemized.amount, [itemized], "Form 1040, Line 12 (Schedule A)")
    else:
        b.compute(line("12"), standard.amount, [standard], "Form 1040, Line 12")

    return b.build()


# ---------------------------------------------------------------------------
# Tax: lines 13-18
# ---------------------------------------------------------------------------


def compute_tax(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(TAX_MODULE, store)
    status, year = tax_return.filing_status, tax_return.tax_year

    qbi = b.read("form8995.deduction")
    line13 = b.compute(line("13"), qbi.amount, [qbi], "Form 1040, Line 13")
    line12 = b.read(line("12"))
    line14 = b.compute(line("14"), line12.amount + line13.amount, [line12, line13], "Form 1040, Line 14")

    line11 = b.read(line("11"))
    raw = line11.amount - line14.amount
    citation = "Form 1040, Line 15"
    if raw < 0:
        citation = "Form 1040, Line 15 (negative, clamped to zero)"
        b.warn(f"Deductions exceed income by {-raw} cents; taxable income set to zero")
    line15 = b.compute(line("15"), max(0, raw), [line11, line14], citation)

    qualified = b.read(line("3a"))
    sched_d15 = b.read("scheduleD.line15")
    sched_d16 = b.read("scheduleD.line16")
    gain = net_capital_gain(sched_d15.amount, sched_d16.amount)

    if qualified.amount > 0 or gain > 0:
        ncg = b.compute(
            "qdcg.netCapitalGain", gain, [sched_d15, sched_d16],
            "Qualified Dividends and Capital Gain Tax Worksheet, Line 3",
        )
        ws = capital_gain_worksheet(line15.amount, qualified.amount, gain, status, year)
        preferential = b.compute(
            "qdcg.preferentialIncome", ws.preferential_income, [line15, qualified, ncg],
            "Qualified Dividends and Capital Gain Tax Worksheet, Line 4",
        )
        ordinary = b.compute(
            "qdcg.ordinaryIncome", ws.ordinary_income, [line15, preferential],
            "Qualified Dividends and Capital Gain Tax Worksheet, Line 5",
        )
        ordinary_tax = b.compute(
            "qdcg.ordinaryTax", ws.ordinary_tax, [ordinary],
            "Qualified Dividends and Capital Gain Tax Worksheet, Line 22",
        )
        preferential_tax = b.compute(
            "qdcg.preferentialTax", ws.preferential_tax, [preferential, line15],
            "Qualified Dividends and Capital Gain Tax Worksheet, Lines 18 and 21",
        )
        regular_tax = b.compute(
            "qdcg.regularTax", ws.regular_tax, [line15],
            "Qualified Dividends and Capital Gain Tax Worksheet, Line 24",
        )
        line16 = b.compute(
            line("16"), ws.tax, [ordinary_tax, preferential_tax, regular_tax],
            "Form 1040, Line 16 (Qualified Dividends and Capital Gain Tax Worksheet)",
        )
    else:
        # the worksheet inputs were read to decide; cite them alongside line 15
        line16 = b.compute(
            line("16"), federal_tax(line15.amount, status, year),
            [line15, qualified, sched_d15, sched_d16], "Form 1040, Line 16 (Tax Rate Schedule)",
        )

    b.compute(line("18"), line16.amount, [line16], "Form 1040, Line 18")
    logger.debug("Federal tax before credits: %d", line16.amount)
    return b.build()


# ---------------------------------------------------------------------------
# Credits and payments: lines 19-37
# ---------------------------------------------------------------------------


def compute_payments(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(PAYMENTS_MODULE, store)

    ctc = b.read("ctc.nonRefundable")
    line19 = b.compute(line("19"), ctc.amount, [ctc], "Form 1040, Line 19")
    line21 = b.compute(line("21"), line19.amount, [line19], "Form 1040, Line 21")
    line18 = b.read(line("18"))
    line22 = b.compute(
        line("22"), max(0, line18.amount - line21.amount), [line18, line21], "Form 1040, Line 22"
    )
    line24 = b.compute(line("24"), line22.amount, [line22], "Form 1040, Line 24")

    w2_withheld = [b.read(w2_node(w2.id, "box2")) for w2 in tax_return.w2s]
    line25a = _sum(b, line("25a"), w2_withheld, "Form 1040, Line 25a")
    form_withheld = [b.read(int_node(f.id, "box4")) for f in tax_return.form1099_ints]
    form_withheld += [b.read(div_node(f.id, "box4")) for f in tax_return.form1099_divs]
    form_withheld += [b.read(r_node(f.id, "box4")) for f in tax_return.form1099_rs]
    line25b = _sum(b, line("25b"), form_withheld, "Form 1040, Line 25b")
    line25d = _sum(b, line("25d"), [line25a, line25b], "Form 1040, Line 25d")

    estimated = b.read(user_node("estimatedPayments"))
    line26 = b.compute(line("26"), estimated.amount, [estimated], "Form 1040, Line 26")
    actc = b.read("ctc.additional")
    line28 = b.compute(line("28"), actc.amount, [actc], "Form 1040, Line 28")
    line32 = b.compute(line("32"), line28.amount, [line28], "Form 1040, Line 32")
    line33 = _sum(b, line("33"), [line25d, line26, line32], "Form 1040, Line 33")

    b.compute(
        line("34"), max(0, line33.amount - line24.amount), [line33, line24], "Form 1040, Line 34"
    )
    b.compute(
        line("37"), max(0, line24.amount - line33.amount), [line24, line33], "Form 1040, Line 37"
    )
    return b.build()
