"""Schedule D: capital gains and losses.

Part I nets short-term rows (8949 boxes A/B) with the short-term
carryover, Part II nets long-term rows (boxes D/E), capital gain
distributions, and the long-term carryover. Part III applies the
IRC Section 1211(b) loss limitation.
"""

from taxtrace.engines.brackets import CAPITAL_LOSS_LIMIT, by_status
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.form8949 import total_node
from taxtrace.engines.sources import div_node, user_node
from taxtrace.models.enums import FilingStatus, Form8949Category
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import TaxReturn

MODULE = "scheduleD"


def line(number: str) -> str:
    return f"scheduleD.line{number}"


def apply_loss_limit(net: int, filing_status: FilingStatus) -> tuple[int, int]:
    """Return (allowed amount for Form 1040 line 7, carryforward).

    Gains pass through. A net loss is allowed down to -$3,000 ($1,500 MFS);
    the rest carries forward as a positive amount.
    """
    if net >= 0:
        return net, 0
    limit = by_status(CAPITAL_LOSS_LIMIT, filing_status, "CAPITAL_LOSS_LIMIT")
    allowed = max(net, -limit)
    return allowed, abs(net - allowed)


def compute_schedule_d(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)

    # Part I - short-term
    a = b.read(total_node(Form8949Category.A, "gainLoss"))
    line1a = b.compute(line("1a"), a.amount, [a], "Schedule D, Line 1a")
    box_b = b.read(total_node(Form8949Category.B, "gainLoss"))
    line1b = b.compute(line("1b"), box_b.amount, [box_b], "Schedule D, Line 1b")
    st_carry = b.read(user_node("priorYear.shortTermLoss"))
    line6 = b.compute(line("6"), -st_carry.amount, [st_carry], "Schedule D, Line 6")
    line7 = b.compute(
        line("7"),
        line1a.amount + line1b.amount + line6.amount,
        [line1a, line1b, line6],
        "Schedule D, Line 7",
    )

    # Part II - long-term
    d = b.read(total_node(Form8949Category.D, "gainLoss"))
    line8a = b.compute(line("8a"), d.amount, [d], "Schedule D, Line 8a")
    e = b.read(total_node(Form8949Category.E, "gainLoss"))
    line8b = b.compute(line("8b"), e.amount, [e], "Schedule D, Line 8b")
    distributions = [b.read(div_node(f.id, "box2a")) for f in tax_return.form1099_divs]
    line13 = b.compute(
        line("13"), sum(v.amount for v in distributions), distributions, "Schedule D, Line 13"
    )
    lt_carry = b.read(user_node("priorYear.longTermLoss"))
    line14 = b.compute(line("14"), -lt_carry.amount, [lt_carry], "Schedule D, Line 14")
    line15 = b.compute(
        line("15"),
        line8a.amount + line8b.amount + line13.amount + line14.amount,
        [line8a, line8b, line13, line14],
        "Schedule D, Line 15",
    )

    # Part III - summary
    line16 = b.compute(line("16"), line7.amount + line15.amount, [line7, line15], "Schedule D, Line 16")
    allowed, carryforward = apply_loss_limit(line16.amount, tax_return.filing_status)
    citation = "Schedule D, Line 21"
    if allowed != line16.amount:
        citation = "Schedule D, Line 21 (loss limited, IRC §1211(b))"
        b.warn(f"Capital loss limited; {carryforward} cents carry forward to next year")
    line21 = b.compute(line("21"), allowed, [line16], citation)
    b.compute(
        "scheduleD.carryforward",
        carryforward,
        [line16, line21],
        "Capital Loss Carryover Worksheet",
    )
    return b.build()
