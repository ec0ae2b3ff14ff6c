"""Schedule B: interest and ordinary dividends."""

from taxtrace.engines.brackets import SCHEDULE_B_THRESHOLD
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import div_node, int_node
from taxtrace.models.enums import ValueUnit
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import TaxReturn

MODULE = "scheduleB"


def compute_schedule_b(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)

    interest = [b.read(int_node(f.id, "box1")) for f in tax_return.form1099_ints]
    line4 = b.compute(
        "scheduleB.line4", sum(v.amount for v in interest), interest, "Schedule B, Part I, Line 4"
    )
    dividends = [b.read(div_node(f.id, "box1a")) for f in tax_return.form1099_divs]
    line6 = b.compute(
        "scheduleB.line6", sum(v.amount for v in dividends), dividends, "Schedule B, Part II, Line 6"
    )

    # either part over $1,500
    required = line4.amount > SCHEDULE_B_THRESHOLD or line6.amount > SCHEDULE_B_THRESHOLD
    b.compute(
        "scheduleB.required", int(required), [line4, line6], "Schedule B instructions", ValueUnit.FLAG
    )
    return b.build()
