"""Schedule 1: additional income.

Business income from the qualified business activities goes on line 3;
line 10 carries the total to Form 1040 line 8.
"""

from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import user_node
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import TaxReturn

MODULE = "schedule1"


def compute_schedule1(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)
    business = [b.read(user_node(f"business.{a.id}.qbi")) for a in tax_return.businesses]
    line3 = b.compute(
        "schedule1.line3", sum(v.amount for v in business), business, "Schedule 1, Line 3"
    )
    b.compute("schedule1.line10", line3.amount, [line3], "Schedule 1, Line 10")
    return b.build()
