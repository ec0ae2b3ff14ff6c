"""North Carolina Form D-400: flat tax on federal AGI less the NC standard deduction."""

from decimal import Decimal

from taxtrace.engines.brackets import by_status
from taxtrace.engines.builder import ModuleBuilder
from taxtrace.engines.states.base import StateModule
from taxtrace.models.enums import FilingStatus
from taxtrace.models.tax_return import StateReturnConfig, TaxReturn
from taxtrace.models.traced import TracedValue
from taxtrace.money import apply_rate, cents

NC_FLAT_TAX_RATE = Decimal("0.0425")
NC_STANDARD_DEDUCTION: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(12750),
    FilingStatus.MFJ: cents(25500),
    FilingStatus.MFS: cents(12750),
    FilingStatus.HOH: cents(19125),
    FilingStatus.QSS: cents(25500),
}


class NorthCarolina(StateModule):
    code = "NC"
    form_name = "NC D-400"

    def compute_tax(
        self,
        b: ModuleBuilder,
        tax_return: TaxReturn,
        config: StateReturnConfig,
        ratio: TracedValue,
    ) -> TracedValue:
        federal_agi = b.read("form1040.line11")
        line6 = b.compute(self.node("federalAgi"), federal_agi.amount, [federal_agi], "D-400, Line 6")
        line11 = b.constant(
            self.node("standardDeduction"),
            by_status(NC_STANDARD_DEDUCTION, tax_return.filing_status, "NC_STANDARD_DEDUCTION"),
            "D-400, Line 11",
        )
        raw = line6.amount - line11.amount
        line14 = b.compute(
            self.node("taxableIncome"), max(0, raw), [line6, line11],
            "D-400, Line 14" if raw >= 0 else "D-400, Line 14 (negative, clamped to zero)",
        )
        line15 = b.compute(
            self.node("fullYearTax"), apply_rate(line14.amount, NC_FLAT_TAX_RATE), [line14],
            "D-400, Line 15",
        )
        return self.apportion(b, "totalTax", line15, ratio, "D-400 Schedule PN (apportioned)")
