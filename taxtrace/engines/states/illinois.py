"""Illinois Form IL-1040.

Starts from federal AGI, adds federally tax-exempt interest, subtracts
U.S. obligation interest, then subtracts the exemption allowance and
applies the flat rate. Part-year residents apportion net income.
"""

from decimal import Decimal

from taxtrace.engines.brackets import by_year
from taxtrace.engines.builder import ModuleBuilder
from taxtrace.engines.sources import div_node, int_node
from taxtrace.engines.states.base import StateModule
from taxtrace.models.enums import FilingStatus
from taxtrace.models.tax_return import StateReturnConfig, TaxReturn
from taxtrace.models.traced import TracedValue
from taxtrace.money import apply_rate, cents

IL_FLAT_TAX_RATE = Decimal("0.0495")
IL_EXEMPTION_ALLOWANCE: dict[int, int] = {2025: cents(2850)}


def exemption_count(tax_return: TaxReturn) -> int:
    """Taxpayer, spouse on a joint return, and each dependent."""
    spouse = tax_return.filing_status == FilingStatus.MFJ and tax_return.spouse is not None
    return 1 + int(spouse) + len(tax_return.dependents)


class Illinois(StateModule):
    code = "IL"
    form_name = "IL-1040"

    def compute_tax(
        self,
        b: ModuleBuilder,
        tax_return: TaxReturn,
        config: StateReturnConfig,
        ratio: TracedValue,
    ) -> TracedValue:
        federal_agi = b.read("form1040.line11")
        line1 = b.compute(self.node("federalAgi"), federal_agi.amount, [federal_agi], "IL-1040, Line 1")

        exempt = [b.read(int_node(f.id, "box8")) for f in tax_return.form1099_ints]
        exempt += [b.read(div_node(f.id, "box11")) for f in tax_return.form1099_divs]
        line2 = b.compute(
            self.node("additions"), sum(v.amount for v in exempt), exempt, "IL-1040, Line 2"
        )
        us_interest = [b.read(int_node(f.id, "box3")) for f in tax_return.form1099_ints]
        line7 = b.compute(
            self.node("subtractions"), sum(v.amount for v in us_interest), us_interest,
            "IL-1040, Line 7 (Schedule M)",
        )
        raw_base = line1.amount + line2.amount - line7.amount
        line9 = b.compute(
            self.node("baseIncome"), max(0, raw_base), [line1, line2, line7], "IL-1040, Line 9"
        )

        allowance = by_year(IL_EXEMPTION_ALLOWANCE, tax_return.tax_year, "IL_EXEMPTION_ALLOWANCE")
        count = exemption_count(tax_return)
        line10 = b.constant(
            self.node("exemptionAllowance"),
            count * allowance,
            f"IL-1040, Line 10 ({count} exemption(s))",
        )
        line11 = b.compute(
            self.node("netIncome"), max(0, line9.amount - line10.amount), [line9, line10],
            "IL-1040, Line 11",
        )
        taxable = self.apportion(b, "taxableIncome", line11, ratio, "IL-1040, Line 11 (Schedule NR)")
        return b.compute(
            self.node("totalTax"), apply_rate(taxable.amount, IL_FLAT_TAX_RATE), [taxable],
            "IL-1040, Line 12",
        )
