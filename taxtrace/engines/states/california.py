"""California Form 540 (540NR for part-year and nonresidents).

Sources: FTB 2025 Form 540 instructions and tax rate schedules,
R&TC Section 17043(a) for the mental health services tax.
"""

from decimal import Decimal

from taxtrace.engines.brackets import Brackets, by_status, by_year
from taxtrace.engines.builder import ModuleBuilder
from taxtrace.engines.sources import ITEMIZED_FIELDS, int_node, user_node
from taxtrace.engines.states.base import StateModule
from taxtrace.engines.tax_computation import apply_brackets
from taxtrace.models.enums import DeductionMethod, FilingStatus
from taxtrace.models.tax_return import StateReturnConfig, TaxReturn
from taxtrace.models.traced import TracedValue
from taxtrace.money import apply_rate, cents

# ---------------------------------------------------------------------------
# California brackets: Schedule X (single/MFS), Y (MFJ/QSS), Z (HOH)
# ---------------------------------------------------------------------------
_SCHEDULE_X: Brackets = [
    (cents(11079), Decimal("0.01")),
    (cents(26264), Decimal("0.02")),
    (cents(41452), Decimal("0.04")),
    (cents(57542), Decimal("0.06")),
    (cents(72724), Decimal("0.08")),
    (cents(371479), Decimal("0.093")),
    (cents(445771), Decimal("0.103")),
    (cents(742953), Decimal("0.113")),
    (None, Decimal("0.123")),
]
_SCHEDULE_Y: Brackets = [
    (cents(22158), Decimal("0.01")),
    (cents(52528), Decimal("0.02")),
    (cents(82904), Decimal("0.04")),
    (cents(115084), Decimal("0.06")),
    (cents(145448), Decimal("0.08")),
    (cents(742958), Decimal("0.093")),
    (cents(891542), Decimal("0.103")),
    (cents(1485906), Decimal("0.113")),
    (None, Decimal("0.123")),
]
_SCHEDULE_Z: Brackets = [
    (cents(22173), Decimal("0.01")),
    (cents(52530), Decimal("0.02")),
    (cents(67716), Decimal("0.04")),
    (cents(83805), Decimal("0.06")),
    (cents(98990), Decimal("0.08")),
    (cents(505208), Decimal("0.093")),
    (cents(606251), Decimal("0.103")),
    (cents(1010417), Decimal("0.113")),
    (None, Decimal("0.123")),
]

CALIFORNIA_BRACKETS: dict[int, dict[FilingStatus, Brackets]] = {
    2025: {
        FilingStatus.SINGLE: _SCHEDULE_X,
        FilingStatus.MFS: _SCHEDULE_X,
        FilingStatus.MFJ: _SCHEDULE_Y,
        FilingStatus.QSS: _SCHEDULE_Y,
        FilingStatus.HOH: _SCHEDULE_Z,
    },
}

CALIFORNIA_STANDARD_DEDUCTION: dict[int, dict[FilingStatus, int]] = {
    2025: {
        FilingStatus.SINGLE: cents(5706),
        FilingStatus.MFS: cents(5706),
        FilingStatus.MFJ: cents(11412),
        FilingStatus.QSS: cents(11412),
        FilingStatus.HOH: cents(11412),
    },
}

# 1% on taxable income over $1M, not doubled for joint filers
CA_MENTAL_HEALTH_THRESHOLD = cents(1000000)
CA_MENTAL_HEALTH_RATE = Decimal("0.01")

CA_PERSONAL_EXEMPTION_CREDIT = cents(153)
CA_DEPENDENT_EXEMPTION_CREDIT = cents(475)
CA_PERSONAL_EXEMPTIONS: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: 1,
    FilingStatus.MFS: 1,
    FilingStatus.HOH: 1,
    FilingStatus.MFJ: 2,
    FilingStatus.QSS: 2,
}
# Credits shrink 6% for each $2,500 (or part) of CA AGI over the threshold
CA_EXEMPTION_PHASEOUT_THRESHOLD: dict[FilingStatus, int] = {
    FilingStatus.SINGLE: cents(252203),
    FilingStatus.MFS: cents(252203),
    FilingStatus.MFJ: cents(504411),
    FilingStatus.QSS: cents(504411),
    FilingStatus.HOH: cents(378310),
}
CA_EXEMPTION_PHASEOUT_STEP = cents(2500)
CA_EXEMPTION_PHASEOUT_RATE = Decimal("0.06")

# Nonrefundable renter's credit: (credit, CA AGI limit)
CA_RENTERS_CREDIT: dict[FilingStatus, tuple[int, int]] = {
    FilingStatus.SINGLE: (cents(60), cents(53994)),
    FilingStatus.MFS: (cents(60), cents(53994)),
    FilingStatus.MFJ: (cents(120), cents(107987)),
    FilingStatus.QSS: (cents(120), cents(107987)),
    FilingStatus.HOH: (cents(120), cents(107987)),
}


def exemption_phase_out(credits: int, ca_agi: int, threshold: int) -> int:
    excess = max(0, ca_agi - threshold)
    steps = -(-excess // CA_EXEMPTION_PHASEOUT_STEP)
    return min(credits, apply_rate(credits, CA_EXEMPTION_PHASEOUT_RATE * steps))


class California(StateModule):
    code = "CA"
    form_name = "CA Form 540"

    def compute_tax(
        self,
        b: ModuleBuilder,
        tax_return: TaxReturn,
        config: StateReturnConfig,
        ratio: TracedValue,
    ) -> TracedValue:
        status, year = tax_return.filing_status, tax_return.tax_year

        federal_agi = b.read("form1040.line11")
        line13 = b.compute(self.node("federalAgi"), federal_agi.amount, [federal_agi], "Form 540, Line 13")
        # U.S. obligation interest is exempt (R&TC Section 17133)
        us_interest = [b.read(int_node(f.id, "box3")) for f in tax_return.form1099_ints]
        line14 = b.compute(
            self.node("subtractions"), sum(v.amount for v in us_interest), us_interest,
            "Form 540, Line 14 (Schedule CA)",
        )
        line17 = b.compute(
            self.node("agi"), line13.amount - line14.amount, [line13, line14], "Form 540, Line 17"
        )

        standard = b.constant(
            self.node("standardDeduction"),
            by_status(by_year(CALIFORNIA_STANDARD_DEDUCTION, year, "CALIFORNIA_STANDARD_DEDUCTION"),
                      status, "CALIFORNIA_STANDARD_DEDUCTION"),
            "Form 540, Line 18",
        )
        line18 = self._deduction(b, tax_return, standard)
        raw = line17.amount - line18.amount
        line19 = b.compute(
            self.node("taxableIncome"), max(0, raw), [line17, line18],
            "Form 540, Line 19" if raw >= 0 else "Form 540, Line 19 (negative, clamped to zero)",
        )

        brackets = by_status(by_year(CALIFORNIA_BRACKETS, year, "CALIFORNIA_BRACKETS"), status, "CALIFORNIA_BRACKETS")
        line31 = b.compute(
            self.node("tax"), apply_brackets(line19.amount, brackets), [line19], "Form 540, Line 31"
        )

        personal = by_status(CA_PERSONAL_EXEMPTIONS, status, "CA_PERSONAL_EXEMPTIONS")
        before = (
            personal * CA_PERSONAL_EXEMPTION_CREDIT
            + len(tax_return.dependents) * CA_DEPENDENT_EXEMPTION_CREDIT
        )
        threshold = by_status(CA_EXEMPTION_PHASEOUT_THRESHOLD, status, "CA_EXEMPTION_PHASEOUT_THRESHOLD")
        line32 = b.compute(
            self.node("exemptionCredits"),
            before - exemption_phase_out(before, line17.amount, threshold),
            [line17],
            "Form 540, Line 32 (AGI limitation worksheet)",
        )
        line33 = b.compute(
            self.node("taxAfterExemptions"), max(0, line31.amount - line32.amount), [line31, line32],
            "Form 540, Line 33",
        )

        mental_health = b.compute(
            self.node("mentalHealthTax"),
            apply_rate(max(0, line19.amount - CA_MENTAL_HEALTH_THRESHOLD), CA_MENTAL_HEALTH_RATE),
            [line19],
            "Form 540, Line 62 (R&TC §17043(a))",
        )

        credit, agi_limit = by_status(CA_RENTERS_CREDIT, status, "CA_RENTERS_CREDIT")
        renters = b.compute(
            self.node("rentersCredit"),
            credit if config.rent_paid and line17.amount <= agi_limit else 0,
            [line17],
            "Form 540, Line 46",
        )
        line48 = b.compute(
            self.node("taxAfterCredits"), max(0, line33.amount - renters.amount), [line33, renters],
            "Form 540, Line 48",
        )
        full_year = b.compute(
            self.node("fullYearTax"), line48.amount + mental_health.amount, [line48, mental_health],
            "Form 540, Line 64",
        )
        return self.apportion(b, "totalTax", full_year, ratio, "Form 540NR, Line 64 (apportioned)")

    def _deduction(
        self, b: ModuleBuilder, tax_return: TaxReturn, standard: TracedValue
    ) -> TracedValue:
        """Larger of the CA standard deduction and CA itemized deductions.

        California does not allow state income tax as an itemized deduction
        and has no SALT cap; state and local taxes are left out entirely.
        """
        deductions = tax_return.deductions
        if deductions.method != DeductionMethod.ITEMIZED or deductions.itemized is None:
            return b.compute(self.node("deduction"), standard.amount, [standard], "Form 540, Line 18")

        medical = b.read("scheduleA.line4")
        others = [
            b.read(user_node(ITEMIZED_FIELDS[attr]))
            for attr in ("mortgage_interest", "charitable_contributions", "other_deductions")
        ]
        itemized = b.compute(
            self.node("itemizedDeductions"),
            medical.amount + sum(v.amount for v in others),
            [medical, *others],
            "Schedule CA (540), Part II, Line 30",
        )
        return b.compute(
            self.node("deduction"), max(standard.amount, itemized.amount), [standard, itemized],
            "Form 540, Line 18",
        )
