"""Shared machinery for state rule modules.

Every state module reads the federal values read-only, emits node ids
prefixed with its lowercase state code, and publishes its residency
apportionment ratio as ``{st}.apportionmentRatio`` (parts per million).
"""

import calendar
import logging
from abc import ABC, abstractmethod
from datetime import date
from fractions import Fraction

from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import w2_node
from taxtrace.models.enums import ResidencyType, ValueUnit
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import StateReturnConfig, TaxReturn
from taxtrace.models.traced import RATIO_SCALE, TracedValue
from taxtrace.money import round_half_up

logger = logging.getLogger(__name__)


def days_in_year(tax_year: int) -> int:
    return 366 if calendar.isleap(tax_year) else 365


def residency_days(config: StateReturnConfig, tax_year: int) -> int:
    """Days of ``tax_year`` spent as a resident, counting both end dates."""
    if config.residency == ResidencyType.FULL_YEAR:
        return days_in_year(tax_year)
    if config.residency == ResidencyType.NONRESIDENT:
        return 0
    year_start, year_end = date(tax_year, 1, 1), date(tax_year, 12, 31)
    start = max(config.move_in_date or year_start, year_start)
    end = min(config.move_out_date or year_end, year_end)
    if end < start:
        return 0
    return (end - start).days + 1


def apportionment_ratio(config: StateReturnConfig, tax_year: int) -> Fraction:
    return Fraction(residency_days(config, tax_year), days_in_year(tax_year))


def apply_ratio(amount: int, ratio_ppm: int) -> int:
    return round_half_up(Fraction(amount * ratio_ppm, RATIO_SCALE))


class StateModule(ABC):
    """One state's individual income tax return."""

    code: str
    form_name: str

    @property
    def prefix(self) -> str:
        return self.code.lower()

    @property
    def module_name(self) -> str:
        return f"state.{self.prefix}"

    def node(self, name: str) -> str:
        return f"{self.prefix}.{name}"

    def compute(
        self, tax_return: TaxReturn, config: StateReturnConfig, store: ValueStore
    ) -> ModuleResult:
        b = ModuleBuilder(self.module_name, store)
        ratio = self._ratio_node(b, tax_return, config)
        tax = self.compute_tax(b, tax_return, config, ratio)
        self._payments(b, tax_return, tax)
        logger.debug("%s: tax %d at ratio %d ppm", self.form_name, tax.amount, ratio.amount)
        return b.build()

    @abstractmethod
    def compute_tax(
        self,
        b: ModuleBuilder,
        tax_return: TaxReturn,
        config: StateReturnConfig,
        ratio: TracedValue,
    ) -> TracedValue:
        """Emit the state's lines and return its total tax after credits."""

    def _ratio_node(
        self, b: ModuleBuilder, tax_return: TaxReturn, config: StateReturnConfig
    ) -> TracedValue:
        ratio = apportionment_ratio(config, tax_return.tax_year)
        citation = f"{self.form_name}: {config.residency} resident"
        if config.residency == ResidencyType.PART_YEAR:
            days = residency_days(config, tax_return.tax_year)
            citation = (
                f"{self.form_name}: part-year resident, {days} of "
                f"{days_in_year(tax_return.tax_year)} days"
            )
        return b.compute(
            self.node("apportionmentRatio"),
            round_half_up(ratio * RATIO_SCALE),
            (),
            citation,
            ValueUnit.RATIO,
        )

    def apportion(
        self, b: ModuleBuilder, name: str, value: TracedValue, ratio: TracedValue, citation: str
    ) -> TracedValue:
        return b.compute(self.node(name), apply_ratio(value.amount, ratio.amount), [value, ratio], citation)

    def _payments(self, b: ModuleBuilder, tax_return: TaxReturn, tax: TracedValue) -> None:
        withheld = [
            b.read(w2_node(w2.id, "box17"))
            for w2 in tax_return.w2s
            if w2.box15_state and w2.box15_state.strip().upper() == self.code
        ]
        withholding = b.compute(
            self.node("withholding"), sum(v.amount for v in withheld), withheld,
            f"{self.form_name}: state income tax withheld (Form W-2, Box 17)",
        )
        b.compute(
            self.node("refund"), max(0, withholding.amount - tax.amount), [withholding, tax],
            f"{self.form_name}: overpaid",
        )
        b.compute(
            self.node("amountOwed"), max(0, tax.amount - withholding.amount), [tax, withholding],
            f"{self.form_name}: amount you owe",
        )
