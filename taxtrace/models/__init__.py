"""Data models for taxtrace."""

from taxtrace.models.enums import (
    AdjustmentCode,
    DeductionMethod,
    FilingStatus,
    Form8949Category,
    ResidencyType,
    ValueUnit,
)
from taxtrace.models.reports import Form8949Line, Form8949Section, StateSummary, SummaryLine
from taxtrace.models.results import (
    ComputeResult,
    ComputeTrace,
    ModuleResult,
    WashSaleMatch,
    WashSaleResult,
)
from taxtrace.models.tax_forms import W2, Form1099DIV, Form1099INT, Form1099R
from taxtrace.models.tax_return import (
    BusinessActivity,
    Deductions,
    Dependent,
    ItemizedDeductions,
    Person,
    PriorYearCarryover,
    StateReturnConfig,
    TaxReturn,
)
from taxtrace.models.traced import (
    RATIO_SCALE,
    ComputedSource,
    DocumentSource,
    TracedValue,
    UserEntrySource,
    computed,
    constant,
    from_document,
    from_user_entry,
)
from taxtrace.models.transactions import CapitalTransaction

__all__ = [
    "AdjustmentCode",
    "BusinessActivity",
    "CapitalTransaction",
    "ComputedSource",
    "ComputeResult",
    "ComputeTrace",
    "Deductions",
    "DeductionMethod",
    "Dependent",
    "DocumentSource",
    "FilingStatus",
    "Form1099DIV",
    "Form1099INT",
    "Form1099R",
    "Form8949Category",
    "Form8949Line",
    "Form8949Section",
    "ItemizedDeductions",
    "ModuleResult",
    "Person",
    "PriorYearCarryover",
    "RATIO_SCALE",
    "ResidencyType",
    "StateReturnConfig",
    "StateSummary",
    "SummaryLine",
    "TaxReturn",
    "TracedValue",
    "UserEntrySource",
    "ValueUnit",
    "W2",
    "WashSaleMatch",
    "WashSaleResult",
    "computed",
    "constant",
    "from_document",
    "from_user_entry",
]
