"""TaxReturn: the immutable input to a compute run."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from taxtrace.models.enums import DeductionMethod, FilingStatus, ResidencyType
from taxtrace.models.tax_forms import W2, Form1099DIV, Form1099INT, Form1099R
from taxtrace.models.transactions import CapitalTransaction


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    date_of_birth: date | None = None


class Dependent(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    relationship: str  # "son", "daughter", "parent", ...
    date_of_birth: date | None = None
    months_lived: int = Field(default=12, ge=0, le=12)
    has_ssn: bool = True


class BusinessActivity(BaseModel):
    """A qualified trade or business (Schedule C, K-1) for the QBI deduction."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    qualified_income: StrictInt  # may be negative
    w2_wages: StrictInt = Field(default=0, ge=0)
    ubia: StrictInt = Field(default=0, ge=0)  # unadjusted basis of qualified property
    specified_service: bool = False


class ItemizedDeductions(BaseModel):
    model_config = ConfigDict(frozen=True)

    medical_expenses: StrictInt = Field(default=0, ge=0)
    state_local_taxes: StrictInt = Field(default=0, ge=0)
    mortgage_interest: StrictInt = Field(default=0, ge=0)
    charitable_contributions: StrictInt = Field(default=0, ge=0)
    other_deductions: StrictInt = Field(default=0, ge=0)


class Deductions(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: DeductionMethod = DeductionMethod.STANDARD
    itemized: ItemizedDeductions | None = None


class PriorYearCarryover(BaseModel):
    """Capital loss carryovers from last year's Schedule D (positive amounts)."""

    model_config = ConfigDict(frozen=True)

    short_term_loss: StrictInt = Field(default=0, ge=0)
    long_term_loss: StrictInt = Field(default=0, ge=0)


class StateReturnConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    state_code: str
    residency: ResidencyType = ResidencyType.FULL_YEAR
    move_in_date: date | None = None
    move_out_date: date | None = None
    rent_paid: bool = False

    @field_validator("state_code")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


class TaxReturn(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int = 2025
    filing_status: FilingStatus
    taxpayer: Person
    spouse: Person | None = None
    dependents: tuple[Dependent, ...] = ()

    w2s: tuple[W2, ...] = ()
    form1099_ints: tuple[Form1099INT, ...] = ()
    form1099_divs: tuple[Form1099DIV, ...] = ()
    form1099_rs: tuple[Form1099R, ...] = ()
    capital_transactions: tuple[CapitalTransaction, ...] = ()

    businesses: tuple[BusinessActivity, ...] = ()
    deductions: Deductions = Field(default_factory=Deductions)
    prior_year: PriorYearCarryover = Field(default_factory=PriorYearCarryover)
    estimated_tax_payments: StrictInt = Field(default=0, ge=0)
    state_returns: tuple[StateReturnConfig, ...] = ()
    detect_wash_sales: bool = True

    @model_validator(mode="after")
    def _unique_ids(self) -> "TaxReturn":
        collections = {
            "w2s": self.w2s,
            "form1099_ints": self.form1099_ints,
            "form1099_divs": self.form1099_divs,
            "form1099_rs": self.form1099_rs,
            "capital_transactions": self.capital_transactions,
            "businesses": self.businesses,
        }
        for name, items in collections.items():
            ids = [item.id for item in items]
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate ids in {name}: {', '.join(duplicates)}")
        codes = [cfg.state_code for cfg in self.state_returns]
        if len(codes) != len(set(codes)):
            raise ValueError("A state may be requested only once")
        return self
