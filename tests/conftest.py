"""Shared test fixtures for taxtrace."""

from datetime import date

import pytest

from taxtrace.models.enums import DeductionMethod, FilingStatus, Form8949Category, ResidencyType
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
from taxtrace.models.transactions import CapitalTransaction
from taxtrace.money import cents


def transaction(
    id: str,
    proceeds: int,
    basis: int,
    *,
    description: str = "ACME",
    date_acquired: date | None = date(2025, 1, 2),
    date_sold: date = date(2025, 3, 1),
    category: Form8949Category = Form8949Category.A,
    cusip: str | None = None,
) -> CapitalTransaction:
    return CapitalTransaction(
        id=id,
        description=description,
        cusip=cusip,
        date_acquired=date_acquired,
        date_sold=date_sold,
        proceeds=proceeds,
        reported_basis=basis,
        adjusted_basis=basis,
        gain_loss=proceeds - basis,
        long_term=category.long_term,
        category=category,
    )


@pytest.fixture
def make_transaction():
    return transaction


@pytest.fixture
def taxpayer() -> Person:
    return Person(first_name="Ada", last_name="Lovelace", date_of_birth=date(1985, 12, 10))


@pytest.fixture
def sample_w2() -> W2:
    return W2(
        id="w2-acme",
        employer_name="Acme Corp",
        box1_wages=cents(100000),
        box2_federal_withheld=cents(15000),
        box15_state="CA",
        box17_state_withheld=cents(5000),
    )


@pytest.fixture
def long_term_sale() -> CapitalTransaction:
    """7,000 proceeds on a 5,000 basis, box D."""
    return transaction(
        "sale-d",
        cents(7000),
        cents(5000),
        date_acquired=date(2020, 5, 1),
        date_sold=date(2025, 6, 1),
        category=Form8949Category.D,
    )


@pytest.fixture
def simple_return(taxpayer: Person, long_term_sale: CapitalTransaction) -> TaxReturn:
    return TaxReturn(
        filing_status=FilingStatus.SINGLE,
        taxpayer=taxpayer,
        capital_transactions=(long_term_sale,),
    )


@pytest.fixture
def wash_sale_pair() -> tuple[CapitalTransaction, CapitalTransaction]:
    """A $200 loss sold 2025-03-01 and a replacement bought 30 days later."""
    loss = transaction("loss", cents(800), cents(1000))
    replacement = transaction(
        "repl",
        cents(1200),
        cents(1000),
        date_acquired=date(2025, 3, 31),
        date_sold=date(2025, 6, 1),
    )
    return loss, replacement


@pytest.fixture
def wash_sale_return(taxpayer: Person, wash_sale_pair) -> TaxReturn:
    return TaxReturn(
        filing_status=FilingStatus.SINGLE,
        taxpayer=taxpayer,
        capital_transactions=wash_sale_pair,
    )


@pytest.fixture
def full_return(taxpayer: Person, sample_w2: W2, wash_sale_pair) -> TaxReturn:
    """Every document type, itemized deductions, a business, and two states."""
    return TaxReturn(
        filing_status=FilingStatus.MFJ,
        taxpayer=taxpayer,
        spouse=Person(first_name="Charles", last_name="Babbage"),
        dependents=(
            Dependent(
                first_name="Byron", last_name="Lovelace", relationship="son",
                date_of_birth=date(2015, 4, 1),
            ),
            Dependent(
                first_name="Anne", last_name="Milbanke", relationship="parent",
                date_of_birth=date(1950, 1, 1),
            ),
        ),
        w2s=(
            sample_w2,
            W2(
                id="w2-globex",
                employer_name="Globex",
                box1_wages=cents(60000),
                box2_federal_withheld=cents(7000),
                box15_state="IL",
                box17_state_withheld=cents(2000),
            ),
        ),
        form1099_ints=(
            Form1099INT(
                id="int-bank",
                payer_name="First Bank",
                box1_interest=cents(2000),
                box3_us_obligation_interest=cents(300),
                box8_tax_exempt_interest=cents(150),
            ),
        ),
        form1099_divs=(
            Form1099DIV(
                id="div-fund",
                payer_name="Index Fund",
                box1a_ordinary_dividends=cents(3000),
                box1b_qualified_dividends=cents(2500),
                box2a_capital_gain_distributions=cents(400),
                box11_exempt_interest_dividends=cents(75),
            ),
        ),
        form1099_rs=(
            Form1099R(
                id="r-ira",
                payer_name="Brokerage IRA",
                box1_gross_distribution=cents(5000),
                box2a_taxable_amount=cents(5000),
                box4_federal_withheld=cents(500),
                ira=True,
            ),
        ),
        capital_transactions=(
            *wash_sale_pair,
            transaction(
                "lt-1",
                cents(9000),
                cents(4000),
                description="WIDGET",
                date_acquired=date(2019, 2, 1),
                date_sold=date(2025, 8, 1),
                category=Form8949Category.D,
            ),
        ),
        businesses=(
            BusinessActivity(
                id="consulting",
                name="Consulting LLC",
                qualified_income=cents(40000),
                w2_wages=cents(10000),
            ),
        ),
        deductions=Deductions(
            method=DeductionMethod.ITEMIZED,
            itemized=ItemizedDeductions(
                medical_expenses=cents(2000),
                state_local_taxes=cents(18000),
                mortgage_interest=cents(14000),
                charitable_contributions=cents(3000),
            ),
        ),
        prior_year=PriorYearCarryover(short_term_loss=cents(500)),
        estimated_tax_payments=cents(4000),
        state_returns=(
            StateReturnConfig(state_code="ca", rent_paid=True),
            StateReturnConfig(
                state_code="IL",
                residency=ResidencyType.PART_YEAR,
                move_out_date=date(2025, 3, 31),
            ),
        ),
    )
