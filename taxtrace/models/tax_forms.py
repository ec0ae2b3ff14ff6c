"""Source document models (W-2, 1099-INT, 1099-DIV, 1099-R).

All monetary fields are integer cents, already normalized by ingestion.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class W2(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    employer_name: str
    employer_ein: str | None = None
    box1_wages: StrictInt = Field(ge=0)
    box2_federal_withheld: StrictInt = Field(default=0, ge=0)
    box5_medicare_wages: StrictInt | None = None
    box6_medicare_withheld: StrictInt | None = None
    box15_state: str | None = None
    box16_state_wages: StrictInt | None = None
    box17_state_withheld: StrictInt = Field(default=0, ge=0)


class Form1099INT(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    payer_name: str
    box1_interest: StrictInt = Field(ge=0)
    box3_us_obligation_interest: StrictInt = 0  # US savings bonds and Treasury obligations
    box4_federal_withheld: StrictInt = 0
    box8_tax_exempt_interest: StrictInt = 0


class Form1099DIV(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    payer_name: str
    box1a_ordinary_dividends: StrictInt = Field(ge=0)
    box1b_qualified_dividends: StrictInt = 0
    box2a_capital_gain_distributions: StrictInt = 0
    box4_federal_withheld: StrictInt = 0
    box5_section_199a_dividends: StrictInt = 0
    box11_exempt_interest_dividends: StrictInt = 0


class Form1099R(BaseModel):
    """Retirement distribution."""

    model_config = ConfigDict(frozen=True)

    id: str
    payer_name: str
    box1_gross_distribution: StrictInt = Field(ge=0)
    box2a_taxable_amount: StrictInt = Field(ge=0)
    box4_federal_withheld: StrictInt = 0
    ira: bool = False  # IRA/SEP/SIMPLE box checked -> Form 1040 line 4, else line 5
