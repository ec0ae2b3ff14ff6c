"""Report line models."""

from datetime import date

from pydantic import BaseModel

from taxtrace.models.enums import AdjustmentCode, Form8949Category, ValueUnit


class Form8949Line(BaseModel):
    """A single line on Form 8949."""

    transaction_id: str
    description: str
    date_acquired: date | None  # None prints as "VARIOUS"
    date_sold: date
    proceeds: int
    cost_basis: int
    adjustment_code: AdjustmentCode | None = None
    adjustment_amount: int = 0
    gain_loss: int
    category: Form8949Category


class Form8949Section(BaseModel):
    """One checkbox category (Part I box A/B, Part II box D/E) with its totals."""

    category: Form8949Category
    lines: list[Form8949Line]
    total_proceeds: int
    total_basis: int
    total_adjustment: int
    total_gain_loss: int


class SummaryLine(BaseModel):
    node_id: str
    label: str
    amount: int
    unit: ValueUnit = ValueUnit.CENTS


class StateSummary(BaseModel):
    code: str
    lines: list[SummaryLine]
