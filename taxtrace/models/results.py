"""Compute output models."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from taxtrace.models.traced import TracedValue
from taxtrace.models.transactions import CapitalTransaction


class ModuleResult(BaseModel):
    """Everything one rule module produced in a run.

    ``values`` is in creation order, which is also dependency order.
    ``consumed`` lists the upstream node ids the module read.
    """

    model_config = ConfigDict(frozen=True)

    module: str
    values: dict[str, TracedValue] = Field(default_factory=dict)
    consumed: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def __getitem__(self, node_id: str) -> TracedValue:
        return self.values[node_id]

    def amount(self, node_id: str) -> int:
        return self.values[node_id].amount


class WashSaleMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    loss_sale_id: str
    replacement_id: str
    disallowed_amount: int
    symbol: str
    loss_sale_date: date
    replacement_date: date


class WashSaleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    matches: tuple[WashSaleMatch, ...] = ()
    adjusted_transactions: tuple[CapitalTransaction, ...] = ()

    @property
    def total_disallowed(self) -> int:
        return sum(m.disallowed_amount for m in self.matches)


class ComputeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    modules: dict[str, ModuleResult]
    values: dict[str, TracedValue]
    wash_sales: WashSaleResult
    executed_modules: tuple[str, ...]
    warnings: tuple[str, ...] = ()

    def __getitem__(self, node_id: str) -> TracedValue:
        return self.values[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.values

    def amount(self, node_id: str) -> int:
        return self.values[node_id].amount

    def get(self, node_id: str) -> TracedValue | None:
        return self.values.get(node_id)


class ComputeTrace(BaseModel):
    node_id: str
    label: str
    output: TracedValue
    inputs: list["ComputeTrace"] = Field(default_factory=list)
    citation: str | None = None
