"""Form 8949: sales and other dispositions of capital assets.

Totals per check-box category, read from the 1099-B leaves or, for rows the
wash sale matcher adjusted, from its nodes.
"""

from collections.abc import Sequence

from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import b_node
from taxtrace.exceptions import UnsupportedCategoryError
from taxtrace.models.enums import Form8949Category
from taxtrace.models.results import ModuleResult
from taxtrace.models.traced import TracedValue
from taxtrace.models.transactions import CapitalTransaction

MODULE = "form8949"

COLUMNS = ("proceeds", "basis", "adjustment", "gainLoss")


def total_node(category: Form8949Category | str, column: str) -> str:
    return f"form8949.{category}.{column}"


def group_by_category(
    transactions: Sequence[CapitalTransaction],
) -> dict[Form8949Category, list[CapitalTransaction]]:
    grouped: dict[Form8949Category, list[CapitalTransaction]] = {c: [] for c in Form8949Category}
    for tx in transactions:
        if tx.category not in grouped:
            raise UnsupportedCategoryError(tx.id, tx.category)
        grouped[tx.category].append(tx)
    return grouped


def _column_inputs(b: ModuleBuilder, tx_id: str, column: str) -> list[TracedValue]:
    if column == "proceeds":
        return [b.read(b_node(tx_id, "proceeds"))]
    if column == "adjustment":
        inputs = [b.read(b_node(tx_id, "adjustment"))]
        if b.has(f"washSale.{tx_id}.disallowed"):
            inputs.append(b.read(f"washSale.{tx_id}.disallowed"))
        return inputs
    # basis and gainLoss are replaced outright by the wash sale node when present
    adjusted = f"washSale.{tx_id}.{column}"
    if b.has(adjusted):
        return [b.read(adjusted)]
    return [b.read(b_node(tx_id, column))]


def compute_form8949(
    transactions: Sequence[CapitalTransaction], store: ValueStore
) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)
    for category, rows in group_by_category(transactions).items():
        part = "Part II" if category.long_term else "Part I"
        for column in COLUMNS:
            inputs: list[TracedValue] = []
            for tx in rows:
                inputs.extend(_column_inputs(b, tx.id, column))
            b.compute(
                total_node(category, column),
                sum(v.amount for v in inputs),
                inputs,
                f"Form 8949, {part}, box {category}, line 2",
            )
    return b.build()
