"""Wash sale engine: IRC Section 1091 loss disallowance.

A loss sale is a wash sale when a substantially identical security was
acquired within 30 days before or after the sale. The loss is disallowed
(Form 8949 code W) and added to the basis of the replacement lot.
"""

import logging
from collections.abc import Sequence
from datetime import timedelta

from taxtrace.engines.brackets import WASH_SALE_WINDOW_DAYS
from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.engines.sources import b_node
from taxtrace.models.enums import AdjustmentCode
from taxtrace.models.results import ModuleResult, WashSaleMatch, WashSaleResult
from taxtrace.models.tax_return import TaxReturn
from taxtrace.models.traced import TracedValue
from taxtrace.models.transactions import CapitalTransaction

logger = logging.getLogger(__name__)

MODULE = "washSale"
CITATION = "IRC §1091; Form 8949 instructions, code W"


class WashSaleMatcher:
    """Matches loss sales to replacement purchases inside the 61-day window."""

    def __init__(self, window_days: int = WASH_SALE_WINDOW_DAYS) -> None:
        self.window = timedelta(days=window_days)

    def match(self, transactions: Sequence[CapitalTransaction]) -> WashSaleResult:
        """Run matching passes until no further loss can be matched.

        Each transaction is the loss side of at most one match (it is coded
        W afterwards) and the replacement side of at most one match (its
        ``wash_sale_basis_added`` is set afterwards). A row coded W never
        absorbs another loss, so its gain stays zero. The output is a
        fixed point: matching it again finds nothing.
        """
        adjusted = list(transactions)
        matches: list[WashSaleMatch] = []

        while True:
            found = self._single_pass(adjusted)
            if not found:
                break
            matches.extend(found)

        return WashSaleResult(matches=tuple(matches), adjusted_transactions=tuple(adjusted))

    def _single_pass(self, adjusted: list[CapitalTransaction]) -> list[WashSaleMatch]:
        found: list[WashSaleMatch] = []
        for loss_index in range(len(adjusted)):
            loss = adjusted[loss_index]
            if not loss.is_loss or loss.adjustment_code == AdjustmentCode.WASH_SALE:
                continue
            replacement_index = self._find_replacement(adjusted, loss_index)
            if replacement_index is None:
                continue
            replacement = adjusted[replacement_index]
            disallowed = -loss.gain_loss

            adjusted[loss_index] = self._disallow(loss, disallowed)
            # Re-read: the loss and its replacement are never the same row.
            adjusted[replacement_index] = self._absorb(adjusted[replacement_index], disallowed)

            logger.info(
                "Wash sale: %s (%s) loss of %d cents disallowed, added to basis of %s",
                loss.id, loss.description, disallowed, replacement.id,
            )
            found.append(
                WashSaleMatch(
                    loss_sale_id=loss.id,
                    replacement_id=replacement.id,
                    disallowed_amount=disallowed,
                    symbol=loss.description,
                    loss_sale_date=loss.date_sold,
                    replacement_date=replacement.date_acquired,
                )
            )
        return found

    def _find_replacement(
        self, adjusted: list[CapitalTransaction], loss_index: int
    ) -> int | None:
        """Earliest-acquired eligible replacement, ties broken by input order."""
        loss = adjusted[loss_index]
        start = loss.date_sold - self.window
        end = loss.date_sold + self.window
        candidates = [
            (tx.date_acquired, index)
            for index, tx in enumerate(adjusted)
            if index != loss_index
            and tx.wash_sale_basis_added == 0
            and tx.adjustment_code != AdjustmentCode.WASH_SALE
            and tx.date_acquired is not None
            and start <= tx.date_acquired <= end
            and self.is_substantially_identical(loss, tx)
        ]
        if not candidates:
            return None
        return min(candidates)[1]

    @staticmethod
    def is_substantially_identical(a: CapitalTransaction, b: CapitalTransaction) -> bool:
        """CUSIP equality when both rows carry one, else normalized description."""
        if a.cusip and b.cusip:
            return a.cusip.strip().upper() == b.cusip.strip().upper()
        return a.normalized_description == b.normalized_description

    @staticmethod
    def _disallow(loss: CapitalTransaction, disallowed: int) -> CapitalTransaction:
        return loss.model_copy(
            update={
                "adjustment_code": AdjustmentCode.WASH_SALE,
                "adjustment_amount": loss.adjustment_amount + disallowed,
                "wash_sale_loss_disallowed": disallowed,
                "gain_loss": loss.gain_loss + disallowed,
            }
        )

    @staticmethod
    def _absorb(replacement: CapitalTransaction, disallowed: int) -> CapitalTransaction:
        adjusted_basis = replacement.adjusted_basis + disallowed
        return replacement.model_copy(
            update={
                "adjusted_basis": adjusted_basis,
                "wash_sale_basis_added": disallowed,
                "gain_loss": (
                    replacement.proceeds - adjusted_basis + replacement.adjustment_amount
                ),
            }
        )


def match_wash_sales(transactions: Sequence[CapitalTransaction]) -> WashSaleResult:
    return WashSaleMatcher().match(transactions)


def compute_wash_sales(
    tax_return: TaxReturn, store: ValueStore
) -> tuple[ModuleResult, WashSaleResult]:
    """Run the matcher and emit one traced node per adjusted 8949 column."""
    b = ModuleBuilder(MODULE, store)
    result = match_wash_sales(tax_return.capital_transactions)
    by_id = {tx.id: tx for tx in result.adjusted_transactions}
    disallowed: dict[str, TracedValue] = {}
    basis: dict[str, TracedValue] = {}

    for m in result.matches:
        loss_inputs = [b.read(b_node(m.loss_sale_id, "gainLoss"))]
        if m.loss_sale_id in basis:
            loss_inputs.append(basis[m.loss_sale_id])
        disallowed[m.loss_sale_id] = b.compute(
            f"washSale.{m.loss_sale_id}.disallowed", m.disallowed_amount, loss_inputs, CITATION
        )
        basis[m.replacement_id] = b.compute(
            f"washSale.{m.replacement_id}.basis",
            by_id[m.replacement_id].adjusted_basis,
            [b.read(b_node(m.replacement_id, "basis")), disallowed[m.loss_sale_id]],
            CITATION,
        )

    for tx in result.adjusted_transactions:
        if tx.id not in disallowed and tx.id not in basis:
            continue
        inputs = [b.read(b_node(tx.id, "gainLoss"))]
        if tx.id in disallowed:
            inputs.append(disallowed[tx.id])
        if tx.id in basis:
            inputs.append(basis[tx.id])
        b.compute(f"washSale.{tx.id}.gainLoss", tx.gain_loss, inputs, CITATION)

    if result.matches:
        b.warn(
            f"{len(result.matches)} wash sale(s) detected; "
            f"{result.total_disallowed} cents of loss disallowed"
        )
    return b.build(), result
