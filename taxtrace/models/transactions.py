"""Capital transaction model (one disposed security lot)."""

from datetime import date

from pydantic import BaseModel, ConfigDict, StrictInt, field_validator, model_validator

from taxtrace.models.enums import AdjustmentCode, Form8949Category

VARIOUS = "various"


class CapitalTransaction(BaseModel):
    """A sale reported on Form 8949.

    ``gain_loss`` always equals ``proceeds - adjusted_basis + adjustment_amount``
    (8949 columns d - e + g). When omitted it is derived; when supplied it
    must agree.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    cusip: str | None = None
    date_acquired: date | None = None  # None when acquired "various"
    date_sold: date
    proceeds: StrictInt
    reported_basis: StrictInt
    adjusted_basis: StrictInt
    adjustment_code: AdjustmentCode | None = None
    adjustment_amount: StrictInt = 0
    gain_loss: StrictInt
    wash_sale_loss_disallowed: StrictInt = 0
    wash_sale_basis_added: StrictInt = 0  # disallowed loss absorbed as a replacement
    long_term: bool
    category: Form8949Category
    source_document_id: str | None = None  # 1099-B the row came from

    @field_validator("date_acquired", mode="before")
    @classmethod
    def _various_is_unknown(cls, value):
        if isinstance(value, str) and value.strip().lower() == VARIOUS:
            return None
        return value

    @model_validator(mode="before")
    @classmethod
    def _fill_derived(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("adjusted_basis") is None and "reported_basis" in data:
            data["adjusted_basis"] = data["reported_basis"]
        if data.get("long_term") is None and data.get("category") is not None:
            data["long_term"] = Form8949Category(data["category"]).long_term
        if data.get("gain_loss") is None:
            try:
                data["gain_loss"] = (
                    int(data["proceeds"])
                    - int(data["adjusted_basis"])
                    + int(data.get("adjustment_amount") or 0)
                )
            except (KeyError, TypeError):
                pass  # field validation reports the missing amounts
        return data

    @model_validator(mode="after")
    def _check_consistency(self) -> "CapitalTransaction":
        if self.category.long_term != self.long_term:
            raise ValueError(
                f"Transaction {self.id}: category {self.category} contradicts "
                f"long_term={self.long_term}"
            )
        expected = self.proceeds - self.adjusted_basis + self.adjustment_amount
        if self.gain_loss != expected:
            raise ValueError(
                f"Transaction {self.id}: gain_loss {self.gain_loss} != "
                f"proceeds - adjusted_basis + adjustment_amount ({expected})"
            )
        return self

    @property
    def is_loss(self) -> bool:
        return self.gain_loss < 0

    @property
    def normalized_description(self) -> str:
        return self.description.strip().casefold()
