"""TracedValue: an amount of cents plus where it came from.

Every value the engine produces or reads carries its provenance. Leaves
point at a document field or a user entry; computed values name their own
node id and the node ids of every value read to derive them.
"""

from collections.abc import Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from taxtrace.models.enums import ValueUnit

RATIO_SCALE = 1_000_000


class DocumentSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["document"] = "document"
    document_type: str  # e.g. "w2", "1099int", "1099b"
    document_id: str
    field: str  # e.g. "box1", "gainLoss"
    description: str | None = None

    @property
    def ref(self) -> str:
        return f"{self.document_type}:{self.document_id}:{self.field}"


class UserEntrySource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["user-entry"] = "user-entry"
    field: str
    description: str | None = None

    @property
    def ref(self) -> str:
        return f"user:{self.field}"


class ComputedSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["computed"] = "computed"
    node_id: str
    inputs: tuple[str, ...] = ()


ValueSource = Annotated[
    DocumentSource | UserEntrySource | ComputedSource,
    Field(discriminator="kind"),
]


class TracedValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: StrictInt
    source: ValueSource
    citation: str | None = None
    unit: ValueUnit = ValueUnit.CENTS

    @property
    def node_id(self) -> str:
        if isinstance(self.source, ComputedSource):
            return self.source.node_id
        return self.source.ref

    @property
    def inputs(self) -> tuple[str, ...]:
        if isinstance(self.source, ComputedSource):
            return self.source.inputs
        return ()

    @property
    def is_leaf(self) -> bool:
        return not isinstance(self.source, ComputedSource)


def from_document(
    amount: int,
    document_type: str,
    document_id: str,
    field: str,
    citation: str | None = None,
    description: str | None = None,
) -> TracedValue:
    return TracedValue(
        amount=amount,
        source=DocumentSource(
            document_type=document_type,
            document_id=document_id,
            field=field,
            description=description,
        ),
        citation=citation,
    )


def from_user_entry(
    amount: int,
    field: str,
    citation: str | None = None,
    description: str | None = None,
) -> TracedValue:
    return TracedValue(
        amount=amount,
        source=UserEntrySource(field=field, description=description),
        citation=citation,
    )


def computed(
    node_id: str,
    amount: int,
    inputs: Sequence[TracedValue],
    citation: str | None = None,
    unit: ValueUnit = ValueUnit.CENTS,
) -> TracedValue:
    """Build a computed value from the values it was derived from.

    ``inputs`` takes the TracedValue objects themselves, not their ids, so a
    rule cannot cite a value it never had in hand. Duplicate inputs collapse
    to one id, keeping first-seen order.
    """
    seen: dict[str, None] = {}
    for value in inputs:
        seen.setdefault(value.node_id, None)
    return TracedValue(
        amount=amount,
        source=ComputedSource(node_id=node_id, inputs=tuple(seen)),
        citation=citation,
        unit=unit,
    )


def constant(node_id: str, amount: int, citation: str | None = None) -> TracedValue:
    """A computed terminal with no cited sub-values (table constant, zero line)."""
    return computed(node_id, amount, (), citation)
