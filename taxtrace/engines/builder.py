"""Node store and per-module result builder.

The orchestrator owns one ``ValueStore`` per run. Each rule module gets a
``ModuleBuilder`` that reads upstream values through the store (recording
what it read) and adds its own values. Merging a finished module back into
the store is where duplicate node ids are caught.
"""

import logging
from collections.abc import Sequence

from taxtrace.exceptions import ClosureViolationError, DuplicateNodeError, MissingNodeError
from taxtrace.models.enums import ValueUnit
from taxtrace.models.results import ModuleResult
from taxtrace.models.traced import TracedValue, computed

logger = logging.getLogger(__name__)


class ValueStore:
    """Append-only map of node id -> TracedValue for one compute run."""

    def __init__(self) -> None:
        self._values: dict[str, TracedValue] = {}
        self._owners: dict[str, str] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, node_id: str, module: str | None = None) -> TracedValue:
        try:
            return self._values[node_id]
        except KeyError:
            raise MissingNodeError(node_id, module) from None

    def owner(self, node_id: str) -> str | None:
        return self._owners.get(node_id)

    def merge(self, result: ModuleResult) -> None:
        for node_id, value in result.values.items():
            if node_id in self._values:
                raise DuplicateNodeError(node_id, result.module, self._owners[node_id])
            self._values[node_id] = value
            self._owners[node_id] = result.module
        logger.debug("Merged %d values from %s", len(result.values), result.module)

    def snapshot(self) -> dict[str, TracedValue]:
        return dict(self._values)


class ModuleBuilder:
    """Collects one rule module's values, reads, and warnings."""

    def __init__(self, name: str, store: ValueStore) -> None:
        self.name = name
        self._store = store
        self._values: dict[str, TracedValue] = {}
        self._consumed: dict[str, None] = {}
        self.warnings: list[str] = []

    def read(self, node_id: str) -> TracedValue:
        """Read a value produced earlier in this module or by an upstream module."""
        if node_id in self._values:
            return self._values[node_id]
        value = self._store.get(node_id, self.name)
        self._consumed.setdefault(node_id, None)
        return value

    def has(self, node_id: str) -> bool:
        return node_id in self._values or node_id in self._store

    def add(self, value: TracedValue) -> TracedValue:
        node_id = value.node_id
        if node_id in self._values:
            raise DuplicateNodeError(node_id, self.name, self.name)
        if node_id in self._store:
            raise DuplicateNodeError(node_id, self.name, self._store.owner(node_id))
        for input_id in value.inputs:
            if input_id not in self._values and input_id not in self._store:
                raise MissingNodeError(input_id, self.name)
        self._values[node_id] = value
        return value

    def compute(
        self,
        node_id: str,
        amount: int,
        inputs: Sequence[TracedValue],
        citation: str | None = None,
        unit: ValueUnit = ValueUnit.CENTS,
    ) -> TracedValue:
        return self.add(computed(node_id, amount, inputs, citation, unit))

    def constant(self, node_id: str, amount: int, citation: str | None = None) -> TracedValue:
        return self.compute(node_id, amount, (), citation)

    def warn(self, message: str) -> None:
        logger.debug("%s: %s", self.name, message)
        self.warnings.append(message)

    def build(self) -> ModuleResult:
        return ModuleResult(
            module=self.name,
            values=dict(self._values),
            consumed=tuple(self._consumed),
            warnings=tuple(self.warnings),
        )


def validate_closure(values: dict[str, TracedValue]) -> None:
    """Raise ClosureViolationError if any computed value cites an unknown node."""
    for node_id, value in values.items():
        missing = [i for i in value.inputs if i not in values]
        if missing:
            raise ClosureViolationError(node_id, missing)
