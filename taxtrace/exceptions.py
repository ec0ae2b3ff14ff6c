"""Custom exceptions for taxtrace.

Only structural problems are raised. Business-rule edge cases (negative
taxable income, credits larger than tax) are clamped by the rule modules and
reported through ``ComputeResult.warnings`` instead.
"""


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class MissingNodeError(TaxComputationError):
    """Raised when a value is read before any module produced it."""

    def __init__(self, node_id: str, module: str | None = None):
        self.node_id = node_id
        self.module = module
        where = f" (read by {module})" if module else ""
        super().__init__(f"Missing node: {node_id}{where}")


class DuplicateNodeError(TaxComputationError):
    """Raised when two modules (or one module twice) emit the same node id."""

    def __init__(self, node_id: str, module: str, existing_module: str | None = None):
        self.node_id = node_id
        self.module = module
        self.existing_module = existing_module
        owner = f", already emitted by {existing_module}" if existing_module else ""
        super().__init__(f"Duplicate node {node_id} from {module}{owner}")


class ClosureViolationError(TaxComputationError):
    """Raised when a computed value cites an input that is not in the result."""

    def __init__(self, node_id: str, missing_inputs: list[str]):
        self.node_id = node_id
        self.missing_inputs = missing_inputs
        super().__init__(
            f"Node {node_id} cites unknown inputs: {', '.join(missing_inputs)}"
        )


class UnsupportedFilingStatusError(TaxComputationError):
    def __init__(self, filing_status: object, table: str | None = None):
        self.filing_status = filing_status
        self.table = table
        where = f" in {table}" if table else ""
        super().__init__(f"Unsupported filing status{where}: {filing_status!r}")


class UnsupportedTaxYearError(TaxComputationError):
    def __init__(self, tax_year: object, table: str | None = None):
        self.tax_year = tax_year
        self.table = table
        where = f" in {table}" if table else ""
        super().__init__(f"No tables for tax year {tax_year!r}{where}")


class UnsupportedJurisdictionError(TaxComputationError):
    """Raised for a state code with no registered state module."""

    def __init__(self, state_code: str, supported: list[str] | None = None):
        self.state_code = state_code
        self.supported = supported or []
        hint = f" (supported: {', '.join(self.supported)})" if self.supported else ""
        super().__init__(f"Unsupported jurisdiction: {state_code}{hint}")


class UnsupportedCategoryError(TaxComputationError):
    """Raised when a transaction carries a Form 8949 category we cannot place."""

    def __init__(self, transaction_id: str, category: object):
        self.transaction_id = transaction_id
        self.category = category
        super().__init__(
            f"Unsupported Form 8949 category for transaction {transaction_id}: "
            f"{category!r}"
        )
