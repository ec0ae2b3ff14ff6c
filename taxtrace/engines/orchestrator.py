"""Compute orchestrator.

``compute`` runs every rule module in a fixed order over one immutable
TaxReturn and returns a ComputeResult. It keeps no state between calls;
re-running over an unchanged return yields a byte-identical result.
"""

import logging

from taxtrace.engines.brackets import check_supported
from taxtrace.engines.builder import ValueStore, validate_closure
from taxtrace.engines.credits import compute_child_tax_credit
from taxtrace.engines.form1040 import compute_income, compute_payments, compute_tax
from taxtrace.engines.form8949 import compute_form8949
from taxtrace.engines.qbi import compute_qbi
from taxtrace.engines.schedule1 import compute_schedule1
from taxtrace.engines.schedule_b import compute_schedule_b
from taxtrace.engines.schedule_d import compute_schedule_d
from taxtrace.engines.sources import compute_sources
from taxtrace.engines.states import get_state_module
from taxtrace.engines.wash_sale import compute_wash_sales
from taxtrace.models.results import ComputeResult, ModuleResult, WashSaleResult
from taxtrace.models.tax_return import TaxReturn

logger = logging.getLogger(__name__)

FEDERAL_MODULES = (
    compute_schedule_d,
    compute_schedule_b,
    compute_schedule1,
    compute_income,
    compute_qbi,
    compute_tax,
    compute_child_tax_credit,
    compute_payments,
)


def compute(tax_return: TaxReturn) -> ComputeResult:
    """Evaluate the whole rule network for one return.

    Raises:
        UnsupportedTaxYearError, UnsupportedFilingStatusError,
        UnsupportedJurisdictionError: for inputs no table covers.
        MissingNodeError, DuplicateNodeError, ClosureViolationError:
        on a structural fault in the rule modules.
    """
    check_supported(tax_return.tax_year, tax_return.filing_status)
    states = [(get_state_module(cfg.state_code), cfg) for cfg in tax_return.state_returns]

    store = ValueStore()
    modules: dict[str, ModuleResult] = {}

    def run(result: ModuleResult) -> None:
        store.merge(result)
        modules[result.module] = result
        logger.debug("Ran %s: %d values", result.module, len(result.values))

    run(compute_sources(tax_return, store))

    if tax_return.detect_wash_sales:
        wash_module, wash_sales = compute_wash_sales(tax_return, store)
        run(wash_module)
    else:
        wash_sales = WashSaleResult(adjusted_transactions=tax_return.capital_transactions)

    run(compute_form8949(wash_sales.adjusted_transactions, store))
    for module in FEDERAL_MODULES:
        run(module(tax_return, store))
    for state, cfg in states:
        run(state.compute(tax_return, cfg, store))

    values = store.snapshot()
    validate_closure(values)
    warnings = tuple(w for m in modules.values() for w in m.warnings)
    logger.info(
        "Computed %d values in %d modules (%d warnings)", len(values), len(modules), len(warnings)
    )
    return ComputeResult(
        tax_year=tax_return.tax_year,
        modules=modules,
        values=values,
        wash_sales=wash_sales,
        executed_modules=tuple(modules),
        warnings=warnings,
    )
