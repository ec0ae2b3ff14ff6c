"""Trace builder: walk a ComputeResult back to its source documents.

Traces are built on demand from the flat node map and never stored. The
graph is acyclic by construction (a module can only cite values that
already exist), so recursion always bottoms out at leaves.
"""

import re

from taxtrace.exceptions import ClosureViolationError, MissingNodeError
from taxtrace.models.enums import ValueUnit
from taxtrace.models.results import ComputeResult, ComputeTrace
from taxtrace.models.traced import RATIO_SCALE, DocumentSource, TracedValue, UserEntrySource
from taxtrace.money import format_dollars

NODE_LABELS: dict[str, str] = {
    "form1040.line1a": "Wages (W-2 box 1)",
    "form1040.line1z": "Total wages",
    "form1040.line2a": "Tax-exempt interest",
    "form1040.line2b": "Taxable interest",
    "form1040.line3a": "Qualified dividends",
    "form1040.line3b": "Ordinary dividends",
    "form1040.line4a": "IRA distributions",
    "form1040.line4b": "Taxable IRA distributions",
    "form1040.line5a": "Pensions and annuities",
    "form1040.line5b": "Taxable pensions and annuities",
    "form1040.line7": "Capital gain or (loss)",
    "form1040.line8": "Additional income from Schedule 1",
    "form1040.line9": "Total income",
    "form1040.line11": "Adjusted gross income",
    "form1040.line12": "Standard or itemized deduction",
    "form1040.standardDeduction": "Standard deduction",
    "form1040.line13": "Qualified business income deduction",
    "form1040.line14": "Total deductions",
    "form1040.line15": "Taxable income",
    "form1040.line16": "Tax",
    "form1040.line18": "Tax before credits",
    "form1040.line19": "Child tax credit / credit for other dependents",
    "form1040.line21": "Total nonrefundable credits",
    "form1040.line22": "Tax after credits",
    "form1040.line24": "Total tax",
    "form1040.line25a": "Withholding from W-2s",
    "form1040.line25b": "Withholding from 1099s",
    "form1040.line25d": "Total withholding",
    "form1040.line26": "Estimated tax payments",
    "form1040.line28": "Additional child tax credit",
    "form1040.line32": "Total other payments and refundable credits",
    "form1040.line33": "Total payments",
    "form1040.line34": "Overpaid",
    "form1040.line37": "Amount you owe",
    "scheduleA.line3": "Medical expense floor (7.5% of AGI)",
    "scheduleA.line4": "Deductible medical expenses",
    "scheduleA.line7": "State and local taxes (capped)",
    "scheduleA.line8a": "Home mortgage interest",
    "scheduleA.line14": "Gifts to charity",
    "scheduleA.line16": "Other itemized deductions",
    "scheduleA.line17": "Total itemized deductions",
    "scheduleB.line4": "Total interest",
    "scheduleB.line6": "Total ordinary dividends",
    "scheduleB.required": "Schedule B required",
    "schedule1.line3": "Business income",
    "schedule1.line10": "Total additional income",
    "scheduleD.line1a": "Short-term totals, box A",
    "scheduleD.line1b": "Short-term totals, box B",
    "scheduleD.line6": "Short-term capital loss carryover",
    "scheduleD.line7": "Net short-term capital gain or (loss)",
    "scheduleD.line8a": "Long-term totals, box D",
    "scheduleD.line8b": "Long-term totals, box E",
    "scheduleD.line13": "Capital gain distributions",
    "scheduleD.line14": "Long-term capital loss carryover",
    "scheduleD.line15": "Net long-term capital gain or (loss)",
    "scheduleD.line16": "Combined net capital gain or (loss)",
    "scheduleD.line21": "Allowed capital gain or (loss)",
    "scheduleD.carryforward": "Capital loss carryforward",
    "form8995.taxableIncomeBeforeQbi": "Taxable income before QBI deduction",
    "form8995.totalQbi": "Total qualified business income",
    "form8995.threshold": "QBI threshold",
    "form8995.phaseInFactor": "Phase-in factor",
    "form8995.qbiComponent": "QBI component",
    "form8995.incomeLimitation": "Income limitation (20% of taxable income)",
    "form8995.deduction": "QBI deduction",
    "qdcg.netCapitalGain": "Net capital gain",
    "qdcg.preferentialIncome": "Income taxed at capital gain rates",
    "qdcg.ordinaryIncome": "Income taxed at ordinary rates",
    "qdcg.ordinaryTax": "Tax on ordinary income",
    "qdcg.preferentialTax": "Tax on qualified dividends and capital gains",
    "qdcg.regularTax": "Tax on all taxable income at ordinary rates",
    "ctc.qualifyingChildren": "Qualifying children",
    "ctc.otherDependents": "Other dependents",
    "ctc.initialCredit": "Child tax credit before phase-out",
    "ctc.phaseOut": "Phase-out reduction",
    "ctc.creditAfterPhaseOut": "Credit after phase-out",
    "ctc.nonRefundable": "Nonrefundable child tax credit",
    "ctc.additional": "Additional child tax credit",
}

STATE_LABELS: dict[str, str] = {
    "apportionmentRatio": "Residency apportionment ratio",
    "federalAgi": "Federal AGI",
    "additions": "State additions",
    "subtractions": "State subtractions",
    "agi": "State AGI",
    "baseIncome": "Base income",
    "standardDeduction": "State standard deduction",
    "itemizedDeductions": "State itemized deductions",
    "deduction": "State deduction",
    "exemptionAllowance": "Exemption allowance",
    "netIncome": "Net income",
    "taxableIncome": "State taxable income",
    "tax": "State tax",
    "exemptionCredits": "Exemption credits",
    "taxAfterExemptions": "Tax after exemption credits",
    "mentalHealthTax": "Mental health services tax",
    "rentersCredit": "Renter's credit",
    "taxAfterCredits": "Tax after credits",
    "fullYearTax": "Tax before apportionment",
    "totalTax": "Total state tax",
    "withholding": "State withholding",
    "refund": "State refund",
    "amountOwed": "State amount owed",
}

_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^form8949\.([ABDE])\.(\w+)$"), "Form 8949 box {0} {1}"),
    (re.compile(r"^washSale\.(.+)\.disallowed$"), "Wash sale loss disallowed ({0})"),
    (re.compile(r"^washSale\.(.+)\.basis$"), "Adjusted basis after wash sale ({0})"),
    (re.compile(r"^washSale\.(.+)\.gainLoss$"), "Gain or loss after wash sale ({0})"),
    (re.compile(r"^form8995\.(.+)\.tentative$"), "20% of QBI ({0})"),
    (re.compile(r"^form8995\.(.+)\.wageLimitation$"), "W-2 wage / UBIA limitation ({0})"),
    (re.compile(r"^form8995\.(.+)\.deductible$"), "Deductible QBI ({0})"),
]


def node_label(node_id: str, value: TracedValue | None = None) -> str:
    """Human-readable label for a node id."""
    if node_id in NODE_LABELS:
        return NODE_LABELS[node_id]
    for pattern, template in _PATTERNS:
        match = pattern.match(node_id)
        if match:
            return template.format(*match.groups())
    state, _, name = node_id.partition(".")
    if len(state) == 2 and name in STATE_LABELS:
        return f"{state.upper()} {STATE_LABELS[name]}"
    if value is not None:
        source = value.source
        if isinstance(source, (DocumentSource, UserEntrySource)) and source.description:
            return source.description
    return node_id


def format_value(value: TracedValue) -> str:
    if value.unit == ValueUnit.RATIO:
        return f"{value.amount / RATIO_SCALE:.6f}"
    if value.unit == ValueUnit.FLAG:
        return "yes" if value.amount else "no"
    if value.unit == ValueUnit.COUNT:
        return str(value.amount)
    return format_dollars(value.amount)


def _lookup(result: ComputeResult, node_id: str) -> TracedValue:
    try:
        return result.values[node_id]
    except KeyError:
        raise MissingNodeError(node_id, "trace") from None


def build_trace(result: ComputeResult, node_id: str) -> ComputeTrace:
    """Expand ``node_id`` into a tree of the values it was computed from."""
    value = _lookup(result, node_id)
    return ComputeTrace(
        node_id=node_id,
        label=node_label(node_id, value),
        output=value,
        inputs=[build_trace(result, input_id) for input_id in value.inputs],
        citation=value.citation,
    )


def _render(trace: ComputeTrace, depth: int, lines: list[str]) -> None:
    value = trace.output
    if isinstance(value.source, DocumentSource):
        origin = f"[{value.source.ref}]"
    elif isinstance(value.source, UserEntrySource):
        origin = f"[{value.source.ref}, user entry]"
    else:
        origin = f"({trace.node_id})"
    citation = f" - {trace.citation}" if trace.citation else ""
    lines.append(f"{'  ' * depth}{trace.label}: {format_value(value)} {origin}{citation}")
    for child in trace.inputs:
        _render(child, depth + 1, lines)


def explain(result: ComputeResult, node_id: str) -> str:
    """Indented text rendering of a node's trace."""
    lines: list[str] = []
    _render(build_trace(result, node_id), 0, lines)
    return "\n".join(lines)


def flatten_trace(result: ComputeResult, node_id: str) -> list[str]:
    """Every distinct node ``node_id`` depends on (itself included), leaves first."""
    ordered: dict[str, None] = {}

    def visit(current: str) -> None:
        if current in ordered:
            return
        for input_id in _lookup(result, current).inputs:
            visit(input_id)
        ordered[current] = None

    visit(node_id)
    return list(ordered)


def leaf_sources(result: ComputeResult, node_id: str) -> list[TracedValue]:
    """The document fields and user entries ``node_id`` ultimately rests on."""
    leaves = []
    for current in flatten_trace(result, node_id):
        value = result.values[current]
        if value.is_leaf:
            leaves.append(value)
    return leaves


def check_topological_order(result: ComputeResult) -> None:
    """Raise ClosureViolationError if any value cites one that comes after it."""
    seen: set[str] = set()
    for node_id, value in result.values.items():
        late = [i for i in value.inputs if i not in seen]
        if late:
            raise ClosureViolationError(node_id, late)
        seen.add(node_id)
