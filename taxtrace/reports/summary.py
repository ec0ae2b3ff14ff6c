"""Return summary report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from taxtrace.engines.trace import format_value, node_label
from taxtrace.models.reports import StateSummary, SummaryLine
from taxtrace.models.results import ComputeResult
from taxtrace.money import format_dollars

TEMPLATE_DIR = Path(__file__).parent / "templates"

FEDERAL_LINES = (
    "form1040.line1z",
    "form1040.line2b",
    "form1040.line3a",
    "form1040.line3b",
    "form1040.line4b",
    "form1040.line5b",
    "form1040.line7",
    "form1040.line8",
    "form1040.line9",
    "form1040.line11",
    "form1040.line12",
    "form1040.line13",
    "form1040.line15",
    "form1040.line16",
    "form1040.line19",
    "form1040.line24",
    "form1040.line25d",
    "form1040.line33",
    "form1040.line34",
    "form1040.line37",
)

CAPITAL_LINES = (
    "scheduleD.line7",
    "scheduleD.line15",
    "scheduleD.line16",
    "scheduleD.line21",
    "scheduleD.carryforward",
)

STATE_LINES = (
    "apportionmentRatio",
    "federalAgi",
    "taxableIncome",
    "totalTax",
    "withholding",
    "refund",
    "amountOwed",
)


class ReturnSummaryGenerator:
    """Generates a human-readable summary of a computed return."""

    def __init__(self) -> None:
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)))
        self.env.filters["dollars"] = format_dollars

    def _lines(self, result: ComputeResult, node_ids) -> list[SummaryLine]:
        lines = []
        for node_id in node_ids:
            value = result.get(node_id)
            if value is None:
                continue
            lines.append(
                SummaryLine(
                    node_id=node_id,
                    label=node_label(node_id, value),
                    amount=value.amount,
                    unit=value.unit,
                )
            )
        return lines

    def federal_lines(self, result: ComputeResult) -> list[SummaryLine]:
        return self._lines(result, FEDERAL_LINES)

    def capital_lines(self, result: ComputeResult) -> list[SummaryLine]:
        return self._lines(result, CAPITAL_LINES)

    def state_summaries(self, result: ComputeResult) -> list[StateSummary]:
        summaries = []
        for module in result.executed_modules:
            if not module.startswith("state."):
                continue
            prefix = module.removeprefix("state.")
            summaries.append(
                StateSummary(
                    code=prefix.upper(),
                    lines=self._lines(result, [f"{prefix}.{name}" for name in STATE_LINES]),
                )
            )
        return summaries

    def render(self, result: ComputeResult) -> str:
        """Render return summary report."""
        template = self.env.get_template("return_summary.txt")
        return template.render(
            result=result,
            federal=self.federal_lines(result),
            capital=self.capital_lines(result),
            states=self.state_summaries(result),
            wash_sales=result.wash_sales,
            fmt=lambda line: format_value(result.values[line.node_id]),
        )
