"""Form 8949 report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from taxtrace.engines.form8949 import group_by_category
from taxtrace.models.reports import Form8949Line, Form8949Section
from taxtrace.models.transactions import CapitalTransaction
from taxtrace.money import format_dollars

TEMPLATE_DIR = Path(__file__).parent / "templates"


class Form8949Generator:
    """Generates Form 8949 from (wash-sale adjusted) capital transactions."""

    def __init__(self) -> None:
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)))
        self.env.filters["dollars"] = format_dollars

    def generate_lines(self, transactions: list[CapitalTransaction]) -> list[Form8949Line]:
        """Convert transactions to Form 8949 lines."""
        return [
            Form8949Line(
                transaction_id=txn.id,
                description=txn.description,
                date_acquired=txn.date_acquired,
                date_sold=txn.date_sold,
                proceeds=txn.proceeds,
                cost_basis=txn.adjusted_basis,
                adjustment_code=txn.adjustment_code,
                adjustment_amount=txn.adjustment_amount,
                gain_loss=txn.gain_loss,
                category=txn.category,
            )
            for txn in transactions
        ]

    def generate_sections(self, transactions: list[CapitalTransaction]) -> list[Form8949Section]:
        """Group lines by category; categories with no transactions are omitted."""
        sections = []
        for category, group in group_by_category(transactions).items():
            if not group:
                continue
            lines = self.generate_lines(group)
            sections.append(
                Form8949Section(
                    category=category,
                    lines=lines,
                    total_proceeds=sum(line.proceeds for line in lines),
                    total_basis=sum(line.cost_basis for line in lines),
                    total_adjustment=sum(line.adjustment_amount for line in lines),
                    total_gain_loss=sum(line.gain_loss for line in lines),
                )
            )
        return sections

    def render(self, transactions: list[CapitalTransaction]) -> str:
        """Render Form 8949 report using Jinja2 template."""
        template = self.env.get_template("form8949.txt")
        return template.render(sections=self.generate_sections(transactions))
