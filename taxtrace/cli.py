"""Typer CLI interface for taxtrace."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from taxtrace.engines.orchestrator import compute as compute_return
from taxtrace.engines.trace import build_trace, explain as explain_node, format_value, node_label
from taxtrace.exceptions import TaxComputationError
from taxtrace.models.results import ComputeResult
from taxtrace.models.tax_return import TaxReturn
from taxtrace.money import format_dollars
from taxtrace.reports.form8949 import Form8949Generator
from taxtrace.reports.summary import ReturnSummaryGenerator

app = typer.Typer(
    name="taxtrace",
    help="taxtrace: compute a federal and state return and trace every number to its source.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log module execution to stderr"),
) -> None:
    """taxtrace: compute a federal and state return and trace every number to its source."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_return(path: Path) -> TaxReturn:
    if not path.exists():
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return TaxReturn.model_validate_json(path.read_text())
    except ValidationError as exc:
        typer.echo(f"Error: Invalid return {path.name}:\n{exc}", err=True)
        raise typer.Exit(1)


def _run(path: Path) -> ComputeResult:
    tax_return = _load_return(path)
    try:
        return compute_return(tax_return)
    except TaxComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


@app.command()
def compute(
    return_json: Path = typer.Argument(..., help="TaxReturn JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the full ComputeResult as JSON"),
    node: list[str] | None = typer.Option(
        None, "--node", "-n", help="Print only these node ids (repeatable)"
    ),
) -> None:
    """Compute a return and print its summary."""
    result = _run(return_json)

    if node:
        missing = [n for n in node if n not in result]
        if missing:
            typer.echo(f"Error: Unknown node id(s): {', '.join(missing)}", err=True)
            raise typer.Exit(1)
        for node_id in node:
            value = result[node_id]
            typer.echo(f"{node_id}  {node_label(node_id, value)}: {format_value(value)}")
        return

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    typer.echo(ReturnSummaryGenerator().render(result))


@app.command()
def explain(
    return_json: Path = typer.Argument(..., help="TaxReturn JSON file"),
    node_id: str = typer.Argument(..., help="Node id to trace, e.g. scheduleD.line16"),
    as_json: bool = typer.Option(False, "--json", help="Print the trace tree as JSON"),
) -> None:
    """Show how a value was computed, down to the source documents."""
    result = _run(return_json)
    try:
        if as_json:
            typer.echo(build_trace(result, node_id).model_dump_json(indent=2))
        else:
            typer.echo(explain_node(result, node_id))
    except TaxComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


@app.command(name="wash-sales")
def wash_sales(
    return_json: Path = typer.Argument(..., help="TaxReturn JSON file"),
) -> None:
    """List wash-sale matches and the losses they disallow."""
    from rich.console import Console
    from rich.table import Table

    result = _run(return_json)
    console = Console()
    matches = result.wash_sales.matches
    if not matches:
        console.print("No wash sales detected.")
        return

    tbl = Table(title="Wash Sales", show_header=True)
    tbl.add_column("Security", style="cyan")
    tbl.add_column("Loss sale")
    tbl.add_column("Sold")
    tbl.add_column("Replacement")
    tbl.add_column("Acquired")
    tbl.add_column("Disallowed", style="red", justify="right")
    for match in matches:
        tbl.add_row(
            match.symbol,
            match.loss_sale_id,
            match.loss_sale_date.isoformat(),
            match.replacement_id,
            match.replacement_date.isoformat(),
            format_dollars(match.disallowed_amount),
        )
    console.print(tbl)
    console.print(
        f"[bold]Total disallowed:[/bold] {format_dollars(result.wash_sales.total_disallowed)}"
    )


@app.command()
def form8949(
    return_json: Path = typer.Argument(..., help="TaxReturn JSON file"),
) -> None:
    """Print Form 8949 for the (wash-sale adjusted) transactions."""
    result = _run(return_json)
    typer.echo(Form8949Generator().render(list(result.wash_sales.adjusted_transactions)))


if __name__ == "__main__":
    app()
