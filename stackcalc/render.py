"""Rich rendering for stackcalc results.

Tables for the polynomial registry and for the push/pop trace of an integer
evaluation, plus one-line result formatting shared by the CLI and the shell.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stackcalc.models import PolynomialOutput, StackAction, StackKind, StackOperation
from stackcalc.polynomial import Polynomial

_STACK_STYLES = {StackKind.NUM: "cyan", StackKind.SYM: "magenta"}


def _fmt_value(op: StackOperation) -> str:
    """Quote symbols so '-' and '|' read as characters, not table furniture."""
    if op.stack == StackKind.SYM:
        return f"'{op.value}'"
    return str(op.value)


def render_trace(operations: list[StackOperation], console: Console) -> None:
    """Render the operation log of one evaluation as a table."""
    if not operations:
        console.print("[yellow]No stack operations recorded.[/yellow]")
        return

    table = Table(title="Stack operations", show_header=True, header_style="bold")
    table.add_column("t", justify="right", style="dim")
    table.add_column("Stack", min_width=6)
    table.add_column("Action", min_width=6)
    table.add_column("Value", justify="right")

    for op in operations:
        style = _STACK_STYLES[op.stack]
        action = "[green]push[/green]" if op.action == StackAction.PUSH else "[red]pop[/red]"
        table.add_row(
            str(op.timestamp),
            f"[{style}]{op.stack.value}[/{style}]",
            action,
            escape(_fmt_value(op)),
        )

    console.print(table)


def render_registry(polynomials: dict[str, Polynomial], alphabet: str, console: Console) -> None:
    """Render every slot of the registry, defined or not."""
    table = Table(title="Polynomials", show_header=True, header_style="bold")
    table.add_column("Name", style="green")
    table.add_column("Terms", justify="right")
    table.add_column("Standard")
    table.add_column("Readable")

    for name in alphabet:
        poly = polynomials.get(name)
        if poly is None:
            table.add_row(name, "--", "[dim]undefined[/dim]", "")
            continue
        table.add_row(
            name,
            str(poly.term_count()),
            poly.format_standard(),
            escape(poly.format_readable()),
        )

    console.print(table)


def render_output(label: str, output: PolynomialOutput, console: Console, latex: bool = False) -> None:
    """Print a polynomial result: standard form, plus LaTeX when asked."""
    console.print(f"[bold]{escape(label)}[/bold] = {output.standard}")
    if latex:
        console.print(f"  latex: {escape(output.latex)}", highlight=False)
