"""CLI for stackcalc.

Usage:
    python -m stackcalc calc "3+4*2"                 # Integer expression
    python -m stackcalc calc "|2-7|*3" --trace       # ...with the stack trace
    python -m stackcalc define a 2,1,3,0             # Store a polynomial
    python -m stackcalc show a --latex               # Print it
    python -m stackcalc poly "a*(b+c)"               # Polynomial expression
    python -m stackcalc at a 4                       # Evaluate a at x=4
    python -m stackcalc derive a                     # Derivative
    python -m stackcalc names                        # List registry slots
    python -m stackcalc clear                        # Drop all polynomials
    python -m stackcalc shell                        # Interactive session
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from stackcalc.environment import load_settings
from stackcalc.errors import CalcError
from stackcalc.render import render_output, render_registry, render_trace
from stackcalc.service import CalculatorService
from stackcalc.session import Session
from stackcalc.shell import Shell

app = typer.Typer(
    name="stackcalc",
    help="Integer and polynomial expression calculator",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


@dataclass
class _Context:
    service: CalculatorService
    state_path: Optional[Path]

    def save(self) -> None:
        """Persist the registry if a session file is in use."""
        if self.state_path is not None:
            Session.capture(self.service.registry).save(self.state_path)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn a CalcError into a red message on stderr and exit status 1."""
    try:
        yield
    except CalcError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)} [dim]({e.code.value})[/dim]")
        raise typer.Exit(1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    state: Optional[Path] = typer.Option(None, "--state", help="Session file (default: STACKCALC_STATE or ~/.stackcalc/session.json)"),
    no_state: bool = typer.Option(False, "--no-state", help="Do not load or save a session file"),
    capacity: Optional[int] = typer.Option(None, "--capacity", min=1, help="Initial evaluator stack capacity"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Integer and polynomial expression calculator."""
    _setup_logging(verbose)
    try:
        settings = load_settings()
    except ValueError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    service = CalculatorService(settings)
    with _reported_errors():
        service.init(capacity)

        state_path = None if no_state else (state or settings.state_path)
        if state_path is not None:
            session = Session.load(state_path)
            if session:
                session.restore(service.registry)

    ctx.obj = _Context(service=service, state_path=state_path)


@app.command("calc")
def cmd_calc(
    ctx: typer.Context,
    expression: str = typer.Argument(help="Integer expression, e.g. '(1+2)*3' or '|3-8|'"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every stack push/pop"),
) -> None:
    """Evaluate an integer expression."""
    c: _Context = ctx.obj
    with _reported_errors():
        result = c.service.evaluate_expression(expression)
    console.print(str(result), highlight=False)
    if trace:
        render_trace(c.service.operation_history(), err_console)


@app.command("define")
def cmd_define(
    ctx: typer.Context,
    name: str = typer.Argument(help="Polynomial name, e.g. 'a'"),
    spec: str = typer.Argument(help="Coefficient/exponent pairs: 'c1,e1,c2,e2,...'"),
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Reject malformed specs instead of storing zero"),
) -> None:
    """Store a polynomial under a name (overwrites)."""
    c: _Context = ctx.obj
    with _reported_errors():
        c.service.define_polynomial(name, spec, strict=strict)
        standard = c.service.polynomial_to_string(name)
    c.save()
    console.print(f"{escape(name)} = {standard}", highlight=False)


@app.command("show")
def cmd_show(
    ctx: typer.Context,
    name: str = typer.Argument(help="Polynomial name"),
    latex: bool = typer.Option(False, "--latex", "-l", help="Also print the LaTeX form"),
) -> None:
    """Print a stored polynomial."""
    c: _Context = ctx.obj
    with _reported_errors():
        output = c.service.polynomial_with_latex(name)
    render_output(name, output, console, latex=latex)


@app.command("poly")
def cmd_poly(
    ctx: typer.Context,
    expression: str = typer.Argument(help="Polynomial expression, e.g. 'a+b*c'"),
    latex: bool = typer.Option(False, "--latex", "-l", help="Also print the LaTeX form"),
) -> None:
    """Evaluate an expression over stored polynomials."""
    c: _Context = ctx.obj
    with _reported_errors():
        output = c.service.evaluate_polynomial_expression_with_latex(expression)
    render_output(expression, output, console, latex=latex)


@app.command("at")
def cmd_at(
    ctx: typer.Context,
    name: str = typer.Argument(help="Polynomial name"),
    x: int = typer.Argument(help="Integer value of x (use '--' before negative values)"),
) -> None:
    """Evaluate a stored polynomial at x."""
    c: _Context = ctx.obj
    with _reported_errors():
        value = c.service.evaluate_polynomial_at(name, x)
    console.print(str(value), highlight=False)


@app.command("derive")
def cmd_derive(
    ctx: typer.Context,
    name: str = typer.Argument(help="Polynomial name"),
    latex: bool = typer.Option(False, "--latex", "-l", help="Also print the LaTeX form"),
) -> None:
    """Print the derivative of a stored polynomial."""
    c: _Context = ctx.obj
    with _reported_errors():
        output = c.service.derivative_with_latex(name)
    render_output(f"{name}'", output, console, latex=latex)


@app.command("names")
def cmd_names(ctx: typer.Context) -> None:
    """List every registry slot."""
    c: _Context = ctx.obj
    registry = c.service.registry
    render_registry(registry.snapshot(), registry.alphabet, console)


@app.command("clear")
def cmd_clear(ctx: typer.Context) -> None:
    """Remove every stored polynomial."""
    c: _Context = ctx.obj
    c.service.clear_all_polynomials()
    c.save()
    console.print("All polynomials cleared.")


@app.command("shell")
def cmd_shell(ctx: typer.Context) -> None:
    """Interactive session sharing one evaluator and registry."""
    c: _Context = ctx.obj
    Shell(c.service, console, on_change=c.save).run()


if __name__ == "__main__":
    app()
