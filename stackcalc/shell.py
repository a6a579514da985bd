"""Interactive shell over one CalculatorService.

Each input line is a command followed by its arguments:
    calc 3+4*2        define a 2,1,3,0     show a        latex a
    poly a+b*c        at a 2               derive a      names
    trace             clear                help          quit
Errors are printed and the loop continues.
"""

from __future__ import annotations

import shlex
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from stackcalc.errors import CalcError
from stackcalc.render import render_output, render_registry, render_trace
from stackcalc.service import CalculatorService

PROMPT = "stackcalc> "

HELP = """\
calc EXPR         evaluate an integer expression (+ - * / ^ ( ) |x|)
define NAME SPEC  store "c1,e1,c2,e2,..." under NAME
show NAME         print a stored polynomial
latex NAME        print a stored polynomial with its LaTeX form
poly EXPR         evaluate a polynomial expression, e.g. a+b*c
at NAME X         evaluate a stored polynomial at integer X
derive NAME       print the derivative of a stored polynomial
names             list every registry slot
trace             show stack operations of the last calc
clear             remove every stored polynomial
quit              leave the shell"""


class Shell:
    """Line-oriented command loop.

    on_change is called after any command that modifies the registry, so the
    CLI can persist the session.
    """

    def __init__(
        self,
        service: CalculatorService,
        console: Console,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.service = service
        self.console = console
        self.on_change = on_change
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "calc": self._calc,
            "define": self._define,
            "show": self._show,
            "latex": self._latex,
            "poly": self._poly,
            "at": self._at,
            "derive": self._derive,
            "names": self._names,
            "trace": self._trace,
            "clear": self._clear,
            "help": self._help,
        }

    def execute(self, line: str) -> bool:
        """Run one line. Returns False when the shell should exit."""
        try:
            words = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            return True
        if not words:
            return True

        command, args = words[0].lower(), words[1:]
        if command in ("quit", "exit"):
            return False

        handler = self._commands.get(command)
        if handler is None:
            self.console.print(f"[red]Unknown command:[/red] {escape(command)} (try 'help')")
            return True

        try:
            handler(args)
        except CalcError as e:
            self.console.print(f"[red]Error:[/red] {escape(e.message)} [dim]({e.code.value})[/dim]")
        except _UsageError as e:
            self.console.print(f"[yellow]Usage:[/yellow] {escape(str(e))}")
        return True

    def run(self) -> None:
        """Read lines until quit or end of input."""
        self.console.print("stackcalc shell. Type 'help' for commands, 'quit' to leave.")
        while True:
            try:
                line = self.console.input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                return
            if not self.execute(line):
                return

    # --- commands ---

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()

    def _calc(self, args: list[str]) -> None:
        if not args:
            raise _UsageError("calc EXPR")
        expr = " ".join(args)
        self.console.print(str(self.service.evaluate_expression(expr)))

    def _define(self, args: list[str]) -> None:
        if len(args) < 2:
            raise _UsageError("define NAME c1,e1,c2,e2,...")
        name, spec = args[0], "".join(args[1:])
        self.service.define_polynomial(name, spec)
        self.console.print(f"{escape(name)} = {self.service.polynomial_to_string(name)}")
        self._changed()

    def _show(self, args: list[str]) -> None:
        if len(args) != 1:
            raise _UsageError("show NAME")
        render_output(args[0], self.service.polynomial_with_latex(args[0]), self.console)

    def _latex(self, args: list[str]) -> None:
        if len(args) != 1:
            raise _UsageError("latex NAME")
        render_output(args[0], self.service.polynomial_with_latex(args[0]), self.console, latex=True)

    def _poly(self, args: list[str]) -> None:
        if not args:
            raise _UsageError("poly EXPR")
        expr = "".join(args)
        output = self.service.evaluate_polynomial_expression_with_latex(expr)
        render_output(expr, output, self.console, latex=True)

    def _at(self, args: list[str]) -> None:
        if len(args) != 2:
            raise _UsageError("at NAME X")
        try:
            x = int(args[1])
        except ValueError:
            raise _UsageError(f"X must be an integer, got {args[1]!r}") from None
        self.console.print(str(self.service.evaluate_polynomial_at(args[0], x)))

    def _derive(self, args: list[str]) -> None:
        if len(args) != 1:
            raise _UsageError("derive NAME")
        render_output(f"{args[0]}'", self.service.derivative_with_latex(args[0]), self.console, latex=True)

    def _names(self, args: list[str]) -> None:
        render_registry(self.service.registry.snapshot(), self.service.registry.alphabet, self.console)

    def _trace(self, args: list[str]) -> None:
        render_trace(self.service.operation_history(), self.console)

    def _clear(self, args: list[str]) -> None:
        self.service.clear_all_polynomials()
        self.console.print("All polynomials cleared.")
        self._changed()

    def _help(self, args: list[str]) -> None:
        self.console.print(escape(HELP), highlight=False)


class _UsageError(Exception):
    """Wrong number or shape of shell command arguments."""
