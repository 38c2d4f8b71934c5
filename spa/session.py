"""Command dispatch for the interactive prover.

A Session owns one prover and turns command lines into calls on it,
printing results through a rich Console. Bad commands, parse errors and
prover precondition errors print "error: <message>" and change nothing.
"""

from __future__ import annotations

import logging
from typing import Callable

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from spa.core.config import DEFAULT_CONFIG, SpaConfig
from spa.core.objects import SymbolIds
from spa.parsing.parser import parse_text
from spa.prover.engine import Mode, TheoremProver
from spa.prover.errors import ProverError
from spa.reports.proof_export import proof_to_markdown
from spa.reports.render import (
    render_givens,
    render_options,
    render_proof_tree,
    render_status_table,
)

logger = logging.getLogger(__name__)

HELP = """\
help         show this help message
quit, exit   quit the program
prove S      set the theorem to prove
dec [n]      list decompositions of the current goal, or apply option n
ded [n]      list deductions from the givens, or apply option n
triv         prove the current goal as trivial
just [text]  prove the current goal with a justification
stat         show the overall status
thm          show the current theorem
given        show the givens in scope
goal         show the current goal
tree         show the entire proof tree
print        show the formal proof

relations    = != < <= > >= s= s!= sube sub in notin div notdiv
             sup and supe are negations: (sup A B) means A is not a subset
             of B, and (supe A B) means A is not a proper subset of B"""


class CommandError(Exception):
    """A command line that cannot be carried out."""


class Session:
    """One prover plus the console it reports to."""

    def __init__(
        self,
        console: Console | None = None,
        config: SpaConfig = DEFAULT_CONFIG,
    ) -> None:
        self.console = console if console is not None else Console()
        self.config = config
        self.ids = SymbolIds()
        self.prover = TheoremProver(ids=self.ids, config=config)
        self.error_count = 0
        self.last_error: str | None = None
        self._commands: dict[str, Callable[[str], None]] = {
            "help": self._help,
            "prove": self._prove,
            "dec": self._decompose,
            "ded": self._deduce,
            "triv": self._trivial,
            "just": self._justify,
            "stat": self._status,
            "thm": self._theorem,
            "given": self._givens,
            "givens": self._givens,
            "goal": self._goal,
            "tree": self._tree,
            "print": self._print,
        }

    def dispatch(self, line: str) -> bool:
        """Run one command line. Returns True when the session should end."""
        cmd, _, rest = line.strip().partition(" ")
        rest = rest.strip()
        self.last_error = None
        if not cmd:
            return False
        if cmd in ("quit", "exit"):
            if rest:
                self._error("invalid command")
                return False
            return True
        handler = self._commands.get(cmd)
        try:
            if handler is None:
                raise CommandError("invalid command")
            handler(rest)
        except (CommandError, ProverError) as e:
            logger.debug("command %r rejected: %s", cmd, e)
            self._error(str(e))
        return False

    # ---- Commands ----

    def _help(self, rest: str) -> None:
        self._no_args(rest)
        self.console.print(HELP, markup=False, highlight=False)

    def _prove(self, rest: str) -> None:
        if not rest:
            raise CommandError("expecting theorem")
        result = parse_text(rest, ids=self.ids, config=self.config)
        if not result.ok:
            raise CommandError(result.error.message)
        self.prover.set_theorem(result.sentence)
        self._show_goal()

    def _decompose(self, rest: str) -> None:
        if not rest:
            options = self.prover.decomposition_options()
            render_options("decompositions", [o.describe() for o in options], self.console)
            return
        self.prover.decompose(self._index(rest))
        self._show_goal()

    def _deduce(self, rest: str) -> None:
        if not rest:
            options = self.prover.deduction_options()
            render_options("deductions", [o.describe() for o in options], self.console)
            return
        given = self.prover.deduce(self._index(rest))
        self.console.print(Text(f"new given: {given}"))

    def _trivial(self, rest: str) -> None:
        self._no_args(rest)
        self.prover.trivial()
        self._show_goal()

    def _justify(self, rest: str) -> None:
        self.prover.justify(rest)
        self._show_goal()

    def _status(self, rest: str) -> None:
        self._no_args(rest)
        self._require_theorem()
        render_status_table(self.prover, self.console)

    def _theorem(self, rest: str) -> None:
        self._no_args(rest)
        self._require_theorem()
        self.console.print(Text(f"theorem: {self.prover.theorem()}"))

    def _givens(self, rest: str) -> None:
        self._no_args(rest)
        render_givens(self.prover, self.console)

    def _goal(self, rest: str) -> None:
        self._no_args(rest)
        self.prover.current_goal()
        self._show_goal()

    def _tree(self, rest: str) -> None:
        self._no_args(rest)
        self._require_theorem()
        render_proof_tree(self.prover, self.console)

    def _print(self, rest: str) -> None:
        self._no_args(rest)
        self._require_theorem()
        self.console.print(Markdown(proof_to_markdown(self.prover)))

    # ---- Helpers ----

    def _show_goal(self) -> None:
        if self.prover.mode() == Mode.DONE:
            self.console.print("proof complete", style="bold green")
            return
        node = self.prover.current_node()
        self.console.print(Text(f"goal {node.label}: {node.goal}"))

    def _require_theorem(self) -> None:
        if self.prover.mode() == Mode.NO_THEOREM:
            raise CommandError("no theorem loaded")

    def _no_args(self, rest: str) -> None:
        if rest:
            raise CommandError("invalid command")

    def _index(self, rest: str) -> int:
        try:
            return int(rest)
        except ValueError:
            raise CommandError(f"expected an option number, got '{rest}'") from None

    def _error(self, message: str) -> None:
        self.error_count += 1
        self.last_error = message
        self.console.print(Text(f"error: {message}", style="red"))
