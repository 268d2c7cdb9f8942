"""Terminal selection surface built on rich and click."""

from typing import Callable

import click
from rich.console import Console
from rich.prompt import Confirm

from upkeep.core.session import DEFAULT_KEYS, SelectionSession, SessionStatus
from upkeep.models.candidate import UpgradeCandidate

DOWN_KEYS = ("j", "n")
UP_KEYS = ("k", "p")
TOGGLE_KEY = " "
ENTER_KEYS = ("\r", "\n")


class TerminalSurface:
    """Draws a selection session and feeds it keypresses."""

    def __init__(
        self,
        console: Console | None = None,
        read_key: Callable[[], str] = click.getchar,
        keys: dict[str, str] | None = None,
    ):
        self.console = console or Console()
        self.read_key = read_key
        self.keys = keys or DEFAULT_KEYS
        self.cursor = 0
        self.notice = ""

    def confirm(self, candidate: UpgradeCandidate) -> bool:
        try:
            return Confirm.ask(
                f"Upgrade [bold]{candidate.describe()}[/bold]?",
                default=True,
                console=self.console,
            )
        except EOFError:
            return False

    def draw(self, session: SelectionSession) -> None:
        model = session.render(self.keys)
        if self.console.is_terminal:
            self.console.clear()
        self.console.print(model.header, style="bold", markup=False)
        self.console.print()
        for line in model.lines:
            pointer = ">" if line.index == self.cursor else " "
            marker = "[*]" if line.selected else "[ ]"
            self.console.print(
                f"{pointer} {marker} {line.text}",
                style="green" if line.selected else None,
                markup=False,
                highlight=False,
            )
        if self.notice:
            self.console.print()
            self.console.print(f"[yellow]{self.notice}[/yellow]")
            self.notice = ""

    def _move(self, session: SelectionSession, step: int) -> None:
        self.cursor = max(0, min(len(session.candidates) - 1, self.cursor + step))

    def drive(self, session: SelectionSession) -> None:
        actions = {key: action for action, key in self.keys.items()}
        self.cursor = 0

        while session.status is SessionStatus.OPEN:
            self.draw(session)
            try:
                key = self.read_key()
            except (KeyboardInterrupt, EOFError):
                session.cancel()
                break

            action = actions.get(key)
            if key in DOWN_KEYS:
                self._move(session, 1)
            elif key in UP_KEYS:
                self._move(session, -1)
            elif key == TOGGLE_KEY:
                if self.cursor in session.selected:
                    session.unselect(self.cursor)
                else:
                    session.select(self.cursor)
            elif action == "select":
                session.select(self.cursor)
                self._move(session, 1)
            elif action == "unselect":
                session.unselect(self.cursor)
                self._move(session, 1)
            elif action == "select_all":
                session.select_all()
            elif action == "unselect_all":
                session.unselect_all()
            elif action == "confirm" or key in ENTER_KEYS:
                if not session.confirm():
                    self.notice = "Nothing to do - select at least one package"
            elif action == "quit":
                session.cancel()
