"""Interactive selection of upgrade candidates."""

from dataclasses import dataclass
from enum import Enum

from upkeep.core.errors import SessionClosed, SessionError
from upkeep.models.candidate import CandidateSet


class SessionStatus(str, Enum):
    OPEN = "open"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# Default key bindings, shown in the header legend.
DEFAULT_KEYS = {
    "select": "s",
    "unselect": "u",
    "select_all": "a",
    "unselect_all": "A",
    "confirm": "x",
    "quit": "q",
}


@dataclass(frozen=True)
class RenderLine:
    index: int
    text: str
    selected: bool


@dataclass(frozen=True)
class RenderModel:
    """What a display needs to draw a session."""

    header: str
    lines: tuple[RenderLine, ...]
    status: SessionStatus


class SelectionSession:
    """Multi-select over a fixed snapshot of candidates.

    The session is single-shot: once confirmed or cancelled it accepts no
    further operations, and a confirmed selection can be taken once.
    """

    def __init__(self, candidates: CandidateSet):
        if not candidates:
            raise ValueError("A selection session needs at least one candidate")
        self._candidates = tuple(candidates)
        self._selected: set[int] = set()
        self._status = SessionStatus.OPEN
        self._taken = False

    @property
    def candidates(self) -> CandidateSet:
        return self._candidates

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def selected(self) -> frozenset[int]:
        return frozenset(self._selected)

    def _ensure_open(self) -> None:
        if self._status is not SessionStatus.OPEN:
            raise SessionClosed(f"Session is {self._status.value}")

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._candidates):
            raise IndexError(f"No candidate at index {index}")

    def select(self, index: int) -> None:
        self._ensure_open()
        self._check_index(index)
        self._selected.add(index)

    def unselect(self, index: int) -> None:
        self._ensure_open()
        self._check_index(index)
        self._selected.discard(index)

    def select_all(self) -> None:
        self._ensure_open()
        self._selected = set(range(len(self._candidates)))

    def unselect_all(self) -> None:
        self._ensure_open()
        self._selected.clear()

    def confirm(self) -> bool:
        """Close the session with the current selection.

        Returns False, leaving the session open, when nothing is selected.
        """
        self._ensure_open()
        if not self._selected:
            return False
        self._status = SessionStatus.CONFIRMED
        return True

    def cancel(self) -> None:
        self._ensure_open()
        self._status = SessionStatus.CANCELLED
        self._selected.clear()

    def take_selection(self) -> list[int]:
        """Return the confirmed indices in candidate order. Only once."""
        if self._status is SessionStatus.OPEN:
            raise SessionError("Session has not been confirmed")
        if self._status is SessionStatus.CANCELLED or self._taken:
            raise SessionClosed("Selection is no longer available")
        self._taken = True
        return sorted(self._selected)

    def render(self, keys: dict[str, str] | None = None) -> RenderModel:
        """Project the session into a header and one line per candidate."""
        keys = keys or DEFAULT_KEYS
        legend = "  ".join(
            f"{keys.get(action, DEFAULT_KEYS[action])}: {action.replace('_', '-')}" for action in DEFAULT_KEYS
        )
        header = f"Select packages to upgrade ({len(self._selected)}/{len(self._candidates)} selected)\n{legend}"
        lines = tuple(
            RenderLine(index=i, text=candidate.describe(), selected=i in self._selected)
            for i, candidate in enumerate(self._candidates)
        )
        return RenderModel(header=header, lines=lines, status=self._status)
