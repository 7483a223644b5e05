"""Library picks and custom drafts for one setup flow, plus the gate over both.

Pure domain logic, no framework dependencies.
"""

import itertools
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple

from session_setup.domain.models import ActionId, CustomActionDraft, ValidationRejected

MIN_ACTIONS = 3
MAX_ACTIONS = 5

CAPACITY_MESSAGE = f"Maximum {MAX_ACTIONS} actions (library + custom combined)"
MINIMUM_MESSAGE = (
    f"Please select at least {MIN_ACTIONS} actions to track (library + custom combined)"
)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def coerce_movement(value: Any) -> int:
    """Coerce raw form input to an int, 0 when missing or non-numeric.

    Numeric strings keep their leading integer ("3.7" -> 3, "4pts" -> 4).
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def draft_id_factory(prefix: str = "draft-") -> Callable[[], str]:
    """Monotonic local ids; the prefix keeps them apart from library ids."""
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


class SelectionSet:
    """Chosen library action ids. Iterates in selection order."""

    def __init__(self):
        self._ids: List[ActionId] = []

    def __contains__(self, library_id: ActionId) -> bool:
        return library_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[ActionId]:
        return iter(list(self._ids))

    def add(self, library_id: ActionId) -> None:
        if library_id not in self._ids:
            self._ids.append(library_id)

    def discard(self, library_id: ActionId) -> None:
        if library_id in self._ids:
            self._ids.remove(library_id)

    def ids(self) -> List[ActionId]:
        return list(self._ids)


class CustomActionDraftList:
    """Drafts authored during setup, insertion order preserved."""

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        self._drafts: List[CustomActionDraft] = []
        self._next_id = id_factory or draft_id_factory()

    def __len__(self) -> int:
        return len(self._drafts)

    def __iter__(self) -> Iterator[CustomActionDraft]:
        return iter(list(self._drafts))

    def append(self, description: str, user_movement: int, llm_movement: int) -> CustomActionDraft:
        draft = CustomActionDraft(
            id=self._next_id(),
            description=description,
            user_movement=user_movement,
            llm_movement=llm_movement,
        )
        self._drafts.append(draft)
        return draft

    def remove(self, draft_id: ActionId) -> bool:
        """Remove draft by ID. Returns True if found and removed."""
        for i, draft in enumerate(self._drafts):
            if draft.id == draft_id:
                del self._drafts[i]
                return True
        return False

    def snapshot(self) -> Tuple[CustomActionDraft, ...]:
        return tuple(self._drafts)


@dataclass(frozen=True)
class SelectionGate:
    """Derived view over both collections; holds no state of its own."""

    total: int

    @classmethod
    def evaluate(cls, selected: int, drafts: int) -> "SelectionGate":
        return cls(total=selected + drafts)

    @property
    def can_add_more(self) -> bool:
        return self.total < MAX_ACTIONS

    @property
    def can_submit(self) -> bool:
        return MIN_ACTIONS <= self.total <= MAX_ACTIONS

    @property
    def remaining(self) -> int:
        """Actions still needed to reach the minimum."""
        return max(0, MIN_ACTIONS - self.total)


class ActionSelection:
    """State struct for one setup flow, advanced only through its operations.

    Invariant: len(selected) + len(drafts) <= MAX_ACTIONS after every call.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        self.selected = SelectionSet()
        self.drafts = CustomActionDraftList(id_factory)

    @property
    def gate(self) -> SelectionGate:
        return SelectionGate.evaluate(len(self.selected), len(self.drafts))

    def toggle(self, library_id: ActionId) -> bool:
        """Flip membership of a library id. Returns True if membership changed.

        Adding past capacity is a silent no-op, not an error.
        """
        if library_id in self.selected:
            self.selected.discard(library_id)
            return True
        if not self.gate.can_add_more:
            return False
        self.selected.add(library_id)
        return True

    def create_draft(self, description: Any, user_movement: Any = 0, llm_movement: Any = 0) -> CustomActionDraft:
        """Append a custom draft. Raises ValidationRejected without mutating."""
        text = "" if description is None else str(description)
        if not text.strip():
            raise ValidationRejected(
                "empty_description", "Action description is required", notify=False
            )
        if not self.gate.can_add_more:
            raise ValidationRejected("capacity", CAPACITY_MESSAGE)
        return self.drafts.append(
            text,
            coerce_movement(user_movement),
            coerce_movement(llm_movement),
        )

    def remove_draft(self, draft_id: ActionId) -> bool:
        return self.drafts.remove(draft_id)

    def require_submittable(self) -> None:
        if not self.gate.can_submit:
            raise ValidationRejected("below_minimum", MINIMUM_MESSAGE)
