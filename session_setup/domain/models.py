"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

ActionId = Union[int, str]


@dataclass(frozen=True)
class ActionDefinition:
    """An action with its movement-point deltas."""

    id: ActionId
    description: str
    user_movement: int = 0
    llm_movement: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "action_description": self.description,
            "default_user_movement": self.user_movement,
            "default_llm_movement": self.llm_movement,
        }


@dataclass(frozen=True)
class LibraryAction(ActionDefinition):
    """Persisted, shared action with a stable library id."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LibraryAction":
        """Build from the library endpoint's wire format.

        Rows keyed by ``library_id`` are accepted too. Raises KeyError if
        neither key is present.
        """
        return cls(
            id=data["id"] if "id" in data else data["library_id"],
            description=str(data.get("action_description") or ""),
            user_movement=int(data.get("default_user_movement") or 0),
            llm_movement=int(data.get("default_llm_movement") or 0),
        )


@dataclass(frozen=True)
class CustomActionDraft(ActionDefinition):
    """Session-scoped action authored during setup, not yet persisted."""


class HandoffConsumed(RuntimeError):
    """Raised when a handoff payload is taken a second time."""


@dataclass
class SessionHandoff:
    """Transient payload passed to the session screen after creation.

    The receiving screen calls ``take()`` exactly once to claim the drafts.
    """

    session_id: ActionId
    initial_custom_actions: Tuple[CustomActionDraft, ...] = ()
    _consumed: bool = field(default=False, repr=False, compare=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def take(self) -> Tuple[CustomActionDraft, ...]:
        if self._consumed:
            raise HandoffConsumed(f"Handoff for session {self.session_id} already consumed")
        self._consumed = True
        return self.initial_custom_actions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "initial_custom_actions": [d.to_dict() for d in self.initial_custom_actions],
        }


class ValidationRejected(ValueError):
    """A local mutation was refused; nothing changed."""

    def __init__(self, reason: str, message: str, notify: bool = True):
        super().__init__(message)
        self.reason = reason  # "empty_description" | "capacity" | "below_minimum"
        self.message = message
        self.notify = notify


@dataclass(frozen=True)
class Notice:
    """User-visible, dismissible message."""

    notice_id: int
    message: str
    level: str = "error"  # "error" | "info"
