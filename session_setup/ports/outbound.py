"""Outbound ports — interfaces for external system adapters."""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from session_setup.domain.models import ActionId, LibraryAction, Notice, SessionHandoff


@dataclass
class LibraryFetchResult:
    """Result of loading the shared action library."""

    success: bool
    actions: List[LibraryAction] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SessionCreateResult:
    """Result of a session-creation request."""

    success: bool
    session_id: Optional[ActionId] = None
    error: Optional[str] = None


@runtime_checkable
class ActionLibraryPort(Protocol):
    """Interface for the action library backend."""

    async def fetch_library(self) -> LibraryFetchResult: ...


@runtime_checkable
class SessionPort(Protocol):
    """Interface for the session-creation backend."""

    async def create_session(
        self,
        session_name: Optional[str],
        selected_library_ids: Sequence[ActionId],
    ) -> SessionCreateResult: ...


@runtime_checkable
class NotificationPort(Protocol):
    """Interface for user-visible notices."""

    def notify(self, message: str, level: str = "error") -> Notice: ...


@runtime_checkable
class NavigationPort(Protocol):
    """Interface for leaving the setup screen."""

    def open_session(self, handoff: SessionHandoff) -> None: ...
    def open_dashboard(self) -> None: ...
