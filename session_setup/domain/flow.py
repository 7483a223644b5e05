"""Session creation flow for the action picker screen.

Owns the selection state for one setup screen, loads the library once,
and turns a valid selection into a created session plus a handoff of the
unpersisted drafts to the session screen.

States: idle -> submitting -> session_ready
                          \\-> submission_failed -> idle
        any open state -> cancelled
"""

import sys
from typing import Any, Callable, Dict, List, Optional

from session_setup.domain.classifier import classify_action
from session_setup.domain.models import (
    ActionId,
    CustomActionDraft,
    LibraryAction,
    SessionHandoff,
    ValidationRejected,
)
from session_setup.domain.selection import ActionSelection, SelectionGate
from session_setup.ports.inbound import CustomActionForm
from session_setup.ports.outbound import (
    ActionLibraryPort,
    LibraryFetchResult,
    NavigationPort,
    NotificationPort,
    SessionCreateResult,
    SessionPort,
)

IDLE = "idle"
SUBMITTING = "submitting"
SESSION_READY = "session_ready"
SUBMISSION_FAILED = "submission_failed"
CANCELLED = "cancelled"

SUBMISSION_FAILED_MESSAGE = "Failed to create session"


def _log(msg: str):
    print(msg, file=sys.stderr)


class FlowClosed(RuntimeError):
    """Raised when an operation reaches a flow that already handed off or was cancelled."""


class SessionCreationFlow:
    """Pure setup-flow logic, testable with mock ports.

    Handles:
    - One-shot library load, degrading to an empty library on failure
    - Toggling library picks and authoring custom drafts
    - Single in-flight session creation
    - Handoff of drafts to the session screen
    """

    def __init__(
        self,
        library: ActionLibraryPort,
        sessions: SessionPort,
        notices: NotificationPort,
        navigator: NavigationPort,
        session_name: Optional[str] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._library_port = library
        self._sessions = sessions
        self._notices = notices
        self._navigator = navigator
        self.session_name = session_name or ""
        self._id_factory = id_factory
        self.selection = ActionSelection(id_factory)
        self.form = CustomActionForm()
        self.library: List[LibraryAction] = []
        self.library_loaded = False
        self.state = IDLE
        self.handoff: Optional[SessionHandoff] = None
        self.last_rejection: Optional[ValidationRejected] = None
        self.last_error: Optional[str] = None
        self._library_requested = False
        # Bumped on exit so responses from an abandoned state are dropped
        self._generation = 0

    # ── Derived ──────────────────────────────────────────────

    @property
    def gate(self) -> SelectionGate:
        return self.selection.gate

    @property
    def is_open(self) -> bool:
        return self.state not in (SESSION_READY, CANCELLED)

    @property
    def can_submit(self) -> bool:
        return self.library_loaded and self.state == IDLE and self.gate.can_submit

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise FlowClosed(f"Setup flow is {self.state}")

    # ── Library ──────────────────────────────────────────────

    async def load_library(self) -> List[LibraryAction]:
        """Fetch the library once. Failure leaves it empty; no retry."""
        self._ensure_open()
        if self._library_requested:
            return self.library
        self._library_requested = True
        generation = self._generation

        try:
            result = await self._library_port.fetch_library()
        except Exception as e:
            result = LibraryFetchResult(success=False, error=str(e))

        if generation != self._generation:
            _log("Ignoring action library response for a closed setup flow")
            return self.library

        if result.success:
            self.library = list(result.actions)
        else:
            _log(f"Failed to fetch action library: {result.error}")
            self.library = []
        self.library_loaded = True
        return self.library

    # ── Selection ────────────────────────────────────────────

    def toggle(self, library_id: ActionId) -> bool:
        """Select or deselect a library action. Returns True if membership changed."""
        self._ensure_open()
        if self.state == SUBMITTING:
            return False
        return self.selection.toggle(library_id)

    def create_draft(
        self,
        description: Any,
        user_movement: Any = 0,
        llm_movement: Any = 0,
    ) -> Optional[CustomActionDraft]:
        """Add a custom draft. Returns None when rejected; see ``last_rejection``."""
        self._ensure_open()
        self.last_rejection = None
        if self.state == SUBMITTING:
            return None
        try:
            return self.selection.create_draft(description, user_movement, llm_movement)
        except ValidationRejected as e:
            self._reject(e)
            return None

    def create_draft_from_form(self, form: Optional[CustomActionForm] = None) -> Optional[CustomActionDraft]:
        """Submit the custom action form; clears it on success."""
        form = form or self.form
        draft = self.create_draft(form.description, form.user_movement, form.llm_movement)
        if draft is not None:
            form.reset()
        return draft

    def remove_draft(self, draft_id: ActionId) -> bool:
        self._ensure_open()
        if self.state == SUBMITTING:
            return False
        return self.selection.remove_draft(draft_id)

    def _reject(self, rejection: ValidationRejected) -> None:
        self.last_rejection = rejection
        if rejection.notify:
            self._notices.notify(rejection.message)

    # ── Submission ───────────────────────────────────────────

    async def submit(self) -> Optional[SessionHandoff]:
        """Create the session and hand drafts to the session screen.

        Returns the handoff on success, None when the submit was refused
        or failed. Library ids are sent; drafts never are.
        """
        self._ensure_open()
        self.last_rejection = None
        if self.state == SUBMITTING or not self.library_loaded:
            return None
        try:
            self.selection.require_submittable()
        except ValidationRejected as e:
            self._reject(e)
            return None

        self.state = SUBMITTING
        self.last_error = None
        generation = self._generation
        selected_ids = self.selection.selected.ids()
        drafts = self.selection.drafts.snapshot()

        try:
            result = await self._sessions.create_session(self.session_name or None, selected_ids)
        except Exception as e:
            result = SessionCreateResult(success=False, error=str(e))

        if generation != self._generation:
            _log("Ignoring session creation response for a closed setup flow")
            return None

        if not result.success or result.session_id is None:
            self.state = SUBMISSION_FAILED
            self.last_error = result.error or "No session id returned"
            _log(f"Failed to create session: {self.last_error}")
            self._notices.notify(SUBMISSION_FAILED_MESSAGE)
            self.state = IDLE
            return None

        self.handoff = SessionHandoff(session_id=result.session_id, initial_custom_actions=drafts)
        self.state = SESSION_READY
        self._close()
        self._navigator.open_session(self.handoff)
        return self.handoff

    def cancel(self) -> None:
        """Leave setup without creating a session."""
        if not self.is_open:
            return
        self.state = CANCELLED
        self._close()
        self._navigator.open_dashboard()

    def _close(self) -> None:
        self._generation += 1
        self.selection = ActionSelection(self._id_factory)
        self.form.reset()

    # ── View ─────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the flow for display."""
        gate = self.gate
        return {
            "state": self.state,
            "session_name": self.session_name,
            "library_loaded": self.library_loaded,
            "library": [
                dict(action.to_dict(), category=classify_action(action),
                     selected=action.id in self.selection.selected)
                for action in self.library
            ],
            "selected_action_ids": self.selection.selected.ids(),
            "custom_actions": [
                dict(draft.to_dict(), category=classify_action(draft))
                for draft in self.selection.drafts
            ],
            "total": gate.total,
            "remaining": gate.remaining,
            "can_add_more": gate.can_add_more,
            "can_submit": self.can_submit,
            "session_id": self.handoff.session_id if self.handoff else None,
        }
