"""In-memory navigator — implements NavigationPort.

The session handoff rides along with the navigation and is claimed
once by the session screen.
"""

from typing import Dict, Optional, Tuple

from session_setup.domain.models import ActionId, CustomActionDraft, SessionHandoff

DASHBOARD_ROUTE = "/dashboard"


def session_route(session_id: ActionId) -> str:
    return f"/session/{session_id}"


class InMemoryNavigator:
    """Tracks the current route and pending handoffs keyed by session id."""

    def __init__(self):
        self.route: Optional[str] = None
        self._pending: Dict[str, SessionHandoff] = {}

    def open_session(self, handoff: SessionHandoff) -> None:
        self.route = session_route(handoff.session_id)
        self._pending[str(handoff.session_id)] = handoff

    def open_dashboard(self) -> None:
        self.route = DASHBOARD_ROUTE

    def claim_handoff(self, session_id: ActionId) -> Tuple[CustomActionDraft, ...]:
        """Called by the session screen's initializer. Empty when nothing is pending."""
        handoff = self._pending.pop(str(session_id), None)
        if handoff is None:
            return ()
        return handoff.take()
