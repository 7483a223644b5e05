"""UI-side adapters."""

from session_setup.adapters.ui.navigation import InMemoryNavigator
from session_setup.adapters.ui.notices import NoticeBoard

__all__ = ["InMemoryNavigator", "NoticeBoard"]
