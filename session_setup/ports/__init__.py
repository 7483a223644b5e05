"""Port interfaces (Hexagonal Architecture)."""

from session_setup.ports.inbound import CustomActionForm
from session_setup.ports.outbound import (
    ActionLibraryPort,
    LibraryFetchResult,
    NavigationPort,
    NotificationPort,
    SessionCreateResult,
    SessionPort,
)

__all__ = [
    "CustomActionForm",
    "ActionLibraryPort",
    "LibraryFetchResult",
    "NavigationPort",
    "NotificationPort",
    "SessionCreateResult",
    "SessionPort",
]
