"""Session Setup: action selection and session handoff."""

from session_setup.config import CONFIG, AppConfig, ApiConfig
from session_setup.domain import (
    ActionSelection,
    CustomActionDraft,
    LibraryAction,
    SessionHandoff,
    ValidationRejected,
    classify_action,
)
from session_setup.ports import CustomActionForm, LibraryFetchResult, SessionCreateResult
from session_setup.domain.flow import FlowClosed, SessionCreationFlow
from session_setup.adapters.api import ActionLibraryClient, SessionClient
from session_setup.adapters.ui import InMemoryNavigator, NoticeBoard

__all__ = [
    "CONFIG",
    "AppConfig",
    "ApiConfig",
    "ActionSelection",
    "CustomActionDraft",
    "LibraryAction",
    "SessionHandoff",
    "ValidationRejected",
    "classify_action",
    "CustomActionForm",
    "LibraryFetchResult",
    "SessionCreateResult",
    "FlowClosed",
    "SessionCreationFlow",
    "ActionLibraryClient",
    "SessionClient",
    "InMemoryNavigator",
    "NoticeBoard",
]
