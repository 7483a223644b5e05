"""Domain layer — pure Python, no framework dependencies.

``session_setup.domain.flow`` depends on the ports and is imported directly.
"""

from session_setup.domain.models import (
    ActionDefinition,
    CustomActionDraft,
    HandoffConsumed,
    LibraryAction,
    Notice,
    SessionHandoff,
    ValidationRejected,
)
from session_setup.domain.classifier import (
    AI_ADVANCE,
    BALANCED,
    HUMAN_ADVANCE,
    annotate,
    classify_action,
)
from session_setup.domain.selection import (
    MAX_ACTIONS,
    MIN_ACTIONS,
    ActionSelection,
    CustomActionDraftList,
    SelectionGate,
    SelectionSet,
    coerce_movement,
)

__all__ = [
    "ActionDefinition",
    "CustomActionDraft",
    "HandoffConsumed",
    "LibraryAction",
    "Notice",
    "SessionHandoff",
    "ValidationRejected",
    "AI_ADVANCE",
    "BALANCED",
    "HUMAN_ADVANCE",
    "annotate",
    "classify_action",
    "MAX_ACTIONS",
    "MIN_ACTIONS",
    "ActionSelection",
    "CustomActionDraftList",
    "SelectionGate",
    "SelectionSet",
    "coerce_movement",
]
