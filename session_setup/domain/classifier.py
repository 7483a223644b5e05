"""Classify actions by net movement. Display only, never used for validation."""

from typing import Iterable, List, Tuple

from session_setup.domain.models import ActionDefinition

HUMAN_ADVANCE = "Human Advance"
AI_ADVANCE = "AI Advance"
BALANCED = "Balanced"

# |net| above this tips an action to one side
NET_THRESHOLD = 2


def net_movement(action: ActionDefinition) -> int:
    return action.user_movement - action.llm_movement


def classify_action(action: ActionDefinition) -> str:
    """Label an action by which side its movement favours."""
    net = net_movement(action)
    if net > NET_THRESHOLD:
        return HUMAN_ADVANCE
    if net < -NET_THRESHOLD:
        return AI_ADVANCE
    return BALANCED


def annotate(actions: Iterable[ActionDefinition]) -> List[Tuple[ActionDefinition, str]]:
    """Pair every candidate with its category label, order preserved."""
    return [(action, classify_action(action)) for action in actions]
