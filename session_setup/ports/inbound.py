"""Inbound port — raw custom action form input."""

from dataclasses import dataclass
from typing import Any


@dataclass
class CustomActionForm:
    """Fields of the "create custom action" form, as typed by the user."""

    description: str = ""
    user_movement: Any = 0
    llm_movement: Any = 0

    def reset(self) -> None:
        self.description = ""
        self.user_movement = 0
        self.llm_movement = 0
