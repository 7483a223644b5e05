"""In-memory notice board — implements NotificationPort."""

import itertools
from typing import Dict, List, Optional

from session_setup.domain.models import Notice


class NoticeBoard:
    """User-visible notices that stay up until dismissed."""

    def __init__(self):
        self._notices: Dict[int, Notice] = {}
        self._ids = itertools.count(1)

    def notify(self, message: str, level: str = "error") -> Notice:
        notice = Notice(notice_id=next(self._ids), message=message, level=level)
        self._notices[notice.notice_id] = notice
        return notice

    def dismiss(self, notice_id: int) -> bool:
        """Drop notice by ID. Returns True if it was showing."""
        return self._notices.pop(notice_id, None) is not None

    def active(self) -> List[Notice]:
        return list(self._notices.values())

    def latest(self) -> Optional[Notice]:
        active = self.active()
        return active[-1] if active else None
