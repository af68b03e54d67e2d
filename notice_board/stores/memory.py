import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from notice_board.schemas import Notice, NoticeInput
from notice_board.stores.base import NoticeStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryNoticeStore(NoticeStore):
    """
    Process-scoped store backed by a list and an id counter.

    Nothing survives a restart. ``create`` holds a lock so the counter
    increment and the append happen together.
    """

    name = "memory"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utcnow
        self._notices: List[Notice] = []
        self._last_id = 0
        self._lock = threading.Lock()

    def create(self, record: NoticeInput) -> Notice:
        with self._lock:
            self._last_id += 1
            notice = Notice(
                id=self._last_id,
                title=record.title,
                description=record.description,
                author_id=record.author_id,
                created_at=self._clock(),
            )
            self._notices.append(notice.model_copy(deep=True))
        logger.debug("Stored notice id=%s in memory (total=%s)", notice.id, len(self._notices))
        return notice

    def list_all(self) -> List[Notice]:
        with self._lock:
            snapshot = [n.model_copy(deep=True) for n in self._notices]
        # insertion order is not trusted to match clock order
        snapshot.sort(key=lambda n: (n.created_at, n.id), reverse=True)
        return snapshot
