from abc import ABC, abstractmethod
from typing import List

from notice_board.schemas import Notice, NoticeInput


class NoticeStore(ABC):
    """Abstract base class for notice storage backends."""

    name = "abstract"

    @abstractmethod
    def create(self, record: NoticeInput) -> Notice:
        """
        Persist a validated record and return an independent copy of the stored notice.

        The store assigns ``id`` and ``created_at``. Raises PersistenceError if
        the write cannot complete.
        """

    @abstractmethod
    def list_all(self) -> List[Notice]:
        """All notices, most recent first. Raises PersistenceError if the read fails."""

    def close(self) -> None:
        """Release backend resources."""
