"""Notice storage backends sharing the NoticeStore contract."""

from notice_board.config import Settings
from notice_board.stores.base import NoticeStore
from notice_board.stores.memory import MemoryNoticeStore
from notice_board.stores.sql import SqlNoticeStore
from notice_board.stores.supabase_store import SupabaseNoticeStore

__all__ = ["NoticeStore", "MemoryNoticeStore", "SqlNoticeStore", "SupabaseNoticeStore", "build_store"]


# PUBLIC_INTERFACE
def build_store(settings: Settings) -> NoticeStore:
    """Construct the backend named by ``settings.store_backend``."""
    if settings.store_backend == "supabase":
        return SupabaseNoticeStore(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.notices_table,
            timeout=settings.store_timeout,
        )
    if settings.store_backend == "sql":
        return SqlNoticeStore(settings.database_url, timeout=settings.store_timeout)
    return MemoryNoticeStore()
