import logging
from typing import Any, List, Optional

from supabase import Client, ClientOptions, create_client

from notice_board.config import DEFAULT_TABLE, DEFAULT_TIMEOUT_SECONDS
from notice_board.errors import ConfigurationError, PersistenceError
from notice_board.mapping import CREATED_AT_COLUMN, from_row, to_row
from notice_board.schemas import Notice, NoticeInput
from notice_board.stores.base import NoticeStore

logger = logging.getLogger(__name__)


class SupabaseNoticeStore(NoticeStore):
    """
    Store delegating to a Supabase (managed PostgreSQL) table over its REST API.

    Rows use snake_case columns (``titulo, descricao, usuario_id, criado_em``);
    ``id`` and ``criado_em`` are generated by the database. Every client error,
    including timeouts, is re-raised as PersistenceError.
    """

    name = "supabase"

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        *,
        table: str = DEFAULT_TABLE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[Client] = None,
    ) -> None:
        if client is None:
            if not url or not key:
                raise ConfigurationError(
                    "Supabase configuration missing: both SUPABASE_URL and SUPABASE_KEY are required."
                )
            client = create_client(url, key, options=ClientOptions(postgrest_client_timeout=timeout))
        self._client = client
        self._table = table

    def create(self, record: NoticeInput) -> Notice:
        try:
            response = self._client.table(self._table).insert(to_row(record)).execute()
        except Exception as exc:
            logger.exception("Supabase insert into %s failed", self._table)
            raise PersistenceError(f"Erro ao criar aviso no Supabase: {exc}") from exc

        rows = response.data or []
        if not rows:
            raise PersistenceError("Erro ao criar aviso no Supabase: nenhum registro retornado.")
        return self._to_notice(rows[0])

    def list_all(self) -> List[Notice]:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .order(CREATED_AT_COLUMN, desc=True)
                .execute()
            )
        except Exception as exc:
            logger.exception("Supabase select from %s failed", self._table)
            raise PersistenceError(f"Erro ao listar avisos no Supabase: {exc}") from exc

        return [self._to_notice(row) for row in response.data or []]

    def _to_notice(self, row: Any) -> Notice:
        try:
            return from_row(row)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Registro inesperado na tabela {self._table}: {exc}") from exc
