import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from notice_board.config import DEFAULT_TIMEOUT_SECONDS
from notice_board.db import Base, make_engine, make_session_factory
from notice_board.errors import ConfigurationError, PersistenceError
from notice_board.mapping import from_row, to_row
from notice_board.models import AvisoRow
from notice_board.schemas import Notice, NoticeInput
from notice_board.stores.base import NoticeStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlNoticeStore(NoticeStore):
    """Store writing to the ``avisos`` table of a relational database through SQLAlchemy."""

    name = "sql"

    def __init__(
        self,
        database_url: Optional[str] = None,
        *,
        engine: Optional[Engine] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ConfigurationError("No database URL configured for the SQL notice store.")
            engine = make_engine(database_url, timeout=timeout)
        self._engine = engine
        self._session_factory = make_session_factory(engine)
        self._clock = clock or _utcnow
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as exc:
            logger.exception("Database initialization failed (tables not created).")
            raise PersistenceError(f"Erro ao inicializar o banco de dados: {exc}") from exc

    def create(self, record: NoticeInput) -> Notice:
        db = self._session_factory()
        try:
            row = AvisoRow(**to_row(record), criado_em=self._clock())
            db.add(row)
            db.commit()
            db.refresh(row)
            return from_row(row.as_row())
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed inserting notice")
            raise PersistenceError(f"Erro ao criar aviso no banco de dados: {exc}") from exc
        finally:
            db.close()

    def list_all(self) -> List[Notice]:
        db = self._session_factory()
        try:
            rows = db.query(AvisoRow).order_by(AvisoRow.criado_em.desc(), AvisoRow.id.desc()).all()
            return [from_row(row.as_row()) for row in rows]
        except SQLAlchemyError as exc:
            logger.exception("Failed listing notices")
            raise PersistenceError(f"Erro ao listar avisos no banco de dados: {exc}") from exc
        finally:
            db.close()

    def close(self) -> None:
        self._engine.dispose()
