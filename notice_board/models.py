from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from notice_board.db import Base
from notice_board.schemas import TITLE_MAX_LENGTH


class AvisoRow(Base):
    """SQLAlchemy model for a stored notice, using the snake_case column names of the avisos table."""
    __tablename__ = "avisos"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String(TITLE_MAX_LENGTH), nullable=False)
    descricao = Column(Text, nullable=False)
    # JSON keeps int and str author ids distinct
    usuario_id = Column(JSON, nullable=False)
    criado_em = Column(DateTime(timezone=True), nullable=False, index=True)

    def as_row(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
