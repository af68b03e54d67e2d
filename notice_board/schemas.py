from datetime import datetime, timezone
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 2000


class NoticeInput(BaseModel):
    """Validated record ready to be persisted (title/description already trimmed)."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Trimmed title (1-120 chars).")
    description: str = Field(..., description="Trimmed description (1-2000 chars).")
    author_id: Any = Field(..., alias="authorId", description="Opaque author identifier.")


class Notice(NoticeInput):
    """
    Canonical stored notice.

    Attributes are snake_case; ``model_dump(by_alias=True)`` yields the canonical
    shape ``id, title, description, authorId, createdAt`` shared by every store.
    """

    id: Union[int, str] = Field(..., description="Store-assigned identifier.")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp.")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite and some PostgREST columns hand back naive timestamps
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class AvisoOut(BaseModel):
    """Notice as returned on the wire (Portuguese field names)."""
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str] = Field(..., description="Notice identifier.")
    title: str = Field(..., alias="titulo", description="Notice title.")
    description: str = Field(..., alias="descricao", description="Notice body.")
    author_id: Any = Field(..., alias="usuarioId", description="Author identifier.")
    created_at: datetime = Field(..., alias="criadoEm", description="Creation timestamp (ISO-8601).")

    @classmethod
    def from_notice(cls, notice: Notice) -> "AvisoOut":
        return cls(
            id=notice.id,
            title=notice.title,
            description=notice.description,
            author_id=notice.author_id,
            created_at=notice.created_at,
        )


class AvisoCreated(BaseModel):
    """Response body for a successful POST /avisos."""

    mensagem: str
    aviso: AvisoOut


class AvisoList(BaseModel):
    """Response body for GET /avisos."""

    total: int = Field(..., description="Number of notices returned.")
    avisos: List[AvisoOut]


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    store: str
