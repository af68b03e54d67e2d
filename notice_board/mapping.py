"""Translation between the canonical notice shape and the native snake_case row shape."""

from collections.abc import Mapping
from typing import Any, Dict

from notice_board.schemas import Notice, NoticeInput

CANONICAL_TO_NATIVE: Dict[str, str] = {
    "id": "id",
    "title": "titulo",
    "description": "descricao",
    "authorId": "usuario_id",
    "createdAt": "criado_em",
}
NATIVE_TO_CANONICAL: Dict[str, str] = {native: canonical for canonical, native in CANONICAL_TO_NATIVE.items()}

CREATED_AT_COLUMN = CANONICAL_TO_NATIVE["createdAt"]


# PUBLIC_INTERFACE
def to_row(record: NoticeInput) -> Dict[str, Any]:
    """Native insert payload for a validated record. ``id``/``criado_em`` are left to the store."""
    canonical = record.model_dump(by_alias=True)
    return {CANONICAL_TO_NATIVE[key]: value for key, value in canonical.items()}


# PUBLIC_INTERFACE
def from_row(row: Mapping) -> Notice:
    """
    Canonical notice for a native row.

    Raises KeyError when any persisted column is missing from ``row``.
    """
    canonical = {canonical: row[native] for native, canonical in NATIVE_TO_CANONICAL.items()}
    return Notice.model_validate(canonical)
