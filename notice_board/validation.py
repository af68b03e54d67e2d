"""Validation and normalization of incoming notice records."""

from collections.abc import Mapping
from typing import Any

from notice_board.errors import InvalidLength, MissingField
from notice_board.schemas import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, NoticeInput

MISSING_FIELDS_MESSAGE = 'Campos obrigatórios ausentes. Envie "titulo", "descricao" e "usuarioId".'
TITLE_LENGTH_MESSAGE = f'O "titulo" deve ter entre 1 e {TITLE_MAX_LENGTH} caracteres.'
DESCRIPTION_LENGTH_MESSAGE = f'A "descricao" deve ter entre 1 e {DESCRIPTION_MAX_LENGTH} caracteres.'


def _to_text(value: Any) -> str:
    """JavaScript-style text for a JSON scalar: true rather than True, 1 rather than 1.0."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# PUBLIC_INTERFACE
def validate_notice(raw: Any) -> NoticeInput:
    """
    Check a raw record and return it normalized.

    The record is expected to hold ``title``, ``description`` and ``authorId``.
    ``title``/``description`` must be present and non-empty; ``authorId`` only
    has to be non-null, so ``0`` and ``""`` are accepted.

    Raises:
        MissingField: a required field is absent, empty, or null.
        InvalidLength: title/description is empty after trimming or too long.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    title = raw.get("title")
    description = raw.get("description")
    author_id = raw.get("authorId")

    if not title:
        raise MissingField("title", MISSING_FIELDS_MESSAGE)
    if not description:
        raise MissingField("description", MISSING_FIELDS_MESSAGE)
    if author_id is None:
        raise MissingField("authorId", MISSING_FIELDS_MESSAGE)

    clean_title = _to_text(title).strip()
    clean_description = _to_text(description).strip()

    if not 0 < len(clean_title) <= TITLE_MAX_LENGTH:
        raise InvalidLength("title", TITLE_LENGTH_MESSAGE)
    if not 0 < len(clean_description) <= DESCRIPTION_MAX_LENGTH:
        raise InvalidLength("description", DESCRIPTION_LENGTH_MESSAGE)

    return NoticeInput(title=clean_title, description=clean_description, author_id=author_id)
