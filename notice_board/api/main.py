import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from notice_board.config import Settings, get_settings
from notice_board.errors import NoticeValidationError, PersistenceError
from notice_board.schemas import AvisoCreated, AvisoList, AvisoOut, HealthOut
from notice_board.stores import NoticeStore, build_store
from notice_board.validation import validate_notice

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health endpoint."},
    {"name": "Avisos", "description": "Create and list notices on the board."},
]

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"
NOT_FOUND_MESSAGE = "Rota não encontrada"
CREATED_MESSAGE = "Aviso criado com sucesso."

# wire name -> canonical name
WIRE_FIELDS = {"titulo": "title", "descricao": "description", "usuarioId": "authorId"}


def _from_wire(body: Any) -> Dict[str, Any]:
    """Rename the wire fields present in ``body``; absent fields stay absent."""
    if not isinstance(body, dict):
        return {}
    return {canonical: body[wire] for wire, canonical in WIRE_FIELDS.items() if wire in body}


# PUBLIC_INTERFACE
def get_store(request: Request) -> NoticeStore:
    """FastAPI dependency returning the store built at startup."""
    return request.app.state.store


async def _validation_exception_handler(request: Request, exc: NoticeValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"erro": exc.message})


async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the real error, return only the generic message to the client."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"erro": INTERNAL_ERROR_MESSAGE},
    )


async def _not_found_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unsupported methods on a known path are treated as unmatched routes
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"erro": NOT_FOUND_MESSAGE, "caminho": request.url.path},
        )
    return await http_exception_handler(request, exc)


# PUBLIC_INTERFACE
def create_app(store: Optional[NoticeStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The store is constructed once here (from settings when not given) and
    handed to the handlers through ``app.state``. Missing backend settings
    raise ConfigurationError before the app exists.
    """
    if settings is None:
        settings = get_settings() if store is None else Settings()
    if store is None:
        store = build_store(settings)

    app = FastAPI(
        title="Mural de Avisos API",
        description="Notice board backend: create and list notices over a swappable store.",
        version="1.0.0",
        openapi_tags=openapi_tags,
    )
    app.state.store = store
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=settings.allowed_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NoticeValidationError, _validation_exception_handler)
    app.add_exception_handler(PersistenceError, _internal_error_handler)
    app.add_exception_handler(StarletteHTTPException, _not_found_handler)
    app.add_exception_handler(Exception, _internal_error_handler)

    @app.on_event("shutdown")
    def _shutdown_close_store() -> None:
        app.state.store.close()

    # PUBLIC_INTERFACE
    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["Health"],
        summary="Health check",
        description="Returns service status, current server time and the active store backend.",
    )
    def health_check(store: NoticeStore = Depends(get_store)) -> HealthOut:
        """Health check endpoint used by monitoring."""
        return HealthOut(status="ok", timestamp=datetime.now(timezone.utc), store=store.name)

    # PUBLIC_INTERFACE
    @app.get(
        "/avisos",
        response_model=AvisoList,
        tags=["Avisos"],
        summary="List notices",
        description="Return all notices ordered by creation time, most recent first.",
    )
    def list_avisos(store: NoticeStore = Depends(get_store)) -> AvisoList:
        """List all notices."""
        notices = store.list_all()
        avisos: List[AvisoOut] = [AvisoOut.from_notice(n) for n in notices]
        return AvisoList(total=len(avisos), avisos=avisos)

    # PUBLIC_INTERFACE
    @app.post(
        "/avisos",
        response_model=AvisoCreated,
        status_code=status.HTTP_201_CREATED,
        tags=["Avisos"],
        summary="Create notice",
        description=(
            "Create a notice from {titulo, descricao, usuarioId}. Title must be 1-120 and "
            "description 1-2000 characters after trimming; usuarioId must not be null."
        ),
    )
    async def create_aviso(request: Request, store: NoticeStore = Depends(get_store)) -> AvisoCreated:
        """Create a notice."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = {}

        record = validate_notice(_from_wire(body))
        logger.info(
            "Creating notice title_len=%s description_len=%s", len(record.title), len(record.description)
        )
        notice = await run_in_threadpool(store.create, record)
        return AvisoCreated(mensagem=CREATED_MESSAGE, aviso=AvisoOut.from_notice(notice))

    return app
