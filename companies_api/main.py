from __future__ import annotations

import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from companies_api import __version__
from companies_api.api.cnpj import router as cnpj_router
from companies_api.api.companies import router as companies_router
from companies_api.api.deps import get_company_store
from companies_api.config import settings
from companies_api.core.exceptions import AppError
from companies_api.core.logging import get_logger, setup_logging
from companies_api.database import SessionLocal
from companies_api.middleware.rate_limit import client_ip, limiter
from companies_api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, get_request_id
from companies_api.middleware.request_logging import RequestLoggingMiddleware
from companies_api.schemas.api_responses import ErrorResponse, HealthResponse
from companies_api.services.company_store import CompanyStore
from companies_api.services.opencnpj import OpenCnpjClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    lookup_client = OpenCnpjClient(
        settings.OPEN_CNPJ_BASE_URL,
        timeout=settings.OPEN_CNPJ_TIMEOUT_SECONDS,
        probe_timeout=settings.OPEN_CNPJ_PROBE_TIMEOUT_SECONDS,
        user_agent=settings.OPEN_CNPJ_USER_AGENT,
    )
    app.state.lookup_client = lookup_client

    with SessionLocal() as db:
        if not CompanyStore(db).ping():
            logger.warning("api.startup_database_unavailable")
    if not lookup_client.ping():
        logger.warning("api.startup_provider_unavailable", base_url=lookup_client.base_url)

    logger.info("api.startup", version=__version__, port=settings.PORT)
    try:
        yield
    finally:
        lookup_client.close()
        logger.info("api.shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de consulta e cadastro de empresas por CNPJ usando a API OpenCNPJ",
    version=__version__,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    openapi_tags=[
        {"name": "cnpj", "description": "Consulta de CNPJ na API OpenCNPJ"},
        {"name": "companies", "description": "Empresas salvas no banco"},
    ],
    lifespan=lifespan,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.include_router(cnpj_router)
app.include_router(companies_router)


def _log_error(request: Request, exc: BaseException, status_code: int) -> None:
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "api.request_failed",
        error=str(exc),
        error_type=type(exc).__name__,
        status_code=status_code,
        request_id=get_request_id(request),
        method=request.method,
        path=request.url.path,
        ip=client_ip(request),
        user_agent=request.headers.get("User-Agent", ""),
        stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    details: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=message, status=status_code, details=details)
    # Unhandled errors skip RequestIDMiddleware on the way out, so the id is set here too.
    headers = {**(headers or {}), REQUEST_ID_HEADER: get_request_id(request)}
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    _log_error(request, exc, exc.status_code)
    return _error_response(request, exc.status_code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    _log_error(request, exc, 400)
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    return _error_response(request, 400, "Dados invalidos", details or None)


@app.exception_handler(StarletteHTTPException)
def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _log_error(request, exc, exc.status_code)
    if exc.status_code == 404:
        return _error_response(request, 404, "Rota nao encontrada")
    return _error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RateLimitExceeded)
def handle_rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    _log_error(request, exc, 429)
    return _error_response(request, 429, "Limite de requisicoes excedido", headers={"Retry-After": "60"})


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    _log_error(request, exc, 500)
    return _error_response(request, 500, "Erro interno do servidor")


@app.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Verifica a disponibilidade da API e do banco de dados.",
)
def health(response: Response, store: CompanyStore = Depends(get_company_store)) -> HealthResponse:
    try:
        database = "connected" if store.ping() else "disconnected"
        return HealthResponse(
            ok=True,
            name=settings.APP_NAME,
            timestamp=datetime.now(timezone.utc),
            database=database,
            version=__version__,
        )
    except Exception:
        logger.exception("api.health_failed")
        response.status_code = 503
        return HealthResponse(
            ok=False,
            name=settings.APP_NAME,
            timestamp=datetime.now(timezone.utc),
            database="disconnected",
            version=__version__,
        )
