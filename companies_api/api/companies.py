from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from companies_api.api.deps import get_company_store, get_lookup_client
from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.core.logging import get_logger
from companies_api.middleware.rate_limit import limiter
from companies_api.schemas.company import CompaniesPage, CompanyCreateRequest, CompanySchema
from companies_api.services.company_store import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, CompanyStore
from companies_api.services.mapper import to_persisted_row, to_response_row
from companies_api.services.opencnpj import OpenCnpjClient
from companies_api.utils.normalize import pad_document

logger = get_logger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post(
    "",
    response_model=CompanySchema,
    status_code=status.HTTP_201_CREATED,
    summary="Salvar empresa",
    description="Consulta o CNPJ na API OpenCNPJ e grava (ou atualiza) a empresa no banco.",
)
@limiter.limit("30/minute")
def create_company(
    request: Request,
    payload: CompanyCreateRequest,
    client: OpenCnpjClient = Depends(get_lookup_client),
    store: CompanyStore = Depends(get_company_store),
) -> CompanySchema:
    normalized = pad_document(payload.cnpj)
    logger.info("companies.save_requested", cnpj=normalized)

    provider_data = client.lookup(normalized)
    if provider_data is None:
        raise AppError(ErrorKind.NOT_FOUND, "CNPJ nao encontrado")

    saved = store.upsert(to_persisted_row(provider_data))
    return CompanySchema(**to_response_row(saved))


@router.get(
    "",
    response_model=CompaniesPage,
    summary="Listar empresas",
    description="Lista empresas salvas, da mais recente para a mais antiga, com busca por CNPJ ou razao social.",
)
@limiter.limit("60/minute")
def list_companies(
    request: Request,
    search: str = Query("", max_length=200, description="Trecho do CNPJ ou da razao social"),
    page: int = Query(1, ge=1, description="Pagina atual"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE,
        alias="pageSize",
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Quantidade de itens por pagina",
    ),
    store: CompanyStore = Depends(get_company_store),
) -> CompaniesPage:
    total, rows = store.search(search, page, page_size)
    logger.info("companies.listed", search=search, page=page, page_size=page_size, total=total, returned=len(rows))

    return CompaniesPage(
        total=total,
        page=page,
        page_size=page_size,
        data=[CompanySchema(**to_response_row(row)) for row in rows],
    )
