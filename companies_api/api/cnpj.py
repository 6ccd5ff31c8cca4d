from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from companies_api.api.deps import get_lookup_client
from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.core.logging import get_logger
from companies_api.middleware.rate_limit import limiter
from companies_api.services.opencnpj import OpenCnpjClient
from companies_api.utils.normalize import pad_document

logger = get_logger(__name__)

router = APIRouter(prefix="/cnpj", tags=["cnpj"])


@router.get(
    "/{cnpj}",
    summary="Consultar CNPJ",
    description="Consulta o CNPJ na API OpenCNPJ e devolve os dados como recebidos, com o CNPJ normalizado.",
)
@limiter.limit("60/minute")
def get_cnpj(
    request: Request,
    cnpj: str,
    client: OpenCnpjClient = Depends(get_lookup_client),
) -> dict[str, Any]:
    normalized = pad_document(cnpj)
    logger.info("cnpj.lookup_requested", cnpj=normalized)

    payload = client.lookup(normalized)
    if payload is None:
        raise AppError(ErrorKind.NOT_FOUND, "CNPJ nao encontrado")

    return payload
