from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.database import get_db
from companies_api.services.company_store import CompanyStore
from companies_api.services.opencnpj import OpenCnpjClient


def get_lookup_client(request: Request) -> OpenCnpjClient:
    client = getattr(request.app.state, "lookup_client", None)
    if client is None:
        raise AppError(ErrorKind.INTERNAL, "Cliente OpenCNPJ nao inicializado")
    return client


def get_company_store(db: Session = Depends(get_db)) -> CompanyStore:
    return CompanyStore(db)
