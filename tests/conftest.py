from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from companies_api.api.deps import get_lookup_client
from companies_api.database import Base, get_db
from companies_api.main import app
from companies_api.models import Company  # noqa: F401
from companies_api.services.company_store import CompanyStore
from companies_api.utils.normalize import pad_document


class FakeLookupClient:
    """Stands in for ``OpenCnpjClient`` with canned payloads keyed by CNPJ."""

    def __init__(self, payloads: dict[str, dict[str, Any]] | None = None) -> None:
        self.payloads = dict(payloads or {})
        self.error: Exception | None = None
        self.calls: list[str] = []

    def lookup(self, cnpj: str) -> dict[str, Any] | None:
        self.calls.append(cnpj)
        if self.error is not None:
            raise self.error
        normalized = pad_document(cnpj)
        payload = self.payloads.get(normalized)
        if payload is None:
            return None
        return {**payload, "cnpj_normalizado": normalized}

    def ping(self) -> bool:
        return True


def make_payload(cnpj: str = "11222333000181", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "cnpj": cnpj,
        "razao_social": "Acme SA",
        "nome_fantasia": "Acme",
        "situacao_cadastral": "Ativa",
        "data_situacao_cadastral": "2005-11-03",
        "matriz_filial": "Matriz",
        "data_inicio_atividade": "1998-04-01",
        "cnae_principal": "6201501",
        "cnaes_secundarios": ["6202300", "6203100"],
        "cnaes_secundarios_count": 2,
        "natureza_juridica": "Sociedade Anonima Fechada",
        "logradouro": "Avenida Paulista",
        "numero": "1000",
        "complemento": "Andar 10",
        "bairro": "Bela Vista",
        "cep": "01310-100",
        "uf": "SP",
        "municipio": "Sao Paulo",
        "email": "contato@acme.com.br",
        "telefones": [{"ddd": "11", "numero": "30001000", "is_fax": False}],
        "capital_social": "1.234,56",
        "porte_empresa": "Demais",
        "opcao_simples": "N",
        "data_opcao_simples": None,
        "opcao_mei": "N",
        "data_opcao_mei": None,
        "QSA": [
            {
                "nome_socio": "Maria Silva",
                "cnpj_cpf_socio": "***123456**",
                "qualificacao_socio": "Diretor",
                "data_entrada_sociedade": "2010-01-15",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session) -> CompanyStore:
    return CompanyStore(db_session)


@pytest.fixture
def lookup_client() -> FakeLookupClient:
    return FakeLookupClient(
        {
            "11222333000181": make_payload(),
            "44555666000199": make_payload(cnpj="44555666000199", razao_social="Beta Ltda"),
        }
    )


@pytest.fixture
def client(session_factory, lookup_client):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lookup_client] = lambda: lookup_client
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def provider_payload():
    return make_payload
