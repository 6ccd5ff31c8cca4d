from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompanyCreateRequest(BaseModel):
    cnpj: str = Field(
        min_length=1,
        description="CNPJ com ou sem mascara",
        examples=["11.222.333/0001-81"],
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class CompanySchema(BaseModel):
    id: int
    cnpj: str
    razao_social: str | None = None
    nome_fantasia: str | None = None
    situacao_cadastral: str | None = None
    data_situacao_cadastral: date | None = None
    matriz_filial: str | None = None
    data_inicio_atividade: date | None = None
    cnae_principal_code: str | None = None
    cnaes_secundarios: list[Any] | None = None
    cnaes_secundarios_count: int | None = None
    natureza_juridica: str | None = None
    logradouro: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cep: str | None = None
    uf: str | None = None
    municipio: str | None = None
    email: str | None = None
    telefones: list[Any] | None = None
    capital_social: float | None = None
    porte_empresa: str | None = None
    opcao_simples: str | None = None
    data_opcao_simples: date | None = None
    opcao_mei: str | None = None
    data_opcao_mei: date | None = None
    qsa: list[Any] | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CompaniesPage(BaseModel):
    total: int
    page: int
    page_size: int = Field(alias="pageSize")
    data: list[CompanySchema] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
