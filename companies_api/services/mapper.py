"""Conversions between OpenCNPJ payloads, ``companies`` rows and API responses."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from companies_api.core.logging import get_logger
from companies_api.utils.normalize import (
    normalize_document,
    normalize_postal_code,
    parse_iso_date,
    parse_local_currency,
)

logger = get_logger(__name__)

# Provider field -> column, copied as-is with falsy values stored as NULL.
_PLAIN_FIELDS = {
    "razao_social": "razao_social",
    "nome_fantasia": "nome_fantasia",
    "situacao_cadastral": "situacao_cadastral",
    "matriz_filial": "matriz_filial",
    "cnae_principal": "cnae_principal_code",
    "natureza_juridica": "natureza_juridica",
    "logradouro": "logradouro",
    "numero": "numero",
    "complemento": "complemento",
    "bairro": "bairro",
    "uf": "uf",
    "municipio": "municipio",
    "email": "email",
    "porte_empresa": "porte_empresa",
    "opcao_simples": "opcao_simples",
    "opcao_mei": "opcao_mei",
}

_DATE_FIELDS = (
    "data_situacao_cadastral",
    "data_inicio_atividade",
    "data_opcao_simples",
    "data_opcao_mei",
)

_JSON_FIELDS = {
    "cnaes_secundarios": "cnaes_secundarios",
    "telefones": "telefones",
    "QSA": "qsa",
}

RESPONSE_FIELDS = (
    "id",
    "cnpj",
    "razao_social",
    "nome_fantasia",
    "situacao_cadastral",
    "data_situacao_cadastral",
    "matriz_filial",
    "data_inicio_atividade",
    "cnae_principal_code",
    "cnaes_secundarios",
    "cnaes_secundarios_count",
    "natureza_juridica",
    "logradouro",
    "numero",
    "complemento",
    "bairro",
    "cep",
    "uf",
    "municipio",
    "email",
    "telefones",
    "capital_social",
    "porte_empresa",
    "opcao_simples",
    "data_opcao_simples",
    "opcao_mei",
    "data_opcao_mei",
    "qsa",
    "created_at",
    "updated_at",
)

_RESPONSE_JSON_FIELDS = frozenset(_JSON_FIELDS.values())


def _to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _dump_json(value: Any) -> str | None:
    if value is None:
        return None
    return _to_json(value)


def _load_json(field: str, value: Any) -> list[Any] | None:
    """Parses a stored JSON list; anything else is logged and read as ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            logger.warning("mapper.json_parse_failed", field=field, error=str(exc))
            return None

    if not isinstance(value, list):
        logger.warning("mapper.json_parse_failed", field=field, error=f"expected list, got {type(value).__name__}")
        return None
    return value


def to_persisted_row(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Builds a ``companies`` row from an OpenCNPJ payload.

    Raises ``AppError(INVALID_FORMAT)`` when the payload CNPJ is not 14 digits.
    """
    row: dict[str, Any] = {"cnpj": normalize_document(payload.get("cnpj"))}

    for source, column in _PLAIN_FIELDS.items():
        row[column] = payload.get(source) or None

    for field in _DATE_FIELDS:
        row[field] = parse_iso_date(payload.get(field) or "")

    for source, column in _JSON_FIELDS.items():
        row[column] = _dump_json(payload.get(source))

    cnaes = payload.get("cnaes_secundarios")
    count = payload.get("cnaes_secundarios_count")
    if count is None and isinstance(cnaes, list):
        count = len(cnaes)
    row["cnaes_secundarios_count"] = count
    row["cep"] = normalize_postal_code(payload.get("cep") or "")
    row["capital_social"] = parse_local_currency(payload.get("capital_social") or "")
    row["raw"] = _to_json(dict(payload))
    return row


def to_response_row(row: Mapping[str, Any]) -> dict[str, Any]:
    response: dict[str, Any] = {}
    for field in RESPONSE_FIELDS:
        value = row.get(field)
        if field in _RESPONSE_JSON_FIELDS:
            value = _load_json(field, value)
        response[field] = value
    return response
