from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.services.mapper import to_persisted_row, to_response_row

SCALAR_FIELDS = {
    "razao_social": "razao_social",
    "nome_fantasia": "nome_fantasia",
    "situacao_cadastral": "situacao_cadastral",
    "matriz_filial": "matriz_filial",
    "cnae_principal": "cnae_principal_code",
    "cnaes_secundarios_count": "cnaes_secundarios_count",
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


def test_to_persisted_row_normalizes_fields(provider_payload):
    row = to_persisted_row(provider_payload(cnpj="11.222.333/0001-81"))

    assert row["cnpj"] == "11222333000181"
    assert row["cep"] == "01310100"
    assert row["capital_social"] == Decimal("1234.56")
    assert row["data_situacao_cadastral"] == date(2005, 11, 3)
    assert row["data_inicio_atividade"] == date(1998, 4, 1)
    assert row["data_opcao_simples"] is None
    assert row["cnae_principal_code"] == "6201501"
    assert json.loads(row["cnaes_secundarios"]) == ["6202300", "6203100"]
    assert json.loads(row["qsa"])[0]["nome_socio"] == "Maria Silva"
    assert json.loads(row["raw"])["cnpj"] == "11.222.333/0001-81"


def test_to_persisted_row_stores_null_for_missing_and_falsy_values():
    row = to_persisted_row({"cnpj": "11222333000181", "razao_social": "", "cep": "123", "capital_social": "abc"})

    assert row["razao_social"] is None
    assert row["nome_fantasia"] is None
    assert row["cep"] is None
    assert row["capital_social"] is None
    assert row["cnaes_secundarios"] is None
    assert row["cnaes_secundarios_count"] is None
    assert row["telefones"] is None
    assert row["qsa"] is None


def test_to_persisted_row_counts_secondary_codes_when_provider_omits_count(provider_payload):
    payload = provider_payload(cnaes_secundarios_count=None, cnaes_secundarios=["1", "2", "3"])

    assert to_persisted_row(payload)["cnaes_secundarios_count"] == 3


def test_to_persisted_row_rejects_invalid_cnpj(provider_payload):
    with pytest.raises(AppError) as excinfo:
        to_persisted_row(provider_payload(cnpj="123"))

    assert excinfo.value.kind is ErrorKind.INVALID_FORMAT


def test_round_trip_preserves_scalars_and_lists(provider_payload):
    payload = provider_payload()
    persisted = to_persisted_row(payload)
    stored = {
        **persisted,
        "id": 1,
        "created_at": datetime(2026, 1, 1, 12, 0, 0),
        "updated_at": datetime(2026, 1, 2, 12, 0, 0),
    }

    response = to_response_row(stored)

    for source, field in SCALAR_FIELDS.items():
        assert response[field] == payload[source], field
    assert response["cnpj"] == payload["cnpj"]
    assert response["cnaes_secundarios"] == payload["cnaes_secundarios"]
    assert response["telefones"] == payload["telefones"]
    assert response["qsa"] == payload["QSA"]
    assert response["id"] == 1
    assert response["created_at"] == datetime(2026, 1, 1, 12, 0, 0)
    assert response["updated_at"] == datetime(2026, 1, 2, 12, 0, 0)
    assert "raw" not in response


def test_to_response_row_degrades_malformed_json_to_none():
    response = to_response_row(
        {
            "id": 7,
            "cnpj": "11222333000181",
            "cnaes_secundarios": "[not json",
            "telefones": '[{"ddd": "11"}]',
            "qsa": "",
        }
    )

    assert response["cnaes_secundarios"] is None
    assert response["telefones"] == [{"ddd": "11"}]
    assert response["qsa"] is None
    assert response["cnpj"] == "11222333000181"


def test_round_trip_keeps_empty_lists(provider_payload):
    payload = provider_payload(cnaes_secundarios=[], cnaes_secundarios_count=None, telefones=[], QSA=[])
    persisted = to_persisted_row(payload)

    assert persisted["cnaes_secundarios"] == "[]"
    assert persisted["telefones"] == "[]"
    assert persisted["qsa"] == "[]"
    assert persisted["cnaes_secundarios_count"] == 0

    response = to_response_row(persisted)

    assert response["cnaes_secundarios"] == []
    assert response["telefones"] == []
    assert response["qsa"] == []


def test_to_response_row_degrades_non_list_json_to_none():
    response = to_response_row(
        {
            "id": 7,
            "cnpj": "11222333000181",
            "cnaes_secundarios": '"6202300"',
            "telefones": '{"ddd": "11"}',
            "qsa": {"nome_socio": "Maria Silva"},
        }
    )

    assert response["cnaes_secundarios"] is None
    assert response["telefones"] is None
    assert response["qsa"] is None
    assert response["cnpj"] == "11222333000181"


def test_list_fields_and_raw_share_serializer_options(provider_payload):
    payload = provider_payload(
        QSA=[{"nome_socio": "Joao Conceicao", "data_entrada_sociedade": date(2010, 1, 15)}],
        telefones=[{"ddd": "11", "numero": Decimal("30001000")}],
    )

    persisted = to_persisted_row(payload)

    assert json.loads(persisted["qsa"]) == [
        {"nome_socio": "Joao Conceicao", "data_entrada_sociedade": "2010-01-15"}
    ]
    assert json.loads(persisted["telefones"]) == [{"ddd": "11", "numero": "30001000"}]
    assert json.loads(persisted["raw"])["QSA"] == json.loads(persisted["qsa"])
