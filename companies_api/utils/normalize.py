from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from companies_api.core.exceptions import AppError, ErrorKind

CNPJ_LENGTH = 14
CEP_LENGTH = 8

_NON_DIGITS = re.compile(r"\D")
_INVALID_DATE_TOKENS = {"", "None", "null", "nan", "NaT"}


def digits_only(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return _NON_DIGITS.sub("", value)


def normalize_document(value: object) -> str:
    """Returns the 14 CNPJ digits of ``value`` or raises ``INVALID_FORMAT``."""
    if not isinstance(value, str):
        raise AppError(ErrorKind.INVALID_FORMAT, "CNPJ deve ser uma string valida")

    digits = digits_only(value)
    if len(digits) != CNPJ_LENGTH:
        raise AppError(ErrorKind.INVALID_FORMAT, "CNPJ invalido: deve ter exatamente 14 digitos")
    return digits


def pad_document(value: object) -> str:
    """Left-pads the digits of ``value`` to 14 characters.

    Accepts CNPJs whose leading zeros were dropped (e.g. typed as a number).
    """
    digits = digits_only(value)
    if not digits or len(digits) > CNPJ_LENGTH:
        raise AppError(ErrorKind.INVALID_FORMAT, "CNPJ invalido: deve ter ate 14 digitos")
    return digits.zfill(CNPJ_LENGTH)


def normalize_postal_code(value: object) -> str | None:
    digits = digits_only(value)
    return digits if len(digits) == CEP_LENGTH else None


def parse_local_currency(value: object) -> Decimal | None:
    """Parses a pt-BR amount such as ``"1.234,56"``."""
    if not isinstance(value, str) or not value.strip():
        return None

    cleaned = value.strip().replace(".", "").replace(",", ".", 1)
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not parsed.is_finite():
        return None
    return parsed


def parse_iso_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if raw in _INVALID_DATE_TOKENS:
        return None

    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(raw, "%Y%m%d").date()
    except ValueError:
        return None
