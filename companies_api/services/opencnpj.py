"""HTTP client for the OpenCNPJ lookup API."""

from __future__ import annotations

from typing import Any

import httpx

from companies_api.core.exceptions import AppError, ErrorKind
from companies_api.core.logging import get_logger
from companies_api.utils.normalize import pad_document

logger = get_logger(__name__)

NORMALIZED_CNPJ_FIELD = "cnpj_normalizado"


class OpenCnpjClient:
    """Looks companies up on OpenCNPJ.

    One instance is built at startup and shared by every request; it owns a
    pooled ``httpx.Client`` that must be released with :meth:`close`. Each
    call is a single attempt, callers needing retries add their own policy.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        probe_timeout: float = 5.0,
        user_agent: str = "cnpj-companies-api/1.0",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": user_agent},
            transport=transport,
        )

    def lookup(self, cnpj: str) -> dict[str, Any] | None:
        """Returns the provider payload for ``cnpj`` or ``None`` when it is unknown."""
        normalized = pad_document(cnpj)
        logger.info("opencnpj.lookup", cnpj=normalized)

        try:
            response = self._client.get(f"/{normalized}")
        except httpx.TimeoutException as exc:
            logger.warning("opencnpj.lookup_timeout", cnpj=normalized, error=str(exc))
            raise AppError(
                ErrorKind.UPSTREAM_UNAVAILABLE,
                "Servico externo indisponivel. Tente novamente mais tarde",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("opencnpj.lookup_transport_failed", cnpj=normalized, error=str(exc))
            raise AppError(ErrorKind.UPSTREAM_ERROR, "Falha ao consultar servico externo") from exc

        status = response.status_code
        if status == 404:
            logger.info("opencnpj.not_found", cnpj=normalized)
            return None

        if not response.is_success:
            logger.warning(
                "opencnpj.lookup_failed",
                cnpj=normalized,
                status_code=status,
                body=response.text[:200],
            )
            if status == 429:
                raise AppError(ErrorKind.RATE_LIMITED, "Limite de requisicoes excedido")
            if status >= 500:
                raise AppError(
                    ErrorKind.UPSTREAM_UNAVAILABLE,
                    "Servico externo indisponivel. Tente novamente mais tarde",
                )
            raise AppError(ErrorKind.UPSTREAM_ERROR, "Falha ao consultar servico externo")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("opencnpj.invalid_body", cnpj=normalized)
            raise AppError(ErrorKind.UPSTREAM_ERROR, "Resposta invalida do servico externo") from exc

        if not isinstance(payload, dict):
            logger.warning("opencnpj.invalid_body", cnpj=normalized, body_type=type(payload).__name__)
            raise AppError(ErrorKind.UPSTREAM_ERROR, "Resposta invalida do servico externo")

        payload[NORMALIZED_CNPJ_FIELD] = normalized
        logger.info("opencnpj.found", cnpj=normalized)
        return payload

    def ping(self) -> bool:
        try:
            self._client.get("/", timeout=self.probe_timeout)
        except httpx.HTTPError as exc:
            logger.warning("opencnpj.ping_failed", error=str(exc))
            return False
        return True

    def close(self) -> None:
        self._client.close()
