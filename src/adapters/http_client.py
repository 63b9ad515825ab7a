"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y logging de todas las peticiones.
- Normaliza los fallos de transporte (`httpx.RequestError`: DNS, conexión,
  timeout, TLS, protocolo) en un único canal (`TransportError`).
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` propio o mockear
  con respx.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import httpx

from core.config import ServerConfig
from core.domain.models import RequestSpec
from core.errors import TransportError

Formatter = Callable[[Any], Any]

_logger = logging.getLogger(__name__)


def build_async_client(
    config: ServerConfig | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del proyecto.

    Por qué un builder:
    - Centraliza timeout/User-Agent para que auth y API se comporten igual.
    - No sigue redirecciones: el servidor FHIR responde tal cual.
    """

    config = config or ServerConfig()
    headers: dict[str, str] = {"User-Agent": config.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers=headers,
    )


def _decode_json_body(text: str) -> Any:
    # Igual que un transporte "json": cuerpo vacío -> None, no-JSON -> texto.
    if text == "":
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class HttpInvoker:
    """Ejecuta un `RequestSpec` y resuelve exactamente un cuerpo o un error.

    Si no se inyecta `client`, cada llamada abre y cierra su propio
    `httpx.AsyncClient`; no hay estado compartido entre llamadas.
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or ServerConfig()
        self._client = client
        self._logger = logger or _logger

    async def invoke(self, spec: RequestSpec, formatter: Formatter | None = None) -> Any:
        self._logger.debug("request: %s", spec.redacted().model_dump())

        try:
            if self._client is not None:
                response = await self._send(self._client, spec)
            else:
                async with build_async_client(self._config) as client:
                    response = await self._send(client, spec)
        except httpx.RequestError as exc:
            raise TransportError(exc, spec) from exc

        body: Any = response.text
        self._logger.debug("body: %s", body)

        if spec.json_mode:
            body = _decode_json_body(body)
        if formatter is not None:
            return formatter(body)
        return body

    @staticmethod
    async def _send(client: httpx.AsyncClient, spec: RequestSpec) -> httpx.Response:
        # `response.text` ya está leído al volver: no hay entrega parcial.
        return await client.request(
            spec.method,
            spec.url,
            headers=spec.headers,
            data=spec.form,
        )
