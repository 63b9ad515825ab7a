"""Cliente del servidor de recursos FHIR.

Implementación:
- GET `api.host/<reference>` (un recurso) o `api.host/<type>?<query>` (Bundle).
- `Authorization: Bearer <token>` y `Accept: application/fhir+json`.
- El cuerpo llega como texto y se decodifica aquí, de forma tolerante.

Notas:
- Cuerpo vacío => `{}`.
- JSON inválido => `{}` (no se propaga error; "sin datos" == "datos corruptos").
- JSON válido que no es objeto (número, lista) se devuelve tal cual.
- Los códigos 401/404/5xx no se distinguen: el cuerpo sigue la misma política.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from adapters.http_client import HttpInvoker
from core.config import ServerConfig
from core.domain.models import RequestSpec, Resource
from core.interfaces.fhir import ResourceFetcher

FHIR_JSON_ACCEPT = "application/fhir+json; charset=UTF-8"

_logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_formatter(result: Any) -> Resource:
    """Decodifica `result` como JSON estricto; ante cualquier fallo devuelve `{}`.

    `NaN` e `Infinity` se rechazan, y un anidamiento demasiado profundo
    (`RecursionError`) cuenta como cuerpo malformado.
    """

    if result == "":
        return {}
    try:
        return json.loads(result, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as exc:
        _logger.debug("malformed body ignored: %s", exc)
        return {}


class ResourceClient(ResourceFetcher):
    """Lee recursos y Bundles con un bearer token aportado por el llamador.

    Ni `reference` ni `query` ni `token` se validan ni se codifican: se
    envían tal cual y el servidor decide.
    """

    def __init__(
        self,
        config: ServerConfig,
        *,
        invoker: HttpInvoker | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or _logger
        self._invoker = invoker or HttpInvoker(config, logger=self._logger)

    @classmethod
    def from_config(
        cls,
        config: ServerConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> "ResourceClient":
        config = config or ServerConfig()
        logger = logger or _logger
        return cls(config, invoker=HttpInvoker(config, client=client, logger=logger), logger=logger)

    def _build_request(self, path: str, token: str) -> RequestSpec:
        return RequestSpec(
            url=f"{self._config.api.host}/{path}",
            method="GET",
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": FHIR_JSON_ACCEPT,
            },
            json_mode=False,
        )

    async def get_resource(self, reference: str, token: str) -> Resource:
        """Recurso FHIR individual referenciado por `reference` (p.ej. 'Patient/123')."""

        self._logger.info(
            "resource_client|get_resource reference=%s token=%s", reference, type(token).__name__
        )

        spec = self._build_request(reference, token)
        self._logger.debug("spec: %s", spec.redacted().model_dump())

        return await self._invoker.invoke(spec, parse_json_formatter)

    async def get_resources(self, resource_type: str, query: str, token: str) -> Resource:
        """Bundle de búsqueda: `query` debe venir ya codificada."""

        self._logger.info(
            "resource_client|get_resources resource_type=%s query=%s token=%s",
            resource_type,
            query,
            type(token).__name__,
        )

        spec = self._build_request(f"{resource_type}?{query}", token)
        self._logger.debug("spec: %s", spec.redacted().model_dump())

        return await self._invoker.invoke(spec, parse_json_formatter)
