"""Cliente del servidor de autorización (client-credentials grant).

Implementación:
- POST `auth.host + auth.path` con `grant_type` en formulario.
- `Authorization: Basic base64(client_id:client_secret)`.
- El transporte decodifica JSON; la respuesta se devuelve tal cual.

Notas:
- No hay caché ni refresco del token: el llamador gestiona su vida útil.
- Un 401 no es un error aquí; llega como cuerpo de la respuesta.
"""

from __future__ import annotations

import base64
import logging

import httpx

from adapters.http_client import HttpInvoker
from core.config import ServerConfig
from core.domain.models import RequestSpec, TokenResponse
from core.interfaces.fhir import Authenticator

_logger = logging.getLogger(__name__)


def basic_credentials(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


class AuthClient(Authenticator):
    """Obtiene una respuesta de token del endpoint configurado."""

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
    ) -> "AuthClient":
        config = config or ServerConfig()
        logger = logger or _logger
        return cls(config, invoker=HttpInvoker(config, client=client, logger=logger), logger=logger)

    def build_request(self) -> RequestSpec:
        auth = self._config.auth
        return RequestSpec(
            url=auth.token_url,
            method="POST",
            form={"grant_type": auth.grant_type},
            headers={
                "Authorization": basic_credentials(auth.client_id, auth.client_secret.get_secret_value()),
            },
            json_mode=True,
        )

    async def authenticate(self) -> TokenResponse:
        self._logger.info("auth_client|authenticate")

        spec = self.build_request()
        self._logger.debug("spec: %s", spec.redacted().model_dump())

        return await self._invoker.invoke(spec)
