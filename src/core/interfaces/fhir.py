"""Contratos de los clientes FHIR.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- La aplicación depende de estas firmas, no de httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Resource, TokenResponse


@runtime_checkable
class Authenticator(Protocol):
    async def authenticate(self) -> TokenResponse:
        """Intercambia credenciales de cliente por una respuesta de token."""

        ...


@runtime_checkable
class ResourceFetcher(Protocol):
    """Lectura de recursos con un bearer token aportado por el llamador."""

    async def get_resource(self, reference: str, token: str) -> Resource:
        ...

    async def get_resources(self, resource_type: str, query: str, token: str) -> Resource:
        ...
