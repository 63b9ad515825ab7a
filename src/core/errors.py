"""Errores del Core.

Por qué una jerarquía propia:
- La aplicación captura `TransportError` sin conocer httpx.
- Los cuerpos malformados no son errores: los clientes los degradan a `{}`.
"""

from __future__ import annotations

from core.domain.models import RequestSpec


class FhirBridgeError(Exception):
    """Base de los errores propagados por los clientes."""


class TransportError(FhirBridgeError):
    """Fallo de red/conexión/protocolo durante el intercambio HTTP.

    `cause` es la excepción original del transporte (también encadenada en
    `__cause__`). Los códigos HTTP 4xx/5xx no son `TransportError`.
    """

    def __init__(self, cause: BaseException, spec: RequestSpec | None = None) -> None:
        self.cause = cause
        self.spec = spec
        target = f"{spec.method} {spec.url}" if spec else "request"
        super().__init__(f"{target} failed: {cause!r}")
