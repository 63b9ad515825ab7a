"""Clientes FHIR (autorización + servidor de recursos).

Por qué un paquete:
- Agrupa los dos clientes que comparten `HttpInvoker` y `ServerConfig`.
- Cada módulo implementa un contrato de `core.interfaces.fhir`.
"""

from adapters.fhir.auth_client import AuthClient
from adapters.fhir.resource_client import ResourceClient, parse_json_formatter

__all__ = [
	"AuthClient",
	"ResourceClient",
	"parse_json_formatter",
]
