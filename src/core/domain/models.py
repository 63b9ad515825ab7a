"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- `RequestSpec` describe una petición saliente de forma inmutable: se
  construye por llamada y no se reutiliza ni se muta tras emitirla.
- Las respuestas FHIR no tienen esquema fijo en esta capa, así que se
  representan como árboles JSON genéricos (`JsonValue`).
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]
# Recurso o Bundle decodificado; normalmente un dict, sin validar.
Resource = JsonValue
TokenResponse = Any

_REDACTED = "***"


class RequestSpec(BaseModel):
    """Descripción en memoria de una única llamada HTTP."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="URL absoluta de destino.")
    method: Literal["GET", "POST"] = Field(default="GET")
    headers: dict[str, str] = Field(default_factory=dict)
    form: dict[str, str] | None = Field(
        default=None,
        description="Cuerpo `application/x-www-form-urlencoded`, si lo hay.",
    )
    json_mode: bool = Field(
        default=False,
        description="Si es True el transporte decodifica el cuerpo como JSON.",
    )

    def redacted(self) -> "RequestSpec":
        """Copia con el valor de `Authorization` enmascarado (para trazas)."""

        headers = {
            name: (f"{value.split(' ', 1)[0]} {_REDACTED}" if name.lower() == "authorization" else value)
            for name, value in self.headers.items()
        }
        return self.model_copy(update={"headers": headers})
