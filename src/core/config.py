"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los clientes HTTP reciben un `ServerConfig` ya validado y nunca lo mutan.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "fhir-bridge"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "fhir-bridge"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "fhir-bridge"
    return Path.home() / ".config" / "fhir-bridge"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables `FHIR_BRIDGE_*` en el .env global del usuario.

    Las claves con valor vacío se eliminan del fichero, así un prompt en
    blanco de `fhir-bridge setup` vuelve al default de `ServerConfig`.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged: dict[str, str] = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            key, sep, value = line.partition("=")
            if sep and not key.lstrip().startswith("#"):
                merged[key.strip()] = value.strip()

    for key, value in values.items():
        if value:
            merged[key] = value
        else:
            merged.pop(key, None)

    lines = ["# fhir-bridge user config (.env)"]
    lines.extend(f"{key}={merged[key]}" for key in sorted(merged))
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AuthServerConfig(BaseModel):
    """Servidor de autorización (client-credentials grant)."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        default="",
        description="Origen del servidor de autorización (p.ej. 'https://auth.example.org').",
    )
    path: str = Field(
        default="",
        description="Ruta del token endpoint, concatenada tal cual a `host`.",
    )
    grant_type: str = Field(
        default="client_credentials",
        min_length=1,
        description="Valor enviado como `grant_type` en el formulario.",
    )
    client_id: str = Field(default="", description="Identificador del cliente OAuth2.")
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Secreto del cliente OAuth2 (nunca se imprime).",
    )

    @property
    def token_url(self) -> str:
        return self.host + self.path


class ApiServerConfig(BaseModel):
    """Servidor de recursos FHIR."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        default="",
        description="Base URL del servidor FHIR (p.ej. 'https://fhir.example.org/R4').",
    )


class ServerConfig(BaseSettings):
    """Configuración central de los clientes.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Inmutable (`frozen`): se construye una vez y se comparte entre llamadas
      concurrentes sin coordinación.

    Los campos anidados se leen con `__` como separador, p.ej.
    `FHIR_BRIDGE_AUTH__CLIENT_ID`.
    """

    model_config = SettingsConfigDict(
        env_prefix="FHIR_BRIDGE_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    auth: AuthServerConfig = Field(default_factory=AuthServerConfig)
    api: ApiServerConfig = Field(default_factory=ApiServerConfig)

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="fhir-bridge/0.1",
        min_length=1,
        description="User-Agent de las peticiones salientes.",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING...).",
    )

    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO
