from __future__ import annotations

import pytest
from pydantic import SecretStr

from core.config import ApiServerConfig, AuthServerConfig, ServerConfig

AUTH_HOST = "https://auth.example.org"
AUTH_PATH = "/oauth2/token"
API_HOST = "https://fhir.example.org/R4"


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(
        _env_file=None,
        auth=AuthServerConfig(
            host=AUTH_HOST,
            path=AUTH_PATH,
            grant_type="client_credentials",
            client_id="my-client",
            client_secret=SecretStr("s3cr3t"),
        ),
        api=ApiServerConfig(host=API_HOST),
    )
