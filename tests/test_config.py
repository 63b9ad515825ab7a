from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from core.config import ServerConfig, get_user_env_file, write_user_env_vars


def test_nested_fields_from_env(monkeypatch):
    monkeypatch.setenv("FHIR_BRIDGE_AUTH__HOST", "https://auth.local")
    monkeypatch.setenv("FHIR_BRIDGE_AUTH__PATH", "/token")
    monkeypatch.setenv("FHIR_BRIDGE_AUTH__CLIENT_ID", "abc")
    monkeypatch.setenv("FHIR_BRIDGE_AUTH__CLIENT_SECRET", "xyz")
    monkeypatch.setenv("FHIR_BRIDGE_API__HOST", "https://fhir.local")
    monkeypatch.setenv("FHIR_BRIDGE_HTTP_TIMEOUT_SECONDS", "5")

    config = ServerConfig(_env_file=None)

    assert config.auth.token_url == "https://auth.local/token"
    assert config.auth.grant_type == "client_credentials"
    assert config.auth.client_id == "abc"
    assert config.auth.client_secret.get_secret_value() == "xyz"
    assert config.api.host == "https://fhir.local"
    assert config.http_timeout_seconds == 5.0


def test_secret_is_not_rendered(config):
    assert "s3cr3t" not in repr(config)
    assert "s3cr3t" not in str(config.model_dump())


def test_config_is_frozen(config):
    with pytest.raises(ValidationError):
        config.http_timeout_seconds = 1.0


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        ServerConfig(_env_file=None, http_timeout_seconds=0)


def test_log_level_value(config):
    assert config.log_level_value() == logging.INFO
    assert ServerConfig(_env_file=None, log_level="debug").log_level_value() == logging.DEBUG
    assert ServerConfig(_env_file=None, log_level="nonsense").log_level_value() == logging.INFO


def test_write_user_env_vars_merges(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr("sys.platform", "linux")

    write_user_env_vars({"FHIR_BRIDGE_API__HOST": "https://a"})
    path = write_user_env_vars({"FHIR_BRIDGE_AUTH__CLIENT_ID": "abc"})

    assert path == get_user_env_file()
    assert path == tmp_path / "fhir-bridge" / ".env"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert "FHIR_BRIDGE_API__HOST=https://a" in lines
    assert "FHIR_BRIDGE_AUTH__CLIENT_ID=abc" in lines


def test_write_user_env_vars_drops_blank_values(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr("sys.platform", "linux")

    write_user_env_vars({"FHIR_BRIDGE_AUTH__PATH": "/token", "FHIR_BRIDGE_API__HOST": "https://a"})
    path = write_user_env_vars({"FHIR_BRIDGE_AUTH__PATH": ""})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == ["FHIR_BRIDGE_API__HOST=https://a"]
