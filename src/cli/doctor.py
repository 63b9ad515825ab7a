"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import ServerConfig, write_user_env_vars

_console = Console()


async def _check_http(config: ServerConfig, url: str) -> tuple[bool, str]:
    if not url:
        return False, "not configured"
    try:
        async with build_async_client(config) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _mask(value: str) -> str:
    if not value:
        return ""
    return value[:2] + "***" if len(value) > 4 else "***"


def run_doctor(config: ServerConfig) -> None:
    """Show the effective configuration and check connectivity to both servers."""

    table = Table(title="fhir-bridge doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    auth = config.auth
    table.add_row("Auth URL", "OK" if auth.host else "MISSING", auth.token_url)
    table.add_row("Grant type", "OK", auth.grant_type)
    table.add_row("Client id", "OK" if auth.client_id else "MISSING", auth.client_id)
    secret = auth.client_secret.get_secret_value()
    table.add_row("Client secret", "OK" if secret else "MISSING", _mask(secret))
    table.add_row("API host", "OK" if config.api.host else "MISSING", config.api.host)
    table.add_row("Timeout", "OK", f"{config.http_timeout_seconds:g}s")

    # Connectivity (best-effort)
    ok_auth, detail_auth = asyncio.run(_check_http(config, auth.host))
    table.add_row("Auth connectivity", "OK" if ok_auth else "FAIL", detail_auth)
    ok_api, detail_api = asyncio.run(_check_http(config, f"{config.api.host}/metadata" if config.api.host else ""))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not (ok_auth and ok_api):
        _console.print("\n[yellow]Note:[/yellow] run `fhir-bridge setup` to store server settings.")


def setup_servers() -> None:
    """Interactive setup (stores server config in the user config .env)."""

    auth_host = typer.prompt("Auth server host", default="", show_default=False).strip()
    auth_path = typer.prompt("Token path", default="/oauth2/token", show_default=True).strip()
    grant_type = typer.prompt("Grant type", default="client_credentials", show_default=True).strip()
    client_id = typer.prompt("Client id").strip()
    client_secret = typer.prompt("Client secret", hide_input=True, confirmation_prompt=False).strip()
    api_host = typer.prompt("FHIR API host").strip()

    if not auth_host or not api_host:
        raise typer.BadParameter("auth host and FHIR API host are required")

    env_path = write_user_env_vars(
        {
            "FHIR_BRIDGE_AUTH__HOST": auth_host,
            "FHIR_BRIDGE_AUTH__PATH": auth_path,
            "FHIR_BRIDGE_AUTH__GRANT_TYPE": grant_type,
            "FHIR_BRIDGE_AUTH__CLIENT_ID": client_id,
            "FHIR_BRIDGE_AUTH__CLIENT_SECRET": client_secret,
            "FHIR_BRIDGE_API__HOST": api_host,
        }
    )

    _console.print(f"[green]Saved server config to:[/green] {env_path}")
