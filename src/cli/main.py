"""CLI de fhir-bridge (Typer).

Por qué una CLI:
- Permite probar credenciales y consultas contra un servidor FHIR real sin
  escribir código.
- Es el único lugar que interpreta la respuesta de token (`access_token`);
  los clientes la tratan como dato opaco.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from adapters.fhir import AuthClient, ResourceClient
from cli.doctor import run_doctor, setup_servers
from cli.ui_components import build_bundle_table, configure_logging, render_json
from core.config import ServerConfig
from core.errors import TransportError

app = typer.Typer(no_args_is_help=True, help="Authenticated FHIR resource client.")

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    config = ServerConfig()
    configure_logging(logging.DEBUG if verbose else config.log_level_value(), _err_console)
    ctx.obj = config


def _fail(exc: TransportError) -> NoReturn:
    _err_console.print(f"[red]Transport error:[/red] {exc.cause}")
    raise typer.Exit(code=1)


def _access_token(token_response: Any) -> str:
    if isinstance(token_response, dict) and isinstance(token_response.get("access_token"), str):
        return token_response["access_token"]
    _err_console.print("[red]No access_token in token response:[/red]")
    render_json(_err_console, token_response)
    raise typer.Exit(code=1)


async def _resolve_token(config: ServerConfig, token: str | None) -> str:
    if token:
        return token
    return _access_token(await AuthClient.from_config(config).authenticate())


@app.command()
def token(ctx: typer.Context) -> None:
    """Request a token with the client-credentials grant and print the response."""

    config: ServerConfig = ctx.obj
    try:
        result = asyncio.run(AuthClient.from_config(config).authenticate())
    except TransportError as exc:
        _fail(exc)
    render_json(_console, result)


@app.command()
def get(
    ctx: typer.Context,
    reference: str = typer.Argument(..., help="Relative reference, e.g. Patient/123."),
    bearer: Optional[str] = typer.Option(None, "--token", "-t", help="Use this bearer token instead of authenticating."),
) -> None:
    """Fetch a single resource."""

    config: ServerConfig = ctx.obj

    async def _run() -> Any:
        access = await _resolve_token(config, bearer)
        return await ResourceClient.from_config(config).get_resource(reference, access)

    try:
        result = asyncio.run(_run())
    except TransportError as exc:
        _fail(exc)
    render_json(_console, result)


@app.command()
def search(
    ctx: typer.Context,
    resource_type: str = typer.Argument(..., help="Resource type, e.g. Patient."),
    query: str = typer.Argument("", help="Already-encoded query string, e.g. name=Smith."),
    bearer: Optional[str] = typer.Option(None, "--token", "-t", help="Use this bearer token instead of authenticating."),
    table: bool = typer.Option(False, "--table", help="Render bundle entries as a table."),
) -> None:
    """Search resources of a type and print the resulting Bundle."""

    config: ServerConfig = ctx.obj

    async def _run() -> Any:
        access = await _resolve_token(config, bearer)
        return await ResourceClient.from_config(config).get_resources(resource_type, query, access)

    try:
        result = asyncio.run(_run())
    except TransportError as exc:
        _fail(exc)
    if table:
        _console.print(build_bundle_table(result))
    else:
        render_json(_console, result)


@app.command()
def doctor(ctx: typer.Context) -> None:
    """Show the effective configuration and check connectivity."""

    run_doctor(ctx.obj)


@app.command()
def setup() -> None:
    """Interactive setup; stores server settings in the user config .env."""

    setup_servers()


def run() -> None:
    app()
