"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from core.domain.bundle import extract_bundle_entries


def configure_logging(level: int, console: Console | None = None) -> None:
    """Enruta el logging estándar a Rich (stderr por defecto)."""

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(name)s: %(message)s", handlers=[handler], force=True)


def render_json(console: Console, data: Any) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    console.print(Syntax(text, "json", word_wrap=True))


def build_bundle_table(bundle: Any) -> Table:
    """Tabla Rich con una fila por `entry[].resource` del Bundle."""

    total = bundle.get("total") if isinstance(bundle, dict) else None
    title = "Bundle" if total is None else f"Bundle (total={total})"

    table = Table(title=title)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Id", style="white")
    table.add_column("Last updated", style="dim")
    for resource in extract_bundle_entries(bundle):
        meta = resource.get("meta") if isinstance(resource.get("meta"), dict) else {}
        table.add_row(
            str(resource.get("resourceType", "")),
            str(resource.get("id", "")),
            str(meta.get("lastUpdated", "")),
        )
    return table
