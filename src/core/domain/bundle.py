"""Utilidades de lectura de Bundles FHIR."""

from __future__ import annotations

from typing import Any


def extract_bundle_entries(bundle: Any) -> list[dict[str, Any]]:
    """Devuelve los `entry[].resource` de un Bundle.

    Cualquier cosa que no sea un Bundle (incluido el `{}` de un cuerpo vacío
    o malformado) produce una lista vacía.
    """

    if not isinstance(bundle, dict) or bundle.get("resourceType") != "Bundle":
        return []
    entries = bundle.get("entry")
    if not isinstance(entries, list):
        return []
    return [
        entry["resource"]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("resource"), dict)
    ]
