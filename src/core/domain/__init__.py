"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2).
- El dominio no conoce httpx ni la CLI: solo peticiones y recursos FHIR.
"""
