"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los clientes concretos.
- Permite que la aplicación sustituya clientes por stubs en tests.
"""
