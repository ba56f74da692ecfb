"""Dominio del cliente: descriptores, entidades, respuestas y errores.

- Estructuras puras (Pydantic v2 / dataclasses inmutables).
- El dominio no conoce HTTP ni la CLI: solo el contrato de la API.
"""
