"""Descriptor de un método remoto.

Un descriptor es datos, no un tipo: nombre + lista ordenada de argumentos.
El orden es el contrato posicional con el servicio, así que el descriptor es
inmutable y cada versión que cambia argumentos crea uno nuevo con `extended`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.domain.arguments import ArgumentVector, to_argument
from core.domain.errors import UnsupportedArgumentError


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    arguments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("method name cannot be empty")
        # Acepta listas en construcción pero guarda siempre una tupla.
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def extended(self, *names: str) -> MethodDescriptor:
        """Nuevo descriptor con slots añadidos al final (mismo nombre)."""

        return MethodDescriptor(self.name, self.arguments + tuple(names))

    def bind(self, **named: Any) -> ArgumentVector:
        """Alinea valores por nombre de argumento con los slots del descriptor.

        - Slots sin valor quedan en `None` (se omiten en la petición).
        - Un valor no-None para un nombre inexistente es un error: la versión
          activa no acepta ese argumento.
        """

        slots = set(self.arguments)
        for key, value in named.items():
            if key not in slots and value is not None:
                raise UnsupportedArgumentError(self.name, key)
        return tuple(to_argument(named.get(arg)) for arg in self.arguments)
