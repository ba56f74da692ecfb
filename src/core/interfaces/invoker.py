"""Contrato del ejecutor de métodos remotos.

Por qué Protocol:
- `SmugMugClient` solo necesita "ejecuta este descriptor contra esta URL".
- Permite sustituir el invocador HTTP por uno en memoria en tests.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.descriptor import MethodDescriptor


@runtime_checkable
class Invoker(Protocol):
    """Ejecuta un `MethodDescriptor` y devuelve el texto crudo de la respuesta.

    Reglas:
    - `len(argument_values)` debe coincidir con `descriptor.arity`.
    - Los fallos de transporte se elevan como `NetworkError`.
    - No interpreta el JSON: eso es trabajo de las respuestas tipadas.
    """

    descriptor: MethodDescriptor

    def execute(self, server_url: str, argument_values: Sequence[str | None]) -> str:
        """POST de formulario con `method` + argumentos presentes."""

        ...

    def execute_put(
        self, server_url: str, argument_values: Sequence[str | None], content: bytes
    ) -> str:
        """PUT binario: los argumentos viajan como cabeceras HTTP."""

        ...
