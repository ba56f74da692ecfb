"""Normalización de argumentos tipados a strings de formulario."""

from __future__ import annotations

from typing import Any, Sequence

ArgumentVector = tuple[str | None, ...]


def to_argument(value: Any) -> str | None:
    """Convierte un valor tipado al string que espera el servicio.

    Reglas:
    - `None` => `None` (el argumento se omite).
    - `bool` => `"1"` / `"0"` (nunca `"true"` / `"false"`).
    - números => `str(value)`.
    - strings => sin tocar.
    """

    if value is None:
        return None
    # bool antes que int: bool es subclase de int.
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def build_argument_vector(values: Sequence[Any]) -> ArgumentVector:
    return tuple(to_argument(v) for v in values)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
