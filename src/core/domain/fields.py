"""Acceso tolerante a campos de objetos JSON.

El servicio omite campos en vez de mandar `null`, y el tipo de algunos campos
ha variado entre versiones (p.ej. booleanos como `0`/`1`). Todas las entidades
leen sus campos a través de `lookup`, que devuelve un estado explícito:

- PRESENT: el campo existe y se pudo convertir al tipo pedido.
- ABSENT: objeto ausente, campo ausente o `null`.
- MISMATCH: el campo existe pero no encaja con el tipo pedido.

Los helpers `get_*` colapsan ABSENT y MISMATCH en `None`; un MISMATCH además
se registra como warning. Nunca lanzan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

log = logging.getLogger(__name__)


class FieldState(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class FieldLookup:
    state: FieldState
    value: Any = None

    @property
    def present(self) -> bool:
        return self.state is FieldState.PRESENT


_ABSENT = FieldLookup(FieldState.ABSENT)
_MISMATCH = FieldLookup(FieldState.MISMATCH)


class _Mismatch(Exception):
    pass


def _as_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise _Mismatch


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise _Mismatch
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise _Mismatch from None
    raise _Mismatch


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise _Mismatch
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise _Mismatch from None
    raise _Mismatch


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("1", "true"):
            return True
        if v in ("0", "false"):
            return False
    raise _Mismatch


def _as_object(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    raise _Mismatch


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    raise _Mismatch


_CASTS: dict[str, Callable[[Any], Any]] = {
    "str": _as_str,
    "int": _as_int,
    "float": _as_float,
    "bool": _as_bool,
    "object": _as_object,
    "list": _as_list,
    "raw": lambda value: value,
}


def lookup(obj: Mapping[str, Any] | None, name: str | None, kind: str = "raw") -> FieldLookup:
    if obj is None or name is None:
        return _ABSENT
    if not isinstance(obj, Mapping):
        log.warning("Cannot read field %s: container is %s, not an object", name, type(obj).__name__)
        return _MISMATCH
    raw = obj.get(name)
    if raw is None:
        return _ABSENT
    try:
        return FieldLookup(FieldState.PRESENT, _CASTS[kind](raw))
    except _Mismatch:
        log.warning("Field %s has unexpected value %r (wanted %s)", name, raw, kind)
        return _MISMATCH


def get_raw(obj: Mapping[str, Any] | None, name: str) -> Any:
    return lookup(obj, name, "raw").value


def get_str(obj: Mapping[str, Any] | None, name: str) -> str | None:
    return lookup(obj, name, "str").value


def get_int(obj: Mapping[str, Any] | None, name: str) -> int | None:
    return lookup(obj, name, "int").value


def get_float(obj: Mapping[str, Any] | None, name: str) -> float | None:
    return lookup(obj, name, "float").value


def get_bool(obj: Mapping[str, Any] | None, name: str) -> bool | None:
    return lookup(obj, name, "bool").value


def get_object(obj: Mapping[str, Any] | None, name: str) -> dict[str, Any] | None:
    return lookup(obj, name, "object").value


def get_list(obj: Mapping[str, Any] | None, name: str) -> list[Any] | None:
    return lookup(obj, name, "list").value


def get_nested_int(obj: Mapping[str, Any] | None, name: str, inner: str = "id") -> int | None:
    """Lee `obj[name][inner]` (p.ej. `{"Template": {"id": 3}}`)."""

    return get_int(get_object(obj, name), inner)
