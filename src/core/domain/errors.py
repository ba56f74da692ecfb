"""Categorías de fallo del pipeline de invocación.

Tres categorías que nunca se mezclan:
- `ArgumentCountError`: el llamador rompió el contrato posicional del método.
- `NetworkError`: fallo de transporte (conexión, timeout, HTTP != 200).
- `ResponseFormatError`: llegaron bytes pero no son el JSON esperado.

Un error reportado por el servicio (`stat == "fail"`) NO es una excepción:
es un resultado tipado que el llamador inspecciona (`response.is_error`).
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminante estable para monitorización y `CallOutcome`."""

    ARGUMENT_COUNT = "argument_count"
    NETWORK = "network"
    RESPONSE_FORMAT = "response_format"


class SmugMugError(Exception):
    """Base de todos los fallos del cliente."""

    kind: ErrorKind


class ArgumentCountError(SmugMugError, ValueError):
    kind = ErrorKind.ARGUMENT_COUNT

    def __init__(self, method_name: str, expected: int, received: int) -> None:
        self.method_name = method_name
        self.expected = expected
        self.received = received
        super().__init__(
            f"{method_name} expects {expected} argument values, received {received}"
        )


class UnsupportedArgumentError(ValueError):
    """Se pasó un valor para un slot que la versión activa no define."""

    def __init__(self, method_name: str, argument: str) -> None:
        self.method_name = method_name
        self.argument = argument
        super().__init__(f"{method_name} has no argument slot named {argument!r}")


class NetworkError(SmugMugError):
    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        self.cause = cause
        self.status_code = status_code
        super().__init__(message)


class ResponseFormatError(SmugMugError):
    kind = ErrorKind.RESPONSE_FORMAT

    def __init__(self, message: str, *, raw_text: str | None = None) -> None:
        self.raw_text = raw_text
        super().__init__(message)
