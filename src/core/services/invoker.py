"""Invocador genérico de métodos remotos sobre httpx.

Un único `MethodInvoker`, parametrizado por un `MethodDescriptor` (datos, no
un tipo), hace todo el trabajo mecánico que comparten métodos y versiones:

1. Comprueba que hay un valor por slot (`ArgumentCountError` si no).
2. Serializa `method=<nombre>` + los argumentos presentes como formulario.
3. Ejecuta una única petición con el `httpx.Client` inyectado (sin reintentos).
4. Envuelve cualquier fallo de transporte o status != 200 en `NetworkError`.
5. Devuelve el cuerpo tal cual; el parseo es de `ResponseEnvelope.parse`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

import httpx

from core.domain.arguments import is_blank
from core.domain.descriptor import MethodDescriptor
from core.domain.entities import EntitySchema
from core.domain.errors import ArgumentCountError, ErrorKind, NetworkError, SmugMugError
from core.domain.responses import ResponseEnvelope
from core.interfaces.invoker import Invoker

log = logging.getLogger(__name__)

R = TypeVar("R", bound=ResponseEnvelope)

# Argumentos cuyo valor no debe acabar en los logs.
_REDACTED_ARGUMENTS = frozenset({"Password", "PasswordHash", "SitePassword", "Data"})


def _loggable(name: str, value: str) -> str:
    if name in _REDACTED_ARGUMENTS:
        return f"<{len(value)} chars>"
    return value


def _header_value(value: str) -> str | bytes:
    """httpx solo admite cabeceras `str` en ASCII; el resto viaja como bytes UTF-8."""

    return value if value.isascii() else value.encode("utf-8")


class MethodInvoker:
    """Implementación de `core.interfaces.invoker.Invoker` sobre `httpx.Client`."""

    def __init__(self, descriptor: MethodDescriptor, http: httpx.Client) -> None:
        self.descriptor = descriptor
        self._http = http
        log.debug("Created invoker for method %s", descriptor.name)

    def _check(self, server_url: str, argument_values: Sequence[str | None]) -> tuple[str | None, ...]:
        if is_blank(server_url):
            raise ValueError(f"server_url cannot be empty (method {self.descriptor.name})")
        values = tuple(argument_values)
        if len(values) != self.descriptor.arity:
            raise ArgumentCountError(self.descriptor.name, self.descriptor.arity, len(values))
        return values

    def present_arguments(self, values: Sequence[str | None]) -> dict[str, str]:
        """Pares (nombre, valor) con valor presente, en el orden del descriptor."""

        out: dict[str, str] = {}
        for name, value in zip(self.descriptor.arguments, values):
            if is_blank(name) or is_blank(value):
                continue
            log.debug("\tAdding argument name=[%s] value=[%s]", name, _loggable(name, value))
            out[name] = value
        return out

    def build_form(self, argument_values: Sequence[str | None]) -> dict[str, str]:
        form = {"method": self.descriptor.name}
        form.update(self.present_arguments(argument_values))
        return form

    def execute(self, server_url: str, argument_values: Sequence[str | None]) -> str:
        values = self._check(server_url, argument_values)
        log.debug("Executing method %s using service URL %s", self.descriptor.name, server_url)
        return self._send("POST", server_url, data=self.build_form(values))

    def execute_put(
        self, server_url: str, argument_values: Sequence[str | None], content: bytes
    ) -> str:
        values = self._check(server_url, argument_values)
        log.debug("Executing binary %s (%d bytes) to %s", self.descriptor.name, len(content), server_url)
        headers = {name: _header_value(value) for name, value in self.present_arguments(values).items()}
        return self._send("PUT", server_url, headers=headers, content=content)

    def _send(self, http_method: str, url: str, **kwargs: object) -> str:
        try:
            response = self._http.request(http_method, url, **kwargs)  # type: ignore[arg-type]
        except (httpx.HTTPError, OSError) as exc:
            log.error("HTTP %s for %s failed: %s", http_method, self.descriptor.name, exc)
            raise NetworkError(
                f"{http_method} {url} failed for {self.descriptor.name}: {exc}", cause=exc
            ) from exc

        log.debug("\tReceived HTTP status code %d", response.status_code)
        if response.status_code != httpx.codes.OK:
            message = (
                f"HTTP status {response.status_code} returned by {url} for "
                f"{self.descriptor.name}; 200 was expected"
            )
            log.error(message)
            raise NetworkError(message, status_code=response.status_code)

        text = response.text
        log.debug("\tRead response, %d characters", len(text))
        return text


@dataclass(frozen=True)
class CallOutcome(Generic[R]):
    """Resultado explícito: o una respuesta tipada o un error categorizado."""

    response: R | None = None
    error: SmugMugError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None


def invoke(
    invoker: Invoker,
    server_url: str,
    argument_values: Sequence[str | None],
    response_type: type[R],
    schema: EntitySchema | None = None,
) -> R:
    """Ejecuta y parsea. Los tres tipos de fallo se propagan sin tocar."""

    text = invoker.execute(server_url, argument_values)
    return response_type.parse(text, schema)


def invoke_outcome(
    invoker: Invoker,
    server_url: str,
    argument_values: Sequence[str | None],
    response_type: type[R],
    schema: EntitySchema | None = None,
) -> CallOutcome[R]:
    try:
        return CallOutcome(response=invoke(invoker, server_url, argument_values, response_type, schema))
    except SmugMugError as exc:
        return CallOutcome(error=exc)
