"""Wrapper de httpx.

Por qué un builder:
- Estandariza timeouts, User-Agent y límites del pool para todas las llamadas.
- El cliente es propiedad de quien lo crea: se crea una vez, se reutiliza entre
  llamadas (y entre hilos) y se cierra al terminar. No hay singleton global.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_http_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono con pool de conexiones.

    `httpx.Client` es thread-safe: cada llamada en vuelo toma una conexión del
    pool y la devuelve al terminar (o al fallar).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, text/plain;q=0.9, */*;q=0.5",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_connections,
        ),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
