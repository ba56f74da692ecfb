"""CLI principal (`smugmug-client`).

Cada comando crea su propio `SmugMugClient` (y por tanto su pool HTTP) y lo
cierra al terminar. Códigos de salida:
- 0: ok.
- 1: el servicio respondió `stat=fail` (se muestra código y mensaje).
- 2: fallo del cliente (`SmugMugError`) o argumentos inválidos.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from cli import doctor
from cli.ui_components import (
    build_albums_table,
    build_categories_table,
    build_category_tree,
    build_response_panel,
    build_templates_table,
    print_banner,
)
from core.config import CLIENT_VERSION, AppSettings
from core.domain.errors import SmugMugError, UnsupportedArgumentError
from core.domain.responses import ResponseEnvelope
from core.logging_setup import configure_logging
from core.services.client import SmugMugClient
from core.services.versions import UnsupportedMethodError

app = typer.Typer(
    no_args_is_help=True,
    help="Cliente de línea de comandos para la API JSON de SmugMug (1.2.0 / 1.2.1).",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

SessionOption = typer.Option(
    ..., "--session", "-s", envvar="SMUGMUG_SESSION_ID", help="SessionID devuelto por login."
)


def build_client(settings: AppSettings) -> SmugMugClient:
    return SmugMugClient(settings)


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj["settings"]


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"smugmug-client {CLIENT_VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    api_version: Optional[str] = typer.Option(None, "--api-version", help="1.2.0 o 1.2.1."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING..."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Muestra la versión y sale."
    ),
) -> None:
    overrides = {k: v for k, v in {"api_version": api_version, "log_level": log_level}.items() if v is not None}
    try:
        settings = AppSettings(**overrides)
        configure_logging(settings.log_level)
    except ValidationError as exc:
        detail = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
        raise typer.BadParameter(detail) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    ctx.obj = {"settings": settings}


@contextmanager
def _handled() -> Iterator[None]:
    try:
        yield
    except SmugMugError as exc:
        _console.print(f"[red]{exc.kind.value}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except (UnsupportedArgumentError, UnsupportedMethodError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _check_service(response: ResponseEnvelope) -> None:
    if response.is_error:
        _console.print(build_response_panel(response))
        raise typer.Exit(code=1)


@app.command()
def login(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Email o nickname de la cuenta."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Login con contraseña; imprime el SessionID para el resto de comandos."""

    settings = _settings(ctx)
    print_banner(_console, settings.api_version)
    with _handled(), build_client(settings) as client:
        response = client.login_with_password(email, password)
    _check_service(response)
    _console.print(f"[green]Session:[/green] {response.session_id}")
    _console.print(f"[dim]User {response.nick_name} ({response.user_id}), account {response.account_type}[/dim]")


@app.command()
def albums(
    ctx: typer.Context,
    session: str = SessionOption,
    nick_name: Optional[str] = typer.Option(None, "--nick"),
    heavy: bool = typer.Option(False, "--heavy"),
) -> None:
    """Lista los álbumes del usuario."""

    with _handled(), build_client(_settings(ctx)) as client:
        response = client.get_albums(session, nick_name=nick_name, heavy=heavy or None)
    _check_service(response)
    _console.print(build_albums_table(response.albums))


@app.command()
def templates(ctx: typer.Context, session: str = SessionOption) -> None:
    """Lista las plantillas de álbum."""

    with _handled(), build_client(_settings(ctx)) as client:
        response = client.get_album_templates(session)
    _check_service(response)
    _console.print(build_templates_table(response.templates))


@app.command()
def categories(
    ctx: typer.Context,
    session: str = SessionOption,
    nick_name: Optional[str] = typer.Option(None, "--nick"),
) -> None:
    with _handled(), build_client(_settings(ctx)) as client:
        response = client.get_categories(session, nick_name=nick_name)
    _check_service(response)
    _console.print(build_categories_table(response.categories))


@app.command()
def tree(
    ctx: typer.Context,
    session: str = SessionOption,
    nick_name: Optional[str] = typer.Option(None, "--nick"),
    share_group: Optional[str] = typer.Option(None, "--share-group", help="Solo API 1.2.1."),
) -> None:
    """Árbol categorías -> subcategorías -> álbumes."""

    with _handled(), build_client(_settings(ctx)) as client:
        response = client.get_tree(session, nick_name=nick_name, share_group=share_group)
    _check_service(response)
    _console.print(build_category_tree(response.categories, label=nick_name or "Tree"))


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    session: str = SessionOption,
    album_id: Optional[int] = typer.Option(None, "--album-id"),
    image_id: Optional[int] = typer.Option(None, "--image-id", help="Reemplaza una imagen (solo --binary)."),
    caption: Optional[str] = typer.Option(None, "--caption"),
    keywords: Optional[str] = typer.Option(None, "--keywords"),
    binary: bool = typer.Option(False, "--binary", help="Sube por HTTP PUT en lugar de Base64."),
) -> None:
    """Sube una imagen a un álbum."""

    data = path.read_bytes()
    with _handled(), build_client(_settings(ctx)) as client:
        if binary:
            try:
                response = client.upload_image_binary(
                    session,
                    path.name,
                    data,
                    album_id=album_id,
                    image_id=image_id,
                    caption=caption,
                    keywords=keywords,
                )
            except ValueError as exc:
                raise typer.BadParameter(str(exc)) from exc
        else:
            if album_id is None:
                raise typer.BadParameter("--album-id is required")
            response = client.upload_image(session, album_id, path.name, data, caption=caption, keywords=keywords)
    _check_service(response)
    _console.print(f"[green]Uploaded[/green] image {response.entity_id} (key {response.entity_key})")


def _parse_pairs(pairs: List[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected Name=value, got {pair!r}")
        out[name.strip()] = value
    return out


@app.command()
def call(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="Nombre completo, p.ej. smugmug.albums.get"),
    pairs: Optional[List[str]] = typer.Argument(None, help="Argumentos Name=value."),
) -> None:
    """Invoca cualquier método del perfil activo e imprime el JSON recibido."""

    arguments = _parse_pairs(pairs or [])
    with _handled(), build_client(_settings(ctx)) as client:
        response = client.call(method, **arguments)
    if response.raw_text.strip():
        _console.print_json(response.raw_text)
    _check_service(response)


def run() -> None:
    app()
