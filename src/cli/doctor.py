"""Doctor command for environment diagnostics."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_http_client
from core.config import AppSettings, write_user_env_vars
from core.services.versions import PROFILES, get_profile

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        with build_http_client(settings) as client:
            response = client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    profile = get_profile(settings.api_version)

    table = Table(title="smugmug-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.api_key:
        table.add_row("API key", "OK", f"{len(settings.api_key)} chars")
    else:
        table.add_row("API key", "MISSING", "Run `smugmug-client doctor setup` or set SMUGMUG_API_KEY")
    table.add_row("API version", "OK", profile.version)
    table.add_row("Methods", "OK", str(len(profile.methods)))

    api_url = profile.api_url(settings.secure)
    ok_http, detail_http = _check_http(api_url, settings)
    table.add_row("API endpoint", "OK" if ok_http else "FAIL", f"{api_url} -> {detail_http}")

    _console.print(table)

    if not settings.secure:
        _console.print("\n[yellow]Note:[/yellow] HTTPS is disabled; credentials travel in clear text.")


@app.command()
def setup() -> None:
    """Interactive setup (stores the API key in the user config .env)."""

    api_key = typer.prompt("SmugMug API key", hide_input=True, confirmation_prompt=False).strip()
    version = typer.prompt(
        "API version",
        default=max(PROFILES),
        show_default=True,
    ).strip()

    if not api_key:
        raise typer.BadParameter("api key is required")
    if version not in PROFILES:
        raise typer.BadParameter(f"unknown API version; expected one of {', '.join(sorted(PROFILES))}")

    env_path = write_user_env_vars({"SMUGMUG_API_KEY": api_key, "SMUGMUG_API_VERSION": version})

    _console.print(f"[green]Saved config to:[/green] {env_path}")
