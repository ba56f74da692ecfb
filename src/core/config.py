"""Configuración del cliente (pydantic-settings, prefijo `SMUGMUG_`).

La CLI y `SmugMugClient` leen de aquí la API key, la versión de la API y los
parámetros del pool HTTP. `doctor setup` persiste valores en el `.env` del
usuario con `write_user_env_vars`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import typer
from dotenv import dotenv_values, set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "smugmug-client"
CLIENT_VERSION = "0.6.0"
DEFAULT_USER_AGENT = f"{APP_NAME}/{CLIENT_VERSION}"

ApiVersion = Literal["1.2.0", "1.2.1"]


def get_user_config_dir() -> Path:
    """`%APPDATA%`, `~/Library/Application Support` o `$XDG_CONFIG_HOME` según plataforma."""

    return Path(typer.get_app_dir(APP_NAME))


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_env_file(env_path: Path) -> dict[str, str]:
    if not env_path.is_file():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Actualiza claves del `.env` de usuario; el resto del fichero se conserva."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        if value is not None:
            set_key(env_path, key, value, quote_mode="auto")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Orden de fuentes: variables de entorno `SMUGMUG_*`, `.env` del proyecto y
    luego el `.env` del usuario (lo que escribe `doctor setup`).
    """

    model_config = SettingsConfigDict(
        env_prefix="SMUGMUG_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="API key de SmugMug (se envía como argumento APIKey).",
    )
    api_version: ApiVersion = Field(
        default="1.2.1",
        description="Versión de la API JSON a usar.",
    )
    secure: bool = Field(
        default=True,
        description="Usar el endpoint HTTPS de la API en lugar del HTTP.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout de conexión/lectura por request (segundos).",
    )
    max_connections: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Tamaño máximo del pool de conexiones compartido.",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent que identifica a la librería y su versión.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING...).",
    )
