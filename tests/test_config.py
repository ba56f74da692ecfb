"""AppSettings y persistencia del .env de usuario."""

from __future__ import annotations

import sys

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_USER_AGENT,
    AppSettings,
    get_user_config_dir,
    read_env_file,
    write_user_env_vars,
)


def test_defaults(monkeypatch) -> None:
    for name in ("SMUGMUG_API_KEY", "SMUGMUG_API_VERSION", "SMUGMUG_SECURE"):
        monkeypatch.delenv(name, raising=False)
    settings = AppSettings(_env_file=None)
    assert settings.api_key is None
    assert settings.api_version == "1.2.1"
    assert settings.secure is True
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_environment_prefix(monkeypatch) -> None:
    monkeypatch.setenv("SMUGMUG_API_KEY", "from-env")
    monkeypatch.setenv("SMUGMUG_API_VERSION", "1.2.0")
    monkeypatch.setenv("SMUGMUG_MAX_CONNECTIONS", "5")
    settings = AppSettings(_env_file=None)
    assert settings.api_key == "from-env"
    assert settings.api_version == "1.2.0"
    assert settings.max_connections == 5


def test_rejects_unknown_version() -> None:
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, api_version="9.9")


def test_env_file_is_read(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("SMUGMUG_API_KEY", raising=False)
    env = write_user_env_vars({"SMUGMUG_API_KEY": "saved"}, tmp_path / "conf" / ".env")
    assert AppSettings(_env_file=env).api_key == "saved"


def test_write_user_env_vars_merges(tmp_path) -> None:
    path = tmp_path / ".env"
    path.write_text("# old\nSMUGMUG_API_VERSION='1.2.0'\n", encoding="utf-8")

    write_user_env_vars({"SMUGMUG_API_KEY": "k", "SMUGMUG_SECURE": None}, path)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("# old\n")
    assert "SMUGMUG_API_KEY=k" in text.splitlines()
    assert read_env_file(path) == {"SMUGMUG_API_VERSION": "1.2.0", "SMUGMUG_API_KEY": "k"}


def test_write_user_env_vars_replaces_existing_key(tmp_path) -> None:
    path = tmp_path / ".env"
    write_user_env_vars({"SMUGMUG_API_KEY": "first"}, path)
    write_user_env_vars({"SMUGMUG_API_KEY": "second"}, path)
    assert read_env_file(path) == {"SMUGMUG_API_KEY": "second"}


def test_read_env_file_missing(tmp_path) -> None:
    assert read_env_file(tmp_path / "nope.env") == {}


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG layout")
def test_user_config_dir_follows_xdg(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_user_config_dir() == tmp_path / "smugmug-client"
