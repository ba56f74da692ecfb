"""Comandos de la CLI con un cliente sobre transporte falso."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from core.config import CLIENT_VERSION
from core.services.client import SmugMugClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_client(monkeypatch, transport):
    monkeypatch.setenv("SMUGMUG_API_KEY", "cli-key")
    monkeypatch.setattr(
        cli_main, "build_client", lambda settings: SmugMugClient(settings, transport=transport)
    )


def test_version() -> None:
    result = runner.invoke(cli_main.app, ["--version"])
    assert result.exit_code == 0
    assert CLIENT_VERSION in result.output


def test_albums_table(server) -> None:
    server.reply({"stat": "ok", "Albums": [{"id": 7, "Key": "k7", "Title": "Beach"}]})
    result = runner.invoke(cli_main.app, ["albums", "--session", "s1"])
    assert result.exit_code == 0, result.output
    assert "Beach" in result.output
    assert server.form()["APIKey"] == "cli-key"


def test_service_error_exit_code(server) -> None:
    server.reply({"stat": "fail", "code": 15, "message": "invalid session"})
    result = runner.invoke(cli_main.app, ["templates", "--session", "bad"])
    assert result.exit_code == 1
    assert "invalid session" in result.output


def test_client_failure_exit_code(server) -> None:
    server.reply(text="<html>", status=200)
    result = runner.invoke(cli_main.app, ["categories", "--session", "s1"])
    assert result.exit_code == 2
    assert "response_format" in result.output


def test_share_group_rejected_on_old_version(server) -> None:
    result = runner.invoke(cli_main.app, ["--api-version", "1.2.0", "tree", "-s", "s1", "--share-group", "g"])
    assert result.exit_code == 2
    assert server.requests == []


def test_call_prints_raw_json(server) -> None:
    server.reply({"stat": "ok", "method": "smugmug.categories.get", "Categories": []})
    result = runner.invoke(cli_main.app, ["call", "smugmug.categories.get", "SessionID=s1", "NickName=jdoe"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["method"] == "smugmug.categories.get"
    assert server.form()["NickName"] == "jdoe"


def test_call_rejects_bad_pair() -> None:
    result = runner.invoke(cli_main.app, ["call", "smugmug.logout", "SessionID"])
    assert result.exit_code == 2


def test_binary_upload(tmp_path, server) -> None:
    image = tmp_path / "dog.jpg"
    image.write_bytes(b"jpeg")
    server.reply({"stat": "ok", "Image": {"id": 3, "Key": "dK"}})

    result = runner.invoke(
        cli_main.app, ["upload", str(image), "-s", "s1", "--album-id", "4", "--binary"]
    )

    assert result.exit_code == 0, result.output
    assert server.last.method == "PUT"
    assert str(server.last.url).endswith("/dog.jpg")
    assert "dK" in result.output


@pytest.mark.parametrize("option", [["--api-version", "9.9"], ["--log-level", "LOUD"]])
def test_invalid_global_option_is_a_usage_error(server, option) -> None:
    result = runner.invoke(cli_main.app, [*option, "albums", "-s", "s1"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
    assert server.requests == []
