"""MethodInvoker sobre httpx (transporte falso)."""

from __future__ import annotations

import httpx
import pytest

from core.domain.descriptor import MethodDescriptor
from core.domain.errors import ArgumentCountError, ErrorKind, NetworkError
from core.domain.responses import AlbumTemplateListResponse, ResponseEnvelope
from core.interfaces.invoker import Invoker
from core.services.invoker import MethodInvoker, invoke, invoke_outcome

URL = "https://api.smugmug.com/services/api/json/1.2.1/"

TEMPLATES = MethodDescriptor("smugmug.albumtemplates.get", ("APIKey", "SessionID"))


@pytest.fixture
def invoker(http: httpx.Client) -> MethodInvoker:
    return MethodInvoker(TEMPLATES, http)


def test_is_an_invoker(invoker: MethodInvoker) -> None:
    assert isinstance(invoker, Invoker)


@pytest.mark.parametrize("values", [(), ("k",), ("k", "s", "extra")])
def test_argument_count_must_match(invoker: MethodInvoker, server, values) -> None:
    with pytest.raises(ArgumentCountError) as info:
        invoker.execute(URL, values)
    assert info.value.expected == 2
    assert info.value.received == len(values)
    assert server.requests == []


def test_blank_url_is_rejected(invoker: MethodInvoker) -> None:
    with pytest.raises(ValueError):
        invoker.execute(" ", ("k", "s"))


def test_posts_method_and_present_arguments(invoker: MethodInvoker, server) -> None:
    text = invoker.execute(URL, ("key", None))

    assert text == server.body
    request = server.last
    assert request.method == "POST"
    assert str(request.url) == URL
    assert server.form() == {"method": "smugmug.albumtemplates.get", "APIKey": "key"}
    assert request.headers["User-Agent"].startswith("smugmug-client/")


def test_blank_values_are_omitted(http: httpx.Client, server) -> None:
    descriptor = MethodDescriptor("smugmug.albums.get", ("APIKey", "SessionID", "NickName"))
    MethodInvoker(descriptor, http).execute(URL, ("key", "sess", "  "))
    assert server.form() == {"method": "smugmug.albums.get", "APIKey": "key", "SessionID": "sess"}


def test_connection_reset_is_a_network_error(invoker: MethodInvoker, server) -> None:
    server.error = httpx.ReadError("connection reset by peer")
    with pytest.raises(NetworkError) as info:
        invoker.execute(URL, ("k", "s"))
    assert isinstance(info.value.cause, httpx.ReadError)
    assert info.value.__cause__ is info.value.cause
    assert info.value.kind is ErrorKind.NETWORK


def test_timeout_is_a_network_error(invoker: MethodInvoker, server) -> None:
    server.error = httpx.ReadTimeout("timed out")
    with pytest.raises(NetworkError):
        invoker.execute(URL, ("k", "s"))


def test_non_200_status_is_a_network_error(invoker: MethodInvoker, server) -> None:
    server.reply(text="oops", status=500)
    with pytest.raises(NetworkError) as info:
        invoker.execute(URL, ("k", "s"))
    assert info.value.status_code == 500
    assert info.value.cause is None


def test_put_sends_present_arguments_as_headers(http: httpx.Client, server) -> None:
    descriptor = MethodDescriptor("upload", ("Content-MD5", "X-Smug-AlbumID", "X-Smug-ImageID"))
    MethodInvoker(descriptor, http).execute_put("http://upload.smugmug.com/a.jpg", ("abc", "9", None), b"raw")

    request = server.last
    assert request.method == "PUT"
    assert request.content == b"raw"
    assert request.headers["Content-MD5"] == "abc"
    assert request.headers["X-Smug-AlbumID"] == "9"
    assert "X-Smug-ImageID" not in request.headers


def test_invoke_parses_into_requested_type(invoker: MethodInvoker, server) -> None:
    server.reply({"stat": "ok", "AlbumTemplates": [{"id": 1, "AlbumTemplateName": "Default"}]})
    response = invoke(invoker, URL, ("k", "s"), AlbumTemplateListResponse)
    assert [t.name for t in response.templates] == ["Default"]


class TestOutcome:
    def test_success(self, invoker: MethodInvoker, server) -> None:
        outcome = invoke_outcome(invoker, URL, ("k", "s"), ResponseEnvelope)
        assert outcome.ok
        assert outcome.kind is None
        assert outcome.response is not None and outcome.response.stat == "ok"

    def test_service_error_is_still_ok(self, invoker: MethodInvoker, server) -> None:
        server.reply({"stat": "fail", "code": 15, "message": "invalid session"})
        outcome = invoke_outcome(invoker, URL, ("k", "s"), ResponseEnvelope)
        assert outcome.ok
        assert outcome.response is not None and outcome.response.is_error

    @pytest.mark.parametrize(
        ("setup", "values", "kind"),
        [
            (lambda s: None, ("k",), ErrorKind.ARGUMENT_COUNT),
            (lambda s: setattr(s, "error", httpx.ConnectError("refused")), ("k", "s"), ErrorKind.NETWORK),
            (lambda s: s.reply(text="not json"), ("k", "s"), ErrorKind.RESPONSE_FORMAT),
        ],
    )
    def test_failures_carry_their_kind(self, invoker: MethodInvoker, server, setup, values, kind) -> None:
        setup(server)
        outcome = invoke_outcome(invoker, URL, values, ResponseEnvelope)
        assert not outcome.ok
        assert outcome.kind is kind
        assert outcome.response is None
