"""SmugMugClient: enrutado de métodos, defaults y subidas."""

from __future__ import annotations

import base64
import hashlib
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import parse_qsl

import httpx
import pytest

from conftest import make_settings
from core.domain.descriptor import MethodDescriptor
from core.domain.errors import ArgumentCountError, ErrorKind, UnsupportedArgumentError
from core.domain.requests import AlbumSettings
from core.domain.responses import AlbumListResponse, LoginResponse, ResponseEnvelope
from core.services.client import SmugMugClient
from core.services.versions import UnsupportedMethodError

IMAGE = b"\xff\xd8\xff\xe0fake-jpeg-bytes"
IMAGE_MD5 = hashlib.md5(IMAGE).hexdigest()


class TestRouting:
    def test_login_uses_api_key_from_settings(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Login": {"Session": {"id": "s1"}, "User": {"id": 3}}})

        response = client.login_with_password("me@example.com", "secret")

        assert isinstance(response, LoginResponse)
        assert response.session_id == "s1"
        assert str(server.last.url) == "https://api.smugmug.com/services/api/json/1.2.1/"
        assert server.form() == {
            "method": "smugmug.login.withPassword",
            "APIKey": "test-key",
            "EmailAddress": "me@example.com",
            "Password": "secret",
        }

    def test_explicit_api_key_wins(self, client: SmugMugClient, server) -> None:
        client.login_anonymously(api_key="other")
        assert server.form()["APIKey"] == "other"

    def test_password_is_not_logged(self, client: SmugMugClient, server, caplog) -> None:
        with caplog.at_level(logging.DEBUG):
            client.login_with_password("me@example.com", "hunter2")
        assert "hunter2" not in caplog.text

    def test_unsecure_endpoint(self, server, transport) -> None:
        with SmugMugClient(make_settings(secure=False), transport=transport) as c:
            c.logout("s1")
        assert server.last.url.scheme == "http"

    def test_get_albums_with_booleans(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Albums": [{"id": 1, "Title": "A"}]})

        response = client.get_albums("s1", heavy=True, share_group="g")

        assert isinstance(response, AlbumListResponse)
        assert [a.title for a in response.albums] == ["A"]
        form = server.form()
        assert form["Heavy"] == "1"
        assert form["ShareGroup"] == "g"
        assert "NickName" not in form

    def test_share_group_rejected_on_1_2_0(self, client_v120: SmugMugClient, server) -> None:
        with pytest.raises(UnsupportedArgumentError):
            client_v120.get_albums("s1", share_group="g")
        assert server.requests == []

    def test_new_method_missing_on_1_2_0(self, client_v120: SmugMugClient) -> None:
        with pytest.raises(UnsupportedMethodError):
            client_v120.apply_watermark("s1", 1, 2)

    def test_create_album_with_settings(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Album": {"id": 42, "Key": "xyz"}})
        settings = AlbumSettings(category_id=3, is_public=False, sort_method="DateTime", unsharp_amount=0.2)

        response = client.create_album("s1", "Summer", settings)

        assert (response.entity_id, response.entity_key) == (42, "xyz")
        form = server.form()
        assert form["Title"] == "Summer"
        assert form["CategoryID"] == "3"
        assert form["Public"] == "0"
        assert form["SortMethod"] == "DateTime"
        assert form["UnsharpAmount"] == "0.2"
        assert "Password" not in form

    def test_album_settings_accept_wire_names(self) -> None:
        settings = AlbumSettings(Public=True, CategoryID=7)
        assert settings.to_arguments() == {"CategoryID": 7, "Public": True}

    def test_template_rejects_album_only_settings(self, client: SmugMugClient) -> None:
        with pytest.raises(UnsupportedArgumentError):
            client.create_album_template("s1", "T", AlbumSettings(title="nope"))

    def test_resort_direction(self, client: SmugMugClient, server) -> None:
        client.resort_album("s1", 5, "FileName", descending=True)
        assert server.form()["Direction"] == "DESC"
        assert server.form()["By"] == "FileName"

    def test_generic_call(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Albums": []})
        response = client.call("smugmug.albums.get", SessionID="s1", NickName="jdoe")
        assert isinstance(response, AlbumListResponse)
        assert server.form()["NickName"] == "jdoe"

    def test_call_outcome_network_failure(self, client: SmugMugClient, server) -> None:
        server.error = httpx.ConnectError("refused")
        outcome = client.call_outcome("smugmug.logout", SessionID="s1")
        assert outcome.kind is ErrorKind.NETWORK

    def test_call_raw_checks_count(self, client: SmugMugClient) -> None:
        with pytest.raises(ArgumentCountError):
            client.call_raw("smugmug.logout", ["k"])

    def test_service_error_is_returned(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "fail", "code": 15, "message": "invalid session"})
        response = client.get_categories("bad")
        assert response.is_error
        assert response.categories == []

    def test_custom_invoker_factory(self, settings, http) -> None:
        calls: list[str] = []

        class Recording:
            def __init__(self, descriptor: MethodDescriptor, _http: httpx.Client) -> None:
                self.descriptor = descriptor

            def execute(self, server_url, argument_values) -> str:
                calls.append(self.descriptor.name)
                return '{"stat": "ok"}'

            def execute_put(self, server_url, argument_values, content) -> str:
                raise AssertionError("unexpected PUT")

        c = SmugMugClient(settings, http=http, invoker_factory=Recording)
        assert isinstance(c.delete_image("s1", 3), ResponseEnvelope)
        assert calls == ["smugmug.images.delete"]

    def test_injected_http_client_is_not_closed(self, settings, http) -> None:
        SmugMugClient(settings, http=http).close()
        assert not http.is_closed


class TestUploads:
    def test_text_upload(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Image": {"id": 900, "Key": "iK"}})

        response = client.upload_image("s1", 12, "cat.jpg", io.BytesIO(IMAGE), caption="Cat")

        assert (response.entity_id, response.entity_key) == (900, "iK")
        assert str(server.last.url) == "http://upload.smugmug.com/services/api/json/1.2.1/"
        form = server.form()
        assert form["method"] == "smugmug.images.upload"
        assert base64.b64decode(form["Data"]) == IMAGE
        assert form["ByteCount"] == str(len(IMAGE))
        assert form["MD5Sum"] == IMAGE_MD5
        assert form["Caption"] == "Cat"

    def test_text_upload_warns_on_foreign_url(self, client: SmugMugClient, server, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="core.services.client"):
            client.upload_image("s1", 12, "cat.jpg", IMAGE, server_url="https://elsewhere.example/")
        assert str(server.last.url) == "https://elsewhere.example/"
        assert "does not match" in caplog.text

    def test_upload_from_url(self, client: SmugMugClient, server) -> None:
        client.upload_image_from_url("s1", 12, "https://img.example/cat.jpg", byte_count=10)
        form = server.form()
        assert form["URL"] == "https://img.example/cat.jpg"
        assert form["ByteCount"] == "10"
        assert "MD5Sum" not in form

    def test_binary_upload(self, client: SmugMugClient, server) -> None:
        server.reply({"stat": "ok", "Image": {"id": 901, "Key": "bK"}})

        response = client.upload_image_binary("s1", "my cat.jpg", IMAGE, album_id=12, keywords="cat")

        assert response.entity_id == 901
        request = server.last
        assert request.method == "PUT"
        assert str(request.url) == "http://upload.smugmug.com/my%20cat.jpg"
        assert request.content == IMAGE
        assert request.headers["Content-MD5"] == IMAGE_MD5
        assert request.headers["X-Smug-SessionID"] == "s1"
        assert request.headers["X-Smug-Version"] == "1.2.1"
        assert request.headers["X-Smug-ResponseType"] == "JSON"
        assert request.headers["X-Smug-AlbumID"] == "12"
        assert request.headers["X-Smug-FileName"] == "my cat.jpg"
        assert "X-Smug-ImageID" not in request.headers
        assert "X-Smug-Caption" not in request.headers

    def test_binary_upload_version_header_follows_profile(self, client_v120: SmugMugClient, server) -> None:
        client_v120.upload_image_binary("s1", "a.jpg", IMAGE, image_id=5)
        assert server.last.headers["X-Smug-Version"] == "1.2.0"
        assert server.last.headers["X-Smug-ImageID"] == "5"

    @pytest.mark.parametrize(
        ("file_name", "album_id", "image_id"),
        [("", 1, None), ("a.jpg", None, None), ("a.jpg", 1, 2)],
    )
    def test_binary_upload_validation(self, client: SmugMugClient, server, file_name, album_id, image_id) -> None:
        with pytest.raises(ValueError):
            client.upload_image_binary("s1", file_name, IMAGE, album_id=album_id, image_id=image_id)
        assert server.requests == []

    def test_binary_upload_non_ascii_headers(self, client: SmugMugClient, server) -> None:
        client.upload_image_binary("s1", "año.jpg", IMAGE, album_id=1, caption="Café", keywords="niño")

        request = server.last
        assert str(request.url) == "http://upload.smugmug.com/a%C3%B1o.jpg"
        raw = {name.lower(): value for name, value in request.headers.raw}
        assert raw[b"x-smug-filename"] == "año.jpg".encode("utf-8")
        assert raw[b"x-smug-caption"] == "Café".encode("utf-8")
        assert raw[b"x-smug-keywords"] == "niño".encode("utf-8")
        assert raw[b"x-smug-sessionid"] == b"s1"

    def test_binary_upload_quotes_slash_in_file_name(self, client: SmugMugClient, server) -> None:
        client.upload_image_binary("s1", "a/b.jpg", IMAGE, album_id=1)
        assert str(server.last.url) == "http://upload.smugmug.com/a%2Fb.jpg"
        assert server.last.headers["X-Smug-FileName"] == "a/b.jpg"


class TestConcurrency:
    @staticmethod
    def _echo_transport() -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            form = dict(parse_qsl(request.content.decode("utf-8")))
            if form["method"] == "smugmug.logout":
                return httpx.Response(200, json={"stat": "ok", "method": "smugmug.logout"})
            return httpx.Response(200, json={"stat": "ok", "Login": {"Session": {"id": form["APIKey"]}}})

        return httpx.MockTransport(handler)

    def test_threads_share_one_client(self) -> None:
        with SmugMugClient(make_settings(), transport=self._echo_transport()) as client:
            with ThreadPoolExecutor(max_workers=8) as pool:
                logins = pool.map(lambda i: client.login_anonymously(api_key=f"k{i}"), range(32))
                logouts = pool.map(lambda i: client.logout(f"s{i}"), range(16))
                sessions = [response.session_id for response in logins]
                statuses = [response.is_error for response in logouts]

            assert sessions == [f"k{i}" for i in range(32)]
            assert statuses == [False] * 16
            assert len(client._invokers) == 2
