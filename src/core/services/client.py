"""Fachada de alto nivel sobre los métodos de la API.

`SmugMugClient` no guarda sesión: el `session_id` es un argumento más en cada
llamada. Lo único compartido es el `httpx.Client` (pool de conexiones), que es
thread-safe, así que una instancia puede usarse desde varios hilos.

Flujo de una llamada:
    profile.method(nombre) -> descriptor.bind(**args) -> URL del endpoint
    -> MethodInvoker.execute -> RemoteMethod.response.parse(texto, schema)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, BinaryIO, Callable, Mapping, Sequence, TypeVar
from urllib.parse import quote

import httpx

from adapters.http_client import build_http_client
from adapters.upload_payload import prepare_payload
from core.config import AppSettings
from core.domain.arguments import is_blank
from core.domain.descriptor import MethodDescriptor
from core.domain.errors import SmugMugError
from core.domain.requests import AlbumSettings
from core.domain.responses import (
    AlbumCreatedResponse,
    AlbumInfoResponse,
    AlbumListResponse,
    AlbumStatsResponse,
    AlbumTemplateCreatedResponse,
    AlbumTemplateListResponse,
    CategoryCreatedResponse,
    CategoryListResponse,
    ImageEXIFResponse,
    ImageInfoResponse,
    ImageListResponse,
    ImageStatsResponse,
    ImageURLsResponse,
    LoginResponse,
    ResponseEnvelope,
    SubCategoryCreatedResponse,
    SubCategoryListResponse,
    TransferStatsResponse,
    TreeResponse,
    UploadResponse,
)
from core.interfaces.invoker import Invoker
from core.services.invoker import CallOutcome, MethodInvoker, invoke
from core.services.versions import BINARY_UPLOAD, Endpoint, VersionProfile, get_profile

log = logging.getLogger(__name__)

R = TypeVar("R", bound=ResponseEnvelope)

InvokerFactory = Callable[[MethodDescriptor, httpx.Client], Invoker]

BINARY_RESPONSE_TYPE = "JSON"


class SmugMugClient:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        profile: VersionProfile | None = None,
        http: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        invoker_factory: InvokerFactory | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.profile = profile or get_profile(self.settings.api_version)
        self._owns_http = http is None
        self._http = http or build_http_client(self.settings, transport=transport)
        self._invoker_factory: InvokerFactory = invoker_factory or MethodInvoker
        self._invokers: dict[MethodDescriptor, Invoker] = {}
        self._invokers_lock = threading.Lock()
        log.debug("SmugMugClient ready (API %s)", self.profile.version)

    def __enter__(self) -> SmugMugClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def version(self) -> str:
        return self.profile.version

    # ------------------------------------------------------------------
    # Núcleo genérico
    # ------------------------------------------------------------------

    def invoker_for(self, descriptor: MethodDescriptor) -> Invoker:
        invoker = self._invokers.get(descriptor)
        if invoker is not None:
            return invoker
        with self._invokers_lock:
            invoker = self._invokers.get(descriptor)
            if invoker is None:
                invoker = self._invoker_factory(descriptor, self._http)
                self._invokers[descriptor] = invoker
        return invoker

    def _with_defaults(self, descriptor: MethodDescriptor, arguments: Mapping[str, Any]) -> dict[str, Any]:
        named = dict(arguments)
        if "APIKey" in descriptor.arguments and named.get("APIKey") is None:
            named["APIKey"] = self.settings.api_key
        return named

    def _run(
        self,
        response_type: type[R],
        method_name: str,
        server_url: str | None = None,
        **arguments: Any,
    ) -> R:
        remote = self.profile.method(method_name)
        values = remote.descriptor.bind(**self._with_defaults(remote.descriptor, arguments))
        url = server_url or self.profile.url_for(remote.endpoint, self.settings.secure)
        return invoke(self.invoker_for(remote.descriptor), url, values, response_type, self.profile.schema)

    def call(self, method_name: str, /, *, server_url: str | None = None, **arguments: Any) -> ResponseEnvelope:
        """Invoca cualquier método del perfil activo por nombre.

        Los argumentos se pasan con su nombre en el servicio (`AlbumID=...`).
        La respuesta es del tipo registrado para el método en el perfil.
        """

        remote = self.profile.method(method_name)
        return self._run(remote.response, method_name, server_url, **arguments)

    def call_outcome(
        self, method_name: str, /, *, server_url: str | None = None, **arguments: Any
    ) -> CallOutcome[ResponseEnvelope]:
        try:
            return CallOutcome(response=self.call(method_name, server_url=server_url, **arguments))
        except SmugMugError as exc:
            return CallOutcome(error=exc)

    def call_raw(
        self, method_name: str, argument_values: Sequence[str | None], *, server_url: str | None = None
    ) -> str:
        """Variante posicional: un valor por slot, sin parsear la respuesta."""

        remote = self.profile.method(method_name)
        url = server_url or self.profile.url_for(remote.endpoint, self.settings.secure)
        return self.invoker_for(remote.descriptor).execute(url, argument_values)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login_with_password(self, email: str, password: str, *, api_key: str | None = None) -> LoginResponse:
        return self._run(
            LoginResponse,
            "smugmug.login.withPassword",
            APIKey=api_key,
            EmailAddress=email,
            Password=password,
        )

    def login_with_hash(self, user_id: int, password_hash: str, *, api_key: str | None = None) -> LoginResponse:
        return self._run(
            LoginResponse,
            "smugmug.login.withHash",
            APIKey=api_key,
            UserID=user_id,
            PasswordHash=password_hash,
        )

    def login_anonymously(self, *, api_key: str | None = None) -> LoginResponse:
        return self._run(LoginResponse, "smugmug.login.anonymously", APIKey=api_key)

    def logout(self, session_id: str, *, api_key: str | None = None) -> ResponseEnvelope:
        return self._run(ResponseEnvelope, "smugmug.logout", APIKey=api_key, SessionID=session_id)

    # ------------------------------------------------------------------
    # Álbumes
    # ------------------------------------------------------------------

    def get_albums(
        self,
        session_id: str,
        *,
        nick_name: str | None = None,
        heavy: bool | None = None,
        site_password: str | None = None,
        share_group: str | None = None,
        api_key: str | None = None,
    ) -> AlbumListResponse:
        return self._run(
            AlbumListResponse,
            "smugmug.albums.get",
            APIKey=api_key,
            SessionID=session_id,
            NickName=nick_name,
            Heavy=heavy,
            SitePassword=site_password,
            ShareGroup=share_group,
        )

    def get_album_info(
        self,
        session_id: str,
        album_id: int,
        album_key: str,
        *,
        password: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> AlbumInfoResponse:
        return self._run(
            AlbumInfoResponse,
            "smugmug.albums.getInfo",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            AlbumKey=album_key,
            Password=password,
            SitePassword=site_password,
        )

    def get_album_stats(
        self,
        session_id: str,
        album_id: int,
        month: int,
        year: int,
        *,
        heavy: bool | None = None,
        api_key: str | None = None,
    ) -> AlbumStatsResponse:
        return self._run(
            AlbumStatsResponse,
            "smugmug.albums.getStats",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            Month=month,
            Year=year,
            Heavy=heavy,
        )

    def create_album(
        self,
        session_id: str,
        title: str,
        settings: AlbumSettings | None = None,
        *,
        api_key: str | None = None,
    ) -> AlbumCreatedResponse:
        arguments = settings.to_arguments() if settings else {}
        arguments["Title"] = title
        return self._run(
            AlbumCreatedResponse, "smugmug.albums.create", APIKey=api_key, SessionID=session_id, **arguments
        )

    def change_album_settings(
        self,
        session_id: str,
        album_id: int,
        settings: AlbumSettings,
        *,
        api_key: str | None = None,
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.albums.changeSettings",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            **settings.to_arguments(),
        )

    def delete_album(self, session_id: str, album_id: int, *, api_key: str | None = None) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope, "smugmug.albums.delete", APIKey=api_key, SessionID=session_id, AlbumID=album_id
        )

    def resort_album(
        self,
        session_id: str,
        album_id: int,
        by: str,
        descending: bool = False,
        *,
        api_key: str | None = None,
    ) -> ResponseEnvelope:
        """Reordena las imágenes del álbum por `by` (FileName, Caption, DateTime...)."""

        return self._run(
            ResponseEnvelope,
            "smugmug.albums.reSort",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            By=by,
            Direction="DESC" if descending else "ASC",
        )

    def apply_watermark(
        self, session_id: str, album_id: int, watermark_id: int, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.albums.applyWatermark",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            WatermarkID=watermark_id,
        )

    # ------------------------------------------------------------------
    # Plantillas de álbum
    # ------------------------------------------------------------------

    def get_album_templates(self, session_id: str, *, api_key: str | None = None) -> AlbumTemplateListResponse:
        return self._run(
            AlbumTemplateListResponse, "smugmug.albumtemplates.get", APIKey=api_key, SessionID=session_id
        )

    def create_album_template(
        self,
        session_id: str,
        name: str,
        settings: AlbumSettings | None = None,
        *,
        api_key: str | None = None,
    ) -> AlbumTemplateCreatedResponse:
        arguments = settings.to_arguments() if settings else {}
        arguments["AlbumTemplateName"] = name
        return self._run(
            AlbumTemplateCreatedResponse,
            "smugmug.albumtemplates.create",
            APIKey=api_key,
            SessionID=session_id,
            **arguments,
        )

    def delete_album_template(
        self, session_id: str, album_template_id: int, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.albumtemplates.delete",
            APIKey=api_key,
            SessionID=session_id,
            AlbumTemplateID=album_template_id,
        )

    # ------------------------------------------------------------------
    # Categorías y subcategorías
    # ------------------------------------------------------------------

    def get_categories(
        self,
        session_id: str,
        *,
        nick_name: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> CategoryListResponse:
        return self._run(
            CategoryListResponse,
            "smugmug.categories.get",
            APIKey=api_key,
            SessionID=session_id,
            NickName=nick_name,
            SitePassword=site_password,
        )

    def create_category(self, session_id: str, name: str, *, api_key: str | None = None) -> CategoryCreatedResponse:
        return self._run(
            CategoryCreatedResponse, "smugmug.categories.create", APIKey=api_key, SessionID=session_id, Name=name
        )

    def delete_category(self, session_id: str, category_id: int, *, api_key: str | None = None) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.categories.delete",
            APIKey=api_key,
            SessionID=session_id,
            CategoryID=category_id,
        )

    def rename_category(
        self, session_id: str, category_id: int, name: str, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.categories.rename",
            APIKey=api_key,
            SessionID=session_id,
            CategoryID=category_id,
            Name=name,
        )

    def get_subcategories(
        self,
        session_id: str,
        category_id: int,
        *,
        nick_name: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> SubCategoryListResponse:
        return self._run(
            SubCategoryListResponse,
            "smugmug.subcategories.get",
            APIKey=api_key,
            SessionID=session_id,
            CategoryID=category_id,
            NickName=nick_name,
            SitePassword=site_password,
        )

    def get_all_subcategories(
        self,
        session_id: str,
        *,
        nick_name: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> SubCategoryListResponse:
        return self._run(
            SubCategoryListResponse,
            "smugmug.subcategories.getAll",
            APIKey=api_key,
            SessionID=session_id,
            NickName=nick_name,
            SitePassword=site_password,
        )

    def create_subcategory(
        self, session_id: str, name: str, category_id: int, *, api_key: str | None = None
    ) -> SubCategoryCreatedResponse:
        return self._run(
            SubCategoryCreatedResponse,
            "smugmug.subcategories.create",
            APIKey=api_key,
            SessionID=session_id,
            Name=name,
            CategoryID=category_id,
        )

    def rename_subcategory(
        self, session_id: str, sub_category_id: int, name: str, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.subcategories.rename",
            APIKey=api_key,
            SessionID=session_id,
            SubCategoryID=sub_category_id,
            Name=name,
        )

    def delete_subcategory(
        self, session_id: str, sub_category_id: int, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.subcategories.delete",
            APIKey=api_key,
            SessionID=session_id,
            SubCategoryID=sub_category_id,
        )

    # ------------------------------------------------------------------
    # Imágenes
    # ------------------------------------------------------------------

    def get_images(
        self,
        session_id: str,
        album_id: int,
        album_key: str,
        *,
        heavy: bool | None = None,
        password: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> ImageListResponse:
        return self._run(
            ImageListResponse,
            "smugmug.images.get",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            AlbumKey=album_key,
            Heavy=heavy,
            Password=password,
            SitePassword=site_password,
        )

    def _image_lookup(
        self,
        response_type: type[R],
        method_name: str,
        session_id: str,
        image_id: int,
        image_key: str,
        **extra: Any,
    ) -> R:
        return self._run(
            response_type, method_name, SessionID=session_id, ImageID=image_id, ImageKey=image_key, **extra
        )

    def get_image_info(
        self,
        session_id: str,
        image_id: int,
        image_key: str,
        *,
        password: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> ImageInfoResponse:
        return self._image_lookup(
            ImageInfoResponse,
            "smugmug.images.getInfo",
            session_id,
            image_id,
            image_key,
            APIKey=api_key,
            Password=password,
            SitePassword=site_password,
        )

    def get_image_exif(
        self,
        session_id: str,
        image_id: int,
        image_key: str,
        *,
        password: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> ImageEXIFResponse:
        return self._image_lookup(
            ImageEXIFResponse,
            "smugmug.images.getEXIF",
            session_id,
            image_id,
            image_key,
            APIKey=api_key,
            Password=password,
            SitePassword=site_password,
        )

    def get_image_urls(
        self,
        session_id: str,
        image_id: int,
        image_key: str,
        *,
        template_id: int | None = None,
        password: str | None = None,
        site_password: str | None = None,
        api_key: str | None = None,
    ) -> ImageURLsResponse:
        return self._image_lookup(
            ImageURLsResponse,
            "smugmug.images.getURLs",
            session_id,
            image_id,
            image_key,
            APIKey=api_key,
            TemplateID=template_id,
            Password=password,
            SitePassword=site_password,
        )

    def get_image_stats(
        self, session_id: str, image_id: int, month: int, *, api_key: str | None = None
    ) -> ImageStatsResponse:
        return self._run(
            ImageStatsResponse,
            "smugmug.images.getStats",
            APIKey=api_key,
            SessionID=session_id,
            ImageID=image_id,
            Month=month,
        )

    def change_image_position(
        self, session_id: str, image_id: int, position: int, *, api_key: str | None = None
    ) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope,
            "smugmug.images.changePosition",
            APIKey=api_key,
            SessionID=session_id,
            ImageID=image_id,
            Position=position,
        )

    def change_image_settings(
        self,
        session_id: str,
        image_id: int,
        *,
        album_id: int | None = None,
        caption: str | None = None,
        keywords: str | None = None,
        hidden: bool | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        altitude: float | None = None,
        api_key: str | None = None,
    ) -> ResponseEnvelope:
        # Latitude/Longitude/Altitude solo existen desde 1.2.1.
        return self._run(
            ResponseEnvelope,
            "smugmug.images.changeSettings",
            APIKey=api_key,
            SessionID=session_id,
            ImageID=image_id,
            AlbumID=album_id,
            Caption=caption,
            Keywords=keywords,
            Hidden=hidden,
            Latitude=latitude,
            Longitude=longitude,
            Altitude=altitude,
        )

    def delete_image(self, session_id: str, image_id: int, *, api_key: str | None = None) -> ResponseEnvelope:
        return self._run(
            ResponseEnvelope, "smugmug.images.delete", APIKey=api_key, SessionID=session_id, ImageID=image_id
        )

    # ------------------------------------------------------------------
    # Subidas
    # ------------------------------------------------------------------

    def upload_image(
        self,
        session_id: str,
        album_id: int,
        file_name: str,
        data: bytes | BinaryIO,
        *,
        caption: str | None = None,
        keywords: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        altitude: float | None = None,
        server_url: str | None = None,
        api_key: str | None = None,
    ) -> UploadResponse:
        """Subida por formulario: los bytes viajan en Base64 con su MD5 y tamaño."""

        if server_url and server_url != self.profile.text_upload_url:
            log.warning(
                "Upload URL %s does not match the upload endpoint %s for API %s",
                server_url,
                self.profile.text_upload_url,
                self.profile.version,
            )
        payload = prepare_payload(data)
        return self._run(
            UploadResponse,
            "smugmug.images.upload",
            server_url,
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            FileName=file_name,
            Data=payload.encoded(),
            ByteCount=payload.byte_count,
            MD5Sum=payload.md5_sum,
            Caption=caption,
            Keywords=keywords,
            Latitude=latitude,
            Longitude=longitude,
            Altitude=altitude,
        )

    def upload_image_from_url(
        self,
        session_id: str,
        album_id: int,
        url: str,
        *,
        byte_count: int | None = None,
        md5_sum: str | None = None,
        caption: str | None = None,
        keywords: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        altitude: float | None = None,
        api_key: str | None = None,
    ) -> UploadResponse:
        return self._run(
            UploadResponse,
            "smugmug.images.uploadFromURL",
            APIKey=api_key,
            SessionID=session_id,
            AlbumID=album_id,
            URL=url,
            ByteCount=byte_count,
            MD5Sum=md5_sum,
            Caption=caption,
            Keywords=keywords,
            Latitude=latitude,
            Longitude=longitude,
            Altitude=altitude,
        )

    def upload_image_binary(
        self,
        session_id: str,
        file_name: str,
        data: bytes | BinaryIO,
        *,
        album_id: int | None = None,
        image_id: int | None = None,
        caption: str | None = None,
        keywords: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        altitude: float | None = None,
        server_url: str | None = None,
    ) -> UploadResponse:
        """Subida binaria por HTTP PUT; los metadatos viajan como cabeceras X-Smug-*.

        Con `album_id` crea una imagen nueva; con `image_id` reemplaza una existente.
        """

        if is_blank(file_name):
            raise ValueError("file_name cannot be empty for a binary upload")
        if (album_id is None) == (image_id is None):
            raise ValueError("exactly one of album_id or image_id is required")

        remote = self.profile.method(BINARY_UPLOAD)
        payload = prepare_payload(data)
        values = remote.descriptor.bind(
            **{
                "Content-Length": payload.byte_count,
                "Content-MD5": payload.md5_sum,
                "X-Smug-SessionID": session_id,
                "X-Smug-Version": self.profile.version,
                "X-Smug-ResponseType": BINARY_RESPONSE_TYPE,
                "X-Smug-AlbumID": album_id,
                "X-Smug-ImageID": image_id,
                "X-Smug-FileName": file_name,
                "X-Smug-Caption": caption,
                "X-Smug-Keywords": keywords,
                "X-Smug-Latitude": latitude,
                "X-Smug-Longitude": longitude,
                "X-Smug-Altitude": altitude,
            }
        )
        base_url = server_url or self.profile.url_for(Endpoint.BINARY_UPLOAD)
        url = base_url.rstrip("/") + "/" + quote(file_name, safe="")
        text = self.invoker_for(remote.descriptor).execute_put(url, values, payload.content)
        return UploadResponse.parse(text, self.profile.schema)

    # ------------------------------------------------------------------
    # Usuarios
    # ------------------------------------------------------------------

    def get_tree(
        self,
        session_id: str,
        *,
        nick_name: str | None = None,
        heavy: bool | None = None,
        site_password: str | None = None,
        share_group: str | None = None,
        api_key: str | None = None,
    ) -> TreeResponse:
        return self._run(
            TreeResponse,
            "smugmug.users.getTree",
            APIKey=api_key,
            SessionID=session_id,
            NickName=nick_name,
            Heavy=heavy,
            SitePassword=site_password,
            ShareGroup=share_group,
        )

    def get_transfer_stats(
        self,
        session_id: str,
        month: int,
        year: int,
        *,
        heavy: bool | None = None,
        api_key: str | None = None,
    ) -> TransferStatsResponse:
        return self._run(
            TransferStatsResponse,
            "smugmug.users.getTransferStats",
            APIKey=api_key,
            SessionID=session_id,
            Month=month,
            Year=year,
            Heavy=heavy,
        )
