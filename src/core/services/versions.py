"""Perfiles de versión de la API (1.2.0 y 1.2.1).

Una versión es configuración, no una jerarquía de clases:
- una tabla `nombre -> RemoteMethod` (descriptor + tipo de respuesta + endpoint),
- las URLs de servicio,
- la `EntitySchema` con la que se decodifican las entidades.

1.2.1 se deriva de 1.2.0 con `VersionProfile.derive`: sustituye descriptores
con argumentos extra, añade métodos nuevos y cambia la clase de álbum. La
mecánica (marshalling, errores de red, envelope, acceso tolerante) es la misma
para todas las versiones.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from core.domain.descriptor import MethodDescriptor
from core.domain.entities import AlbumV121, EntitySchema
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


class Endpoint(str, Enum):
    API = "api"
    TEXT_UPLOAD = "text_upload"
    BINARY_UPLOAD = "binary_upload"


@dataclass(frozen=True)
class RemoteMethod:
    descriptor: MethodDescriptor
    response: type[ResponseEnvelope] = ResponseEnvelope
    endpoint: Endpoint = Endpoint.API

    @property
    def name(self) -> str:
        return self.descriptor.name


class UnsupportedMethodError(LookupError):
    def __init__(self, method_name: str, version: str) -> None:
        self.method_name = method_name
        self.version = version
        super().__init__(f"{method_name} is not available in API version {version}")


@dataclass(frozen=True)
class VersionProfile:
    version: str
    secure_url: str
    unsecure_url: str
    text_upload_url: str
    binary_upload_url: str
    methods: Mapping[str, RemoteMethod] = field(default_factory=dict)
    schema: EntitySchema = field(default_factory=EntitySchema)

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", MappingProxyType(dict(self.methods)))

    def method(self, name: str) -> RemoteMethod:
        try:
            return self.methods[name]
        except KeyError:
            raise UnsupportedMethodError(name, self.version) from None

    def supports(self, name: str) -> bool:
        return name in self.methods

    def api_url(self, secure: bool = True) -> str:
        return self.secure_url if secure else self.unsecure_url

    def url_for(self, endpoint: Endpoint, secure: bool = True) -> str:
        if endpoint is Endpoint.TEXT_UPLOAD:
            return self.text_upload_url
        if endpoint is Endpoint.BINARY_UPLOAD:
            return self.binary_upload_url
        return self.api_url(secure)

    def derive(
        self,
        version: str,
        *,
        methods: Mapping[str, RemoteMethod] | None = None,
        schema: EntitySchema | None = None,
    ) -> VersionProfile:
        """Nuevo perfil: URLs de `version`, métodos del padre + overrides."""

        merged = dict(self.methods)
        merged.update(methods or {})
        return replace(
            self,
            version=version,
            methods=merged,
            schema=schema or self.schema,
            **_service_urls(version),
        )


def _service_urls(version: str) -> dict[str, str]:
    return {
        "secure_url": f"https://api.smugmug.com/services/api/json/{version}/",
        "unsecure_url": f"http://api.smugmug.com/services/api/json/{version}/",
        "text_upload_url": f"http://upload.smugmug.com/services/api/json/{version}/",
        "binary_upload_url": "http://upload.smugmug.com/",
    }


def _method(
    name: str,
    arguments: tuple[str, ...],
    response: type[ResponseEnvelope] = ResponseEnvelope,
    endpoint: Endpoint = Endpoint.API,
) -> tuple[str, RemoteMethod]:
    return name, RemoteMethod(MethodDescriptor(name, arguments), response, endpoint)


SESSION = ("APIKey", "SessionID")

# Cola común de ajustes de galería (álbumes y plantillas).
GALLERY_TAIL = (
    "Password",
    "PasswordHint",
    "Protected",
    "Public",
    "HideOwner",
    "External",
    "SmugSearchable",
    "WorldSearchable",
    "Larges",
    "XLarges",
    "X2Larges",
    "X3Larges",
    "Originals",
    "Watermarking",
    "WatermarkID",
    "Share",
    "CanRank",
    "Comments",
    "FamilyEdit",
    "FriendEdit",
    "CommunityID",
    "Printable",
    "ProofDays",
    "Backprinting",
    "DefaultColor",
    "UnsharpAmount",
    "UnsharpRadius",
    "UnsharpThreshold",
    "UnsharpSigma",
)

_ALBUM_HEAD = ("Title", "Description", "Keywords", "CategoryID", "SubCategoryID", "Geography", "AlbumTemplateID")
_LAYOUT = ("EXIF", "Clean", "Header", "Filenames", "TemplateID", "SortMethod", "SortDirection")

ALBUM_CREATE_ARGUMENTS = SESSION + _ALBUM_HEAD + _LAYOUT + ("Position", "SquareThumbs") + GALLERY_TAIL
ALBUM_CHANGE_SETTINGS_ARGUMENTS = (
    SESSION + ("AlbumID",) + _ALBUM_HEAD + _LAYOUT + ("Position", "HighlightID", "SquareThumbs") + GALLERY_TAIL
)
ALBUM_TEMPLATE_CREATE_ARGUMENTS = SESSION + ("AlbumTemplateName", "Geography") + _LAYOUT + GALLERY_TAIL

# Cabeceras del upload binario (HTTP PUT). Se modelan como slots de un
# descriptor para reutilizar el control de aridad y de valores presentes.
BINARY_UPLOAD_HEADERS = (
    "Content-Length",
    "Content-MD5",
    "X-Smug-SessionID",
    "X-Smug-Version",
    "X-Smug-ResponseType",
    "X-Smug-AlbumID",
    "X-Smug-ImageID",
    "X-Smug-FileName",
    "X-Smug-Caption",
    "X-Smug-Keywords",
    "X-Smug-Latitude",
    "X-Smug-Longitude",
    "X-Smug-Altitude",
)
BINARY_UPLOAD = "smugmug.images.uploadHTTPPut"

_IMAGE_LOOKUP = SESSION + ("ImageID", "ImageKey", "Password", "SitePassword")

V1_2_0 = VersionProfile(
    version="1.2.0",
    methods=dict(
        [
            _method("smugmug.login.withPassword", ("APIKey", "EmailAddress", "Password"), LoginResponse),
            _method("smugmug.login.withHash", ("APIKey", "UserID", "PasswordHash"), LoginResponse),
            _method("smugmug.login.anonymously", ("APIKey",), LoginResponse),
            _method("smugmug.logout", SESSION),
            _method("smugmug.albums.get", SESSION + ("NickName", "Heavy", "SitePassword"), AlbumListResponse),
            _method(
                "smugmug.albums.getInfo",
                SESSION + ("AlbumID", "AlbumKey", "Password", "SitePassword"),
                AlbumInfoResponse,
            ),
            _method("smugmug.albums.getStats", SESSION + ("AlbumID", "Month", "Year", "Heavy"), AlbumStatsResponse),
            _method("smugmug.albums.create", ALBUM_CREATE_ARGUMENTS, AlbumCreatedResponse),
            _method("smugmug.albums.changeSettings", ALBUM_CHANGE_SETTINGS_ARGUMENTS),
            _method("smugmug.albums.delete", SESSION + ("AlbumID",)),
            _method("smugmug.albums.reSort", SESSION + ("AlbumID", "By", "Direction")),
            _method("smugmug.albumtemplates.get", SESSION, AlbumTemplateListResponse),
            _method("smugmug.categories.get", SESSION + ("NickName", "SitePassword"), CategoryListResponse),
            _method("smugmug.categories.create", SESSION + ("Name",), CategoryCreatedResponse),
            _method("smugmug.categories.delete", SESSION + ("CategoryID",)),
            _method("smugmug.categories.rename", SESSION + ("CategoryID", "Name")),
            _method(
                "smugmug.subcategories.get",
                SESSION + ("CategoryID", "NickName", "SitePassword"),
                SubCategoryListResponse,
            ),
            _method("smugmug.subcategories.getAll", SESSION + ("NickName", "SitePassword"), SubCategoryListResponse),
            _method("smugmug.subcategories.create", SESSION + ("Name", "CategoryID"), SubCategoryCreatedResponse),
            _method("smugmug.subcategories.rename", SESSION + ("SubCategoryID", "Name")),
            _method("smugmug.subcategories.delete", SESSION + ("SubCategoryID",)),
            _method(
                "smugmug.images.get",
                SESSION + ("AlbumID", "AlbumKey", "Heavy", "Password", "SitePassword"),
                ImageListResponse,
            ),
            _method("smugmug.images.getInfo", _IMAGE_LOOKUP, ImageInfoResponse),
            _method("smugmug.images.getEXIF", _IMAGE_LOOKUP, ImageEXIFResponse),
            _method(
                "smugmug.images.getURLs",
                SESSION + ("ImageID", "ImageKey", "TemplateID", "Password", "SitePassword"),
                ImageURLsResponse,
            ),
            _method("smugmug.images.getStats", SESSION + ("ImageID", "Month"), ImageStatsResponse),
            _method("smugmug.images.changePosition", SESSION + ("ImageID", "Position")),
            _method(
                "smugmug.images.changeSettings",
                SESSION + ("ImageID", "AlbumID", "Caption", "Keywords", "Hidden"),
            ),
            _method("smugmug.images.delete", SESSION + ("ImageID",)),
            _method(
                "smugmug.images.upload",
                SESSION
                + ("AlbumID", "FileName", "Data", "ByteCount", "MD5Sum")
                + ("Caption", "Keywords", "Latitude", "Longitude", "Altitude"),
                UploadResponse,
                Endpoint.TEXT_UPLOAD,
            ),
            _method(
                "smugmug.images.uploadFromURL",
                SESSION
                + ("AlbumID", "URL", "ByteCount", "MD5Sum")
                + ("Caption", "Keywords", "Latitude", "Longitude", "Altitude"),
                UploadResponse,
            ),
            _method(BINARY_UPLOAD, BINARY_UPLOAD_HEADERS, UploadResponse, Endpoint.BINARY_UPLOAD),
            _method("smugmug.users.getTree", SESSION + ("NickName", "Heavy", "SitePassword"), TreeResponse),
            _method("smugmug.users.getTransferStats", SESSION + ("Month", "Year", "Heavy"), TransferStatsResponse),
        ]
    ),
    **_service_urls("1.2.0"),
)


def _extend(profile: VersionProfile, name: str, *arguments: str) -> tuple[str, RemoteMethod]:
    parent = profile.method(name)
    return name, replace(parent, descriptor=parent.descriptor.extended(*arguments))


V1_2_1 = V1_2_0.derive(
    "1.2.1",
    methods=dict(
        [
            _extend(V1_2_0, "smugmug.albums.get", "ShareGroup"),
            _extend(V1_2_0, "smugmug.users.getTree", "ShareGroup"),
            _extend(V1_2_0, "smugmug.images.changeSettings", "Latitude", "Longitude", "Altitude"),
            _method("smugmug.albums.applyWatermark", SESSION + ("AlbumID", "WatermarkID")),
            _method("smugmug.albumtemplates.create", ALBUM_TEMPLATE_CREATE_ARGUMENTS, AlbumTemplateCreatedResponse),
            _method("smugmug.albumtemplates.delete", SESSION + ("AlbumTemplateID",)),
        ]
    ),
    schema=EntitySchema(album=AlbumV121),
)

PROFILES: dict[str, VersionProfile] = {p.version: p for p in (V1_2_0, V1_2_1)}


def get_profile(version: str) -> VersionProfile:
    try:
        return PROFILES[version]
    except KeyError:
        raise ValueError(
            f"unknown API version {version!r}; expected one of {sorted(PROFILES)}"
        ) from None
