"""Respuestas tipadas (envelope común + payload por método).

Contrato de `ResponseEnvelope.parse(text)`:
- Texto vacío => respuesta vacía: sin error, sin datos, listas vacías.
- JSON inválido, raíz que no es objeto o sin `stat` => `ResponseFormatError`.
- `stat == "fail"` => `is_error=True` con `error_code`/`error_message`; el
  payload NO se parsea, así que los campos tipados quedan vacíos.
- `stat == "ok"` => cada subtipo extrae su payload en `_parse_payload`.

Las versiones no redefinen respuestas: cambian la `EntitySchema` que se pasa
a `parse`, y con ella la clase que decodifica cada entidad anidada.
"""

from __future__ import annotations

import json
import logging
from typing import Any, ClassVar, Mapping, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.entities import (
    Album,
    AlbumTemplate,
    AlbumTransferStats,
    Category,
    EntitySchema,
    Image,
    ImageEXIF,
    ImageTransferStats,
    ImageURLs,
    decode_list,
)
from core.domain.errors import ResponseFormatError
from core.domain.fields import get_int, get_list, get_object, get_str

log = logging.getLogger(__name__)

STAT_OK = "ok"
STAT_FAIL = "fail"

R = TypeVar("R", bound="ResponseEnvelope")


class ResponseEnvelope(BaseModel):
    """Wrapper común a todas las respuestas.

    También sirve tal cual para métodos sin payload (delete, rename, logout...).
    """

    model_config = ConfigDict(frozen=True)

    is_error: bool = False
    error_code: int | None = None
    error_message: str | None = None
    stat: str | None = None
    method: str | None = None
    raw_text: str = Field(default="", repr=False)

    @classmethod
    def parse(cls: type[R], text: str | None, schema: EntitySchema | None = None) -> R:
        raw = text or ""
        if not raw.strip():
            log.debug("Empty response text for %s", cls.__name__)
            return cls(raw_text=raw)

        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            # RecursionError: anidamiento demasiado profundo para el decoder.
            log.error("Malformed JSON response for %s: %s", cls.__name__, exc)
            raise ResponseFormatError(f"response is not valid JSON: {exc}", raw_text=raw) from exc

        if not isinstance(payload, dict):
            raise ResponseFormatError(
                f"response root must be an object, got {type(payload).__name__}", raw_text=raw
            )
        stat = payload.get("stat")
        if not isinstance(stat, str):
            raise ResponseFormatError("response has no 'stat' discriminant", raw_text=raw)

        error_code = get_int(payload, "code")
        error_message = get_str(payload, "message")
        is_error = stat.lower() == STAT_FAIL or (error_code is not None and error_message is not None)

        base: dict[str, Any] = {
            "is_error": is_error,
            "error_code": error_code,
            "error_message": error_message,
            "stat": stat,
            "method": get_str(payload, "method"),
            "raw_text": raw,
        }
        if is_error:
            log.debug("Service reported error %s: %s", error_code, error_message)
            return cls(**base)

        return cls(**base, **cls._parse_payload(payload, schema or EntitySchema()))

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {}

    def _summary_fields(self) -> dict[str, Any]:
        return {}

    def summary(self) -> str:
        parts = [f"is_error={self.is_error}"]
        if self.is_error:
            parts.append(f"error_code={self.error_code}")
            parts.append(f"error_message={self.error_message}")
        parts.extend(f"{k}={v}" for k, v in self._summary_fields().items())
        return f"{type(self).__name__}[{', '.join(parts)}]"

    def __str__(self) -> str:
        return self.summary()


class LoginResponse(ResponseEnvelope):
    """Respuesta de `login.withPassword`, `login.withHash` y `login.anonymously`.

    El login anónimo solo trae `Login.Session.id`; el resto queda en `None`.
    """

    session_id: str | None = None
    user_id: int | None = None
    nick_name: str | None = None
    display_name: str | None = None
    password_hash: str | None = None
    account_type: str | None = None
    file_size_limit: int | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        login = get_object(payload, "Login")
        user = get_object(login, "User")
        return {
            "session_id": get_str(get_object(login, "Session"), "id"),
            "user_id": get_int(user, "id"),
            "nick_name": get_str(user, "NickName"),
            "display_name": get_str(user, "DisplayName"),
            "password_hash": get_str(login, "PasswordHash"),
            "account_type": get_str(login, "AccountType"),
            "file_size_limit": get_int(login, "FileSizeLimit"),
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "has_session": self.session_id is not None}


class CreatedResponse(ResponseEnvelope):
    """Respuesta de métodos que crean algo y devuelven `{<Entidad>: {id, Key}}`."""

    entity_name: ClassVar[str] = ""

    entity_id: int | None = None
    entity_key: str | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        created = get_object(payload, cls.entity_name)
        return {"entity_id": get_int(created, "id"), "entity_key": get_str(created, "Key")}

    def _summary_fields(self) -> dict[str, Any]:
        return {"entity_id": self.entity_id, "entity_key": self.entity_key}


class AlbumCreatedResponse(CreatedResponse):
    entity_name: ClassVar[str] = "Album"


class AlbumTemplateCreatedResponse(CreatedResponse):
    entity_name: ClassVar[str] = "AlbumTemplate"


class CategoryCreatedResponse(CreatedResponse):
    entity_name: ClassVar[str] = "Category"


class SubCategoryCreatedResponse(CreatedResponse):
    entity_name: ClassVar[str] = "SubCategory"


class UploadResponse(CreatedResponse):
    """Subidas (texto, desde URL y binaria): `{"Image": {"id", "Key"}}`."""

    entity_name: ClassVar[str] = "Image"


class AlbumListResponse(ResponseEnvelope):
    albums: list[Album] = Field(default_factory=list)

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {
            "albums": decode_list(
                get_list(payload, "Albums"), lambda item: schema.album.from_json(item, schema)
            )
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {"albums": len(self.albums)}


class AlbumInfoResponse(ResponseEnvelope):
    album: Album | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Album")
        return {"album": schema.album.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"album_id": self.album.id if self.album else None}


class AlbumStatsResponse(ResponseEnvelope):
    stats: AlbumTransferStats | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Album")
        return {"stats": schema.album_transfer_stats.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"images": len(self.stats.images) if self.stats else 0}


class AlbumTemplateListResponse(ResponseEnvelope):
    templates: list[AlbumTemplate] = Field(default_factory=list)

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {
            "templates": decode_list(
                get_list(payload, "AlbumTemplates"),
                lambda item: schema.album_template.from_json(item, schema),
            )
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {"templates": len(self.templates)}


class CategoryListResponse(ResponseEnvelope):
    """`categories.get` y `users.getTree` (árbol con álbumes anidados)."""

    list_key: ClassVar[str] = "Categories"

    categories: list[Category] = Field(default_factory=list)

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {
            "categories": decode_list(
                get_list(payload, cls.list_key), lambda item: schema.category.from_json(item, schema)
            )
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {
            "categories": len(self.categories),
            "albums": sum(_count_albums(c) for c in self.categories),
        }


class SubCategoryListResponse(CategoryListResponse):
    list_key: ClassVar[str] = "SubCategories"


class TreeResponse(CategoryListResponse):
    pass


def _count_albums(category: Category) -> int:
    return len(category.albums) + sum(_count_albums(c) for c in category.sub_categories)


class ImageListResponse(ResponseEnvelope):
    images: list[Image] = Field(default_factory=list)

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {
            "images": decode_list(
                get_list(payload, "Images"), lambda item: schema.image.from_json(item, schema)
            )
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {"images": len(self.images)}


class ImageInfoResponse(ResponseEnvelope):
    image: Image | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Image")
        return {"image": schema.image.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"image_id": self.image.id if self.image else None}


class ImageEXIFResponse(ResponseEnvelope):
    exif: ImageEXIF | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Image")
        return {"exif": schema.image_exif.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"image_id": self.exif.id if self.exif else None}


class ImageURLsResponse(ResponseEnvelope):
    urls: ImageURLs | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Image")
        return {"urls": schema.image_urls.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"image_id": self.urls.id if self.urls else None}


class ImageStatsResponse(ResponseEnvelope):
    stats: ImageTransferStats | None = None

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        obj = get_object(payload, "Image")
        return {"stats": schema.image_transfer_stats.from_json(obj, schema) if obj is not None else None}

    def _summary_fields(self) -> dict[str, Any]:
        return {"image_id": self.stats.id if self.stats else None}


class TransferStatsResponse(ResponseEnvelope):
    albums: list[AlbumTransferStats] = Field(default_factory=list)

    @classmethod
    def _parse_payload(cls, payload: Mapping[str, Any], schema: EntitySchema) -> dict[str, Any]:
        return {
            "albums": decode_list(
                get_list(payload, "Albums"),
                lambda item: schema.album_transfer_stats.from_json(item, schema),
            )
        }

    def _summary_fields(self) -> dict[str, Any]:
        return {"albums": len(self.albums)}
