"""Entidades del dominio (Pydantic v2, inmutables).

Cada entidad se construye con `from_json(obj, schema)` a partir de un objeto
JSON ya parseado. Todos los campos pasan por `core.domain.fields.lookup`:
un campo ausente, `null` o con tipo inesperado queda en `None` y nunca aborta
el resto de la entidad ni el resto de una lista.

`EntitySchema` indica qué clase decodifica cada rol (álbum, categoría,
imagen...). Las versiones de la API sustituyen clases aquí en lugar de
duplicar respuestas; p.ej. 1.2.1 decodifica álbumes como `AlbumV121`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.fields import get_list, get_object, get_str, lookup

log = logging.getLogger(__name__)

T = TypeVar("T")

# (atributo python, nombre en el JSON, tipo). El tipo "id" lee `obj[nombre]["id"]`.
FieldSpec = tuple[str, str, str]


def decode_fields(obj: Mapping[str, Any] | None, specs: Iterable[FieldSpec]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for attr, wire, kind in specs:
        if kind == "id":
            values[attr] = lookup(get_object(obj, wire), "id", "int").value
        else:
            values[attr] = lookup(obj, wire, kind).value
    return values


def decode_list(items: list[Any] | None, decoder: Callable[[dict[str, Any]], T]) -> list[T]:
    """Decodifica una lista de objetos saltando elementos que no son objetos."""

    out: list[T] = []
    for item in items or []:
        if not isinstance(item, dict):
            log.warning("Skipping non-object list item: %r", item)
            continue
        out.append(decoder(item))
    return out


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)


# Ajustes compartidos por Album y AlbumTemplate (y por AlbumSettings al escribir).
SETTINGS_FIELDS: tuple[FieldSpec, ...] = (
    ("geography", "Geography", "bool"),
    ("exif", "EXIF", "bool"),
    ("clean", "Clean", "bool"),
    ("header", "Header", "bool"),
    ("filenames", "Filenames", "bool"),
    ("template_id", "Template", "id"),
    ("sort_method", "SortMethod", "str"),
    ("sort_direction", "SortDirection", "bool"),
    ("square_thumbs", "SquareThumbs", "bool"),
    ("password", "Password", "str"),
    ("password_hint", "PasswordHint", "str"),
    ("is_protected", "Protected", "bool"),
    ("is_public", "Public", "bool"),
    ("hide_owner", "HideOwner", "bool"),
    ("external", "External", "bool"),
    ("smug_searchable", "SmugSearchable", "bool"),
    ("world_searchable", "WorldSearchable", "bool"),
    ("larges", "Larges", "bool"),
    ("x_larges", "XLarges", "bool"),
    ("x2_larges", "X2Larges", "bool"),
    ("x3_larges", "X3Larges", "bool"),
    ("originals", "Originals", "bool"),
    ("watermarking", "Watermarking", "bool"),
    ("watermark_id", "Watermark", "id"),
    ("share", "Share", "bool"),
    ("can_rank", "CanRank", "bool"),
    ("comments", "Comments", "bool"),
    ("family_edit", "FamilyEdit", "bool"),
    ("friend_edit", "FriendEdit", "bool"),
    ("community_id", "Community", "id"),
    ("printable", "Printable", "bool"),
    ("proof_days", "ProofDays", "int"),
    ("backprinting", "Backprinting", "str"),
    ("default_color", "DefaultColor", "bool"),
    ("unsharp_amount", "UnsharpAmount", "float"),
    ("unsharp_radius", "UnsharpRadius", "float"),
    ("unsharp_threshold", "UnsharpThreshold", "float"),
    ("unsharp_sigma", "UnsharpSigma", "float"),
)


class GallerySettings(Entity):
    geography: bool | None = None
    exif: bool | None = None
    clean: bool | None = None
    header: bool | None = None
    filenames: bool | None = None
    template_id: int | None = None
    sort_method: str | None = None
    sort_direction: bool | None = None
    square_thumbs: bool | None = None
    password: str | None = None
    password_hint: str | None = None
    is_protected: bool | None = None
    is_public: bool | None = None
    hide_owner: bool | None = None
    external: bool | None = None
    smug_searchable: bool | None = None
    world_searchable: bool | None = None
    larges: bool | None = None
    x_larges: bool | None = None
    x2_larges: bool | None = None
    x3_larges: bool | None = None
    originals: bool | None = None
    watermarking: bool | None = None
    watermark_id: int | None = None
    share: bool | None = None
    can_rank: bool | None = None
    comments: bool | None = None
    family_edit: bool | None = None
    friend_edit: bool | None = None
    community_id: int | None = None
    printable: bool | None = None
    proof_days: int | None = None
    backprinting: str | None = None
    default_color: bool | None = None
    unsharp_amount: float | None = None
    unsharp_radius: float | None = None
    unsharp_threshold: float | None = None
    unsharp_sigma: float | None = None


class AlbumTemplate(GallerySettings):
    """Plantilla de álbum (`smugmug.albumtemplates.*`)."""

    id: int | None = None
    name: str | None = Field(default=None, description="AlbumTemplateName.")

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> AlbumTemplate:
        values = decode_fields(obj, (("id", "id", "int"), ("name", "AlbumTemplateName", "str")))
        values.update(decode_fields(obj, SETTINGS_FIELDS))
        return cls(**values)


ALBUM_FIELDS: tuple[FieldSpec, ...] = (
    ("id", "id", "int"),
    ("key", "Key", "str"),
    ("title", "Title", "str"),
    ("description", "Description", "str"),
    ("keywords", "Keywords", "str"),
    ("album_template_id", "AlbumTemplateID", "int"),
    ("position", "Position", "int"),
    ("image_count", "ImageCount", "int"),
    ("last_updated", "LastUpdated", "str"),
)


class Album(GallerySettings):
    """Álbum tal y como lo describe la API 1.2.0."""

    id: int | None = None
    key: str | None = None
    title: str | None = None
    description: str | None = None
    keywords: str | None = None
    category: Category | None = None
    sub_category: Category | None = None
    album_template_id: int | None = None
    position: int | None = None
    image_count: int | None = None
    highlight: Image | None = None
    last_updated: str | None = None

    @classmethod
    def wire_fields(cls) -> tuple[FieldSpec, ...]:
        return ALBUM_FIELDS + SETTINGS_FIELDS

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> Album:
        schema = schema or EntitySchema()
        values = decode_fields(obj, cls.wire_fields())
        category = get_object(obj, "Category")
        if category is not None:
            values["category"] = schema.category.from_json(category, schema)
        sub_category = get_object(obj, "SubCategory")
        if sub_category is not None:
            values["sub_category"] = schema.category.from_json(sub_category, schema)
        highlight = get_object(obj, "Highlight")
        if highlight is not None:
            values["highlight"] = schema.image.from_json(highlight, schema)
        return cls(**values)


class AlbumV121(Album):
    """Álbum 1.2.1: añade `Passworded`."""

    passworded: bool | None = None

    @classmethod
    def wire_fields(cls) -> tuple[FieldSpec, ...]:
        return super().wire_fields() + (("passworded", "Passworded", "bool"),)


class Category(Entity):
    """Categoría o subcategoría. En `getTree` trae álbumes y subcategorías."""

    id: int | None = None
    name: str | None = None
    parent_category_id: int | None = None
    albums: list[Album] = Field(default_factory=list)
    sub_categories: list[Category] = Field(default_factory=list)

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> Category:
        schema = schema or EntitySchema()
        values = decode_fields(obj, (("id", "id", "int"), ("parent_category_id", "Category", "id")))
        # Los árboles usan "Title"; el resto de métodos "Name".
        name = get_str(obj, "Title")
        if name is None or not name.strip():
            name = get_str(obj, "Name")
        values["name"] = name
        values["albums"] = decode_list(
            get_list(obj, "Albums"), lambda item: schema.album.from_json(item, schema)
        )
        values["sub_categories"] = decode_list(
            get_list(obj, "SubCategories"), lambda item: schema.category.from_json(item, schema)
        )
        return cls(**values)


URL_FIELDS: tuple[FieldSpec, ...] = (
    ("album_url", "AlbumURL", "str"),
    ("tiny_url", "TinyURL", "str"),
    ("thumb_url", "ThumbURL", "str"),
    ("small_url", "SmallURL", "str"),
    ("medium_url", "MediumURL", "str"),
    ("large_url", "LargeURL", "str"),
    ("x_large_url", "XLargeURL", "str"),
    ("x2_large_url", "X2LargeURL", "str"),
    ("x3_large_url", "X3LargeURL", "str"),
    ("original_url", "OriginalURL", "str"),
    ("video320_url", "Video320URL", "str"),
    ("video640_url", "Video640URL", "str"),
    ("video960_url", "Video960URL", "str"),
    ("video1280_url", "Video1280URL", "str"),
)


class ImageURLs(Entity):
    """URLs de una imagen por tamaño (`smugmug.images.getURLs`)."""

    id: int | None = None
    album_url: str | None = None
    tiny_url: str | None = None
    thumb_url: str | None = None
    small_url: str | None = None
    medium_url: str | None = None
    large_url: str | None = None
    x_large_url: str | None = None
    x2_large_url: str | None = None
    x3_large_url: str | None = None
    original_url: str | None = None
    video320_url: str | None = None
    video640_url: str | None = None
    video960_url: str | None = None
    video1280_url: str | None = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> ImageURLs:
        return cls(**decode_fields(obj, (("id", "id", "int"),) + URL_FIELDS))


IMAGE_FIELDS: tuple[FieldSpec, ...] = (
    ("id", "id", "int"),
    ("key", "Key", "str"),
    ("file_name", "FileName", "str"),
    ("caption", "Caption", "str"),
    ("keywords", "Keywords", "str"),
    ("position", "Position", "int"),
    ("date", "Date", "str"),
    ("format", "Format", "str"),
    ("serial", "Serial", "int"),
    ("watermark", "Watermark", "bool"),
    ("latitude", "Latitude", "float"),
    ("longitude", "Longitude", "float"),
    ("altitude", "Altitude", "float"),
    ("hidden", "Hidden", "bool"),
    ("size", "Size", "int"),
    ("width", "Width", "int"),
    ("height", "Height", "int"),
    ("md5_sum", "MD5Sum", "str"),
    ("last_updated", "LastUpdated", "str"),
)


class Image(ImageURLs):
    key: str | None = None
    file_name: str | None = None
    caption: str | None = None
    keywords: str | None = None
    position: int | None = None
    date: str | None = None
    format: str | None = None
    serial: int | None = None
    watermark: bool | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    hidden: bool | None = None
    size: int | None = None
    width: int | None = None
    height: int | None = None
    md5_sum: str | None = None
    last_updated: str | None = None
    album: Album | None = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> Image:
        schema = schema or EntitySchema()
        values = decode_fields(obj, IMAGE_FIELDS + URL_FIELDS)
        album = get_object(obj, "Album")
        if album is not None:
            values["album"] = schema.album.from_json(album, schema)
        return cls(**values)


EXIF_FIELDS: tuple[FieldSpec, ...] = (
    ("id", "id", "int"),
    ("date_time", "DateTime", "str"),
    ("date_time_original", "DateTimeOriginal", "str"),
    ("date_time_digitized", "DateTimeDigitized", "str"),
    ("make", "Make", "str"),
    ("model", "Model", "str"),
    ("exposure_time", "ExposureTime", "str"),
    ("aperture", "Aperture", "str"),
    ("iso", "ISO", "int"),
    ("focal_length", "FocalLength", "str"),
    ("focal_length_35mm_film", "FocalLengthIn35mmFilm", "int"),
    ("ccd_width", "CCDWidth", "str"),
    ("compressed_bits_per_pixel", "CompressedBitsPerPixel", "str"),
    ("flash", "Flash", "int"),
    ("metering", "Metering", "int"),
    ("exposure_program", "ExposureProgram", "int"),
    ("exposure_bias_value", "ExposureBiasValue", "str"),
    ("exposure_mode", "ExposureMode", "int"),
    ("light_source", "LightSource", "int"),
    ("white_balance", "WhiteBalance", "int"),
    ("digital_zoom_ratio", "DigitalZoomRatio", "str"),
    ("contrast", "Contrast", "int"),
    ("saturation", "Saturation", "int"),
    ("sharpness", "Sharpness", "int"),
    ("subject_distance", "SubjectDistance", "str"),
    ("subject_distance_range", "SubjectDistanceRange", "int"),
    ("sensing_method", "SensingMethod", "int"),
    ("color_space", "ColorSpace", "str"),
    ("brightness", "Brightness", "str"),
)


class ImageEXIF(Entity):
    id: int | None = None
    date_time: str | None = None
    date_time_original: str | None = None
    date_time_digitized: str | None = None
    make: str | None = None
    model: str | None = None
    exposure_time: str | None = None
    aperture: str | None = None
    iso: int | None = None
    focal_length: str | None = None
    focal_length_35mm_film: int | None = None
    ccd_width: str | None = None
    compressed_bits_per_pixel: str | None = None
    flash: int | None = None
    metering: int | None = None
    exposure_program: int | None = None
    exposure_bias_value: str | None = None
    exposure_mode: int | None = None
    light_source: int | None = None
    white_balance: int | None = None
    digital_zoom_ratio: str | None = None
    contrast: int | None = None
    saturation: int | None = None
    sharpness: int | None = None
    subject_distance: str | None = None
    subject_distance_range: int | None = None
    sensing_method: int | None = None
    color_space: str | None = None
    brightness: str | None = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> ImageEXIF:
        return cls(**decode_fields(obj, EXIF_FIELDS))


TRANSFER_FIELDS: tuple[FieldSpec, ...] = (
    ("id", "id", "int"),
    ("bytes", "Bytes", "int"),
    ("tiny", "Tiny", "int"),
    ("thumb", "Thumb", "int"),
    ("small", "Small", "int"),
    ("medium", "Medium", "int"),
    ("large", "Large", "int"),
    ("x_large", "XLarge", "int"),
    ("x2_large", "X2Large", "int"),
    ("x3_large", "X3Large", "int"),
    ("original", "Original", "float"),
    ("video320", "Video320", "float"),
    ("video640", "Video640", "float"),
    ("video960", "Video960", "float"),
    ("video1280", "Video1280", "float"),
)


class ImageTransferStats(Entity):
    """Transferencias de una imagen por tamaño (hits; vídeo en segundos)."""

    id: int | None = None
    bytes: int | None = None
    tiny: int | None = None
    thumb: int | None = None
    small: int | None = None
    medium: int | None = None
    large: int | None = None
    x_large: int | None = None
    x2_large: int | None = None
    x3_large: int | None = None
    original: float | None = None
    video320: float | None = None
    video640: float | None = None
    video960: float | None = None
    video1280: float | None = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> ImageTransferStats:
        return cls(**decode_fields(obj, TRANSFER_FIELDS))


class AlbumTransferStats(ImageTransferStats):
    images: list[ImageTransferStats] = Field(default_factory=list)

    @classmethod
    def from_json(cls, obj: Mapping[str, Any], schema: EntitySchema | None = None) -> AlbumTransferStats:
        values = decode_fields(obj, TRANSFER_FIELDS)
        values["images"] = decode_list(get_list(obj, "Images"), ImageTransferStats.from_json)
        return cls(**values)


@dataclass(frozen=True)
class EntitySchema:
    """Clases que decodifican cada rol de entidad en una versión de la API."""

    album: type[Album] = Album
    album_template: type[AlbumTemplate] = AlbumTemplate
    category: type[Category] = Category
    image: type[Image] = Image
    image_urls: type[ImageURLs] = ImageURLs
    image_exif: type[ImageEXIF] = ImageEXIF
    album_transfer_stats: type[AlbumTransferStats] = AlbumTransferStats
    image_transfer_stats: type[ImageTransferStats] = ImageTransferStats


Album.model_rebuild()
AlbumV121.model_rebuild()
Category.model_rebuild()
Image.model_rebuild()
