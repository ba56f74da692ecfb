"""Modelos de entrada para métodos con muchos argumentos opcionales.

Los alias de cada campo son los nombres de argumento del servicio, de modo que
`to_arguments()` se puede pasar directamente a `MethodDescriptor.bind`. Si la
versión/método activo no tiene alguno de esos slots, `bind` lo rechaza.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

SORT_METHODS = ("Position", "Caption", "FileName", "Date", "DateTime", "DateTimeOriginal")


class AlbumSettings(BaseModel):
    """Ajustes para `albums.create`, `albums.changeSettings` y `albumtemplates.create`."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    title: str | None = Field(default=None, alias="Title")
    description: str | None = Field(default=None, alias="Description")
    keywords: str | None = Field(default=None, alias="Keywords")
    category_id: int | None = Field(default=None, alias="CategoryID")
    sub_category_id: int | None = Field(default=None, alias="SubCategoryID")
    album_template_id: int | None = Field(default=None, alias="AlbumTemplateID")
    position: int | None = Field(default=None, alias="Position")
    highlight_id: int | None = Field(default=None, alias="HighlightID")

    geography: bool | None = Field(default=None, alias="Geography")
    exif: bool | None = Field(default=None, alias="EXIF")
    clean: bool | None = Field(default=None, alias="Clean")
    header: bool | None = Field(default=None, alias="Header")
    filenames: bool | None = Field(default=None, alias="Filenames")
    template_id: int | None = Field(default=None, alias="TemplateID")
    sort_method: str | None = Field(
        default=None,
        alias="SortMethod",
        description=f"Uno de {', '.join(SORT_METHODS)}.",
    )
    sort_direction: bool | None = Field(
        default=None,
        alias="SortDirection",
        description="False = ascendente, True = descendente.",
    )
    square_thumbs: bool | None = Field(default=None, alias="SquareThumbs")
    password: str | None = Field(default=None, alias="Password")
    password_hint: str | None = Field(default=None, alias="PasswordHint")
    is_protected: bool | None = Field(default=None, alias="Protected")
    is_public: bool | None = Field(default=None, alias="Public")
    hide_owner: bool | None = Field(default=None, alias="HideOwner")
    external: bool | None = Field(default=None, alias="External")
    smug_searchable: bool | None = Field(default=None, alias="SmugSearchable")
    world_searchable: bool | None = Field(default=None, alias="WorldSearchable")
    larges: bool | None = Field(default=None, alias="Larges")
    x_larges: bool | None = Field(default=None, alias="XLarges")
    x2_larges: bool | None = Field(default=None, alias="X2Larges")
    x3_larges: bool | None = Field(default=None, alias="X3Larges")
    originals: bool | None = Field(default=None, alias="Originals")
    watermarking: bool | None = Field(default=None, alias="Watermarking")
    watermark_id: int | None = Field(default=None, alias="WatermarkID")
    share: bool | None = Field(default=None, alias="Share")
    can_rank: bool | None = Field(default=None, alias="CanRank")
    comments: bool | None = Field(default=None, alias="Comments")
    family_edit: bool | None = Field(default=None, alias="FamilyEdit")
    friend_edit: bool | None = Field(default=None, alias="FriendEdit")
    community_id: int | None = Field(default=None, alias="CommunityID")
    printable: bool | None = Field(default=None, alias="Printable")
    proof_days: int | None = Field(default=None, alias="ProofDays")
    backprinting: str | None = Field(default=None, alias="Backprinting")
    default_color: bool | None = Field(
        default=None,
        alias="DefaultColor",
        description="False = true color, True = auto color.",
    )
    unsharp_amount: float | None = Field(default=None, alias="UnsharpAmount")
    unsharp_radius: float | None = Field(default=None, alias="UnsharpRadius")
    unsharp_threshold: float | None = Field(default=None, alias="UnsharpThreshold")
    unsharp_sigma: float | None = Field(default=None, alias="UnsharpSigma")

    def to_arguments(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
