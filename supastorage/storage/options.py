"""Per-operation request options and their defaults.

Each operation kind has a pydantic model whose field defaults are the
documented defaults. ``merge_options`` layers caller overrides on top:
supplied keys win, missing keys keep their defaults, and unknown keys are
passed through to the request untouched.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field

OptionsT = TypeVar("OptionsT", bound="RequestOptions")


class RequestOptions(BaseModel):
    """Base for option models; wire names are the camelCase aliases."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SortBy(BaseModel):
    model_config = ConfigDict(extra="allow")

    column: str = "name"
    order: Literal["asc", "desc"] = "asc"


class SearchOptions(RequestOptions):
    """Options for listing objects."""

    limit: int = Field(default=100, ge=1)
    offset: int = Field(default=0, ge=0)
    sort_by: SortBy = Field(default_factory=SortBy, alias="sortBy")
    search: str | None = None


class FileOptions(RequestOptions):
    """Options for upload and update."""

    cache_control: int = Field(default=3600, ge=0, alias="cacheControl")
    upsert: bool = False
    content_type: str = Field(default="text/plain;charset=UTF-8", alias="contentType")


class UrlOptions(RequestOptions):
    """Options for signed and public URLs.

    Any truthy ``download`` value appends ``?download=true``.
    """

    download: bool | str | None = None


def merge_options(
    options_cls: type[OptionsT],
    overrides: Mapping[str, Any] | BaseModel | None = None,
) -> OptionsT:
    """Merge caller overrides onto the defaults of ``options_cls``.

    Args:
        options_cls: Option model providing the defaults.
        overrides: Mapping keyed by wire or field names, an options model, or None.

    Returns:
        A new ``options_cls`` instance holding the effective options.
    """
    if overrides is None:
        return options_cls()
    if isinstance(overrides, BaseModel):
        overrides = overrides.model_dump(by_alias=True, exclude_unset=True)
    aliases = {
        name: field.alias or name for name, field in options_cls.model_fields.items()
    }
    merged = options_cls().model_dump(by_alias=True)
    for key, value in overrides.items():
        merged[aliases.get(key, key)] = value
    return options_cls.model_validate(merged)
