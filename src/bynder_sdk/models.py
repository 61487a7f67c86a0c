"""Request-parameter models for the Bynder endpoints.

Each endpoint accepts its model or a plain mapping; mappings may use the wire
names (``propertyOptionId``) or the Python names (``property_option_id``).
Fields the models do not name are passed through to the service unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .errors import BynderError

DEFAULT_ASSETS_PER_PAGE = 50

ParamsT = TypeVar("ParamsT", bound="RequestParams")


class RequestParams(BaseModel):
    """Base for endpoint parameters: camelCase wire names, extra keys allowed.

    Numeric ids and option ids are stringified.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    @classmethod
    def coerce(cls: type[ParamsT], params: ParamsT | Mapping[str, Any] | None) -> ParamsT:
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        return cls.model_validate(dict(params))

    def wire(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Return the payload keyed by wire names, dropping unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)

    def as_data_field(self) -> dict[str, str]:
        """Serialize the whole payload into the single ``data`` form field."""
        return {"data": json.dumps(self.wire())}


class UserLoginParams(RequestParams):
    username: str | None = None
    password: str | None = None
    consumer_id: str | None = Field(default=None, alias="consumerId")


class MediaListParams(RequestParams):
    """Filters for ``v4/media/``."""

    property_option_id: str | list[str] | None = Field(default=None, alias="propertyOptionId")
    keyword: str | None = None
    type: str | None = None
    brand_id: str | None = Field(default=None, alias="brandId")
    sub_brand_id: str | None = Field(default=None, alias="subBrandId")
    category_id: str | None = Field(default=None, alias="categoryId")
    collection_id: str | None = Field(default=None, alias="collectionId")
    order_by: str | None = Field(default=None, alias="orderBy")
    ids: str | list[str] | None = None
    page: int | None = None
    limit: int | None = None

    def _joined_options(self) -> str | None:
        if isinstance(self.property_option_id, list):
            return ",".join(self.property_option_id)
        return self.property_option_id

    def list_query(self) -> dict[str, Any]:
        """Query for a listing: count disabled and an empty option filter when unset."""
        query = self.wire()
        query["count"] = "false"
        query["propertyOptionId"] = self._joined_options() or ""
        return query

    def total_query(self) -> dict[str, Any]:
        """Query for a count-only request; the option filter is left out when unset."""
        query = self.wire()
        query["count"] = "true"
        options = self._joined_options()
        if options is not None:
            query["propertyOptionId"] = options
        return query

    def for_page(self, page: int, limit: int) -> MediaListParams:
        return self.model_copy(update={"page": page, "limit": limit})


class MediaInfoParams(RequestParams):
    id: str | None = None
    versions: bool | None = None


class MediaEditParams(RequestParams):
    """Fields of a media edit; everything besides ``id`` is sent as-is."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    copyright: str | None = None
    tags: str | list[str] | None = None
    archive: bool | None = None
    date_published: str | None = Field(default=None, alias="datePublished")


class MediaIdParams(RequestParams):
    id: str | None = None


class MetaPropertiesParams(RequestParams):
    ids: str | list[str] | None = None
    count: bool | None = None
    options: bool | None = None
    type: str | None = None


class MetapropertyParams(RequestParams):
    """Metaproperty payload; serialized as JSON into the ``data`` form field."""

    id: str | None = None
    name: str | None = None
    label: str | None = None
    type: str | None = None
    zindex: int | None = None
    is_filterable: bool | None = Field(default=None, alias="isFilterable")
    is_multiselect: bool | None = Field(default=None, alias="isMultiselect")
    is_required: bool | None = Field(default=None, alias="isRequired")


class MetapropertyOptionParams(RequestParams):
    """Option payload; ``id`` is the owning metaproperty."""

    id: str | None = None
    option_id: str | None = Field(default=None, alias="optionId")
    name: str | None = None
    label: str | None = None
    zindex: int | None = None


@dataclass(slots=True)
class MediaItemsResult:
    """Outcome of walking every media page.

    ``error`` is ``None`` when the walk reached a short page; otherwise it is the
    failure that stopped it and ``items`` holds the pages gathered before it.
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    error: BynderError | httpx.HTTPError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
