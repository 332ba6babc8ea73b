"""Base of every Geocore model (pydantic v2).

Rules:
- Parsing is best-effort: a field whose JSON type does not match becomes
  None instead of failing the whole payload (`Lenient`).
- `to_dict` emits only the fields that are set, under their wire names.
- Dates travel in the Geocore timestamp format (`GeocoreDate`).

`register_entity` fills the decoder table used to map a JSON payload to an
entity type by tag (`decoder_for("place")`).
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, Callable, Self, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    SerializerFunctionWrapHandler,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    model_serializer,
    model_validator,
)

from geocore.core.dates import format_geocore_date, parse_geocore_date
from geocore.core.errors import InvalidParameter


def _lenient(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


Lenient = WrapValidator(_lenient)

OptStr = Annotated[str | None, Lenient]
OptInt = Annotated[int | None, Lenient]
OptFloat = Annotated[float | None, Lenient]


def _parse_date(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_geocore_date(value)
    return None


GeocoreDate = Annotated[
    datetime | None,
    BeforeValidator(_parse_date),
    PlainSerializer(format_geocore_date, return_type=str, when_used="unless-none"),
]


def _parse_custom_data(value: Any) -> dict[str, str | None] | None:
    if not isinstance(value, dict):
        return None
    return {str(k): (v if isinstance(v, str) else None) for k, v in value.items()}


def _dump_custom_data(value: dict[str, str | None]) -> dict[str, str]:
    return {k: v for k, v in value.items() if v is not None}


CustomData = Annotated[
    dict[str, str | None] | None,
    BeforeValidator(_parse_custom_data),
    PlainSerializer(_dump_custom_data, when_used="unless-none"),
]


def _dump_json_data(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


JsonData = Annotated[Any, PlainSerializer(_dump_json_data, return_type=str, when_used="unless-none")]


_DECODERS: dict[str, Callable[[Any], Any]] = {}

M = TypeVar("M", bound="GeocoreModel")


def register_entity(tag: str) -> Callable[[type[M]], type[M]]:
    """Class decorator adding `cls.from_json` to the decoder table under `tag`."""

    def decorator(cls: type[M]) -> type[M]:
        _DECODERS[tag] = cls.from_json
        return cls

    return decorator


def decoder_for(tag: str) -> Callable[[Any], Any]:
    try:
        return _DECODERS[tag]
    except KeyError:
        raise InvalidParameter(f"Unknown entity type: {tag}") from None


def registered_entities() -> list[str]:
    return sorted(_DECODERS)


class GeocoreModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def from_json(cls, data: Any) -> Self:
        if not isinstance(data, dict):
            data = {}
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GeocorePoint(GeocoreModel):
    """Geographical point in WGS84."""

    latitude: OptFloat = None
    longitude: OptFloat = None

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        if self.latitude is None or self.longitude is None:
            return {}
        return handler(self)


class GenericResult:
    """Raw JSON value returned by the service."""

    def __init__(self, json: Any) -> None:
        self.json = json

    @classmethod
    def from_json(cls, data: Any) -> "GenericResult":
        return cls(data)

    def __repr__(self) -> str:
        return f"GenericResult({self.json!r})"


class CountResult(GeocoreModel):
    count: OptInt = None


class GeocoreBinaryDataInfo(GeocoreModel):
    """Information about an uploaded binary.

    The service answers either with the bare key (string) or with an object
    carrying the URL and a `metadata` block.
    """

    key: OptStr = None
    url: OptStr = None
    content_length: OptInt = Field(default=None, alias="contentLength")
    content_type: OptStr = Field(default=None, alias="contentType")
    last_modified: GeocoreDate = Field(default=None, alias="lastModified")

    @classmethod
    def from_json(cls, data: Any) -> Self:
        if isinstance(data, str):
            return cls(key=data)
        return super().from_json(data)

    @model_validator(mode="before")
    @classmethod
    def _flatten_metadata(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("metadata"), dict):
            flattened = {k: v for k, v in data.items() if k != "metadata"}
            for name in ("contentLength", "contentType", "lastModified"):
                if name in data["metadata"]:
                    flattened[name] = data["metadata"][name]
            return flattened
        return data

    def to_dict(self) -> dict[str, Any]:
        dumped = super().to_dict()
        metadata = {k: dumped.pop(k) for k in ("contentLength", "contentType", "lastModified") if k in dumped}
        if metadata:
            dumped["metadata"] = metadata
        return dumped
