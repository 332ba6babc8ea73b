"""Serialization contracts shared by entities and value objects."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class FromJSON(Protocol[T_co]):
    """Something constructible from a parsed JSON value.

    Extraction is best-effort: absent or mistyped fields end up as None.
    """

    @classmethod
    def from_json(cls, data: Any) -> T_co:
        ...


@runtime_checkable
class ToMap(Protocol):
    """Something serializable to a plain string-keyed map.

    Only fields currently set appear in the output; unset fields are omitted
    rather than written as nulls, so a save never blanks server state.
    """

    def to_dict(self) -> dict[str, Any]:
        ...
