from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Self

from geocore.core.query.components import TagChanges, TagFilter
from geocore.core.query.object import ObjectOperation, ObjectQuery


class TagFilterMixin:
    """Tag include/exclude filters; hosts provide `tags: TagFilter`.

    `with_tags` / `exclude_tags` classify each entry (`TAG-` prefix means id)
    and accumulate; the explicit id/name setters replace their bucket.
    """

    tags: TagFilter

    def _tags(self, tags: TagFilter) -> Self:
        return replace(self, tags=tags)  # type: ignore[type-var]

    def with_tags(self, tag_ids_or_names: Iterable[str]) -> Self:
        return self._tags(self.tags.including(tag_ids_or_names))

    def exclude_tags(self, tag_ids_or_names: Iterable[str]) -> Self:
        return self._tags(self.tags.excluding(tag_ids_or_names))

    def with_tag_ids(self, tag_ids: Iterable[str]) -> Self:
        return self._tags(replace(self.tags, tag_ids=tuple(tag_ids)))

    def with_tag_names(self, tag_names: Iterable[str]) -> Self:
        return self._tags(replace(self.tags, tag_names=tuple(tag_names)))

    def exclude_tag_ids(self, tag_ids: Iterable[str]) -> Self:
        return self._tags(replace(self.tags, excluded_tag_ids=tuple(tag_ids)))

    def exclude_tag_names(self, tag_names: Iterable[str]) -> Self:
        return self._tags(replace(self.tags, excluded_tag_names=tuple(tag_names)))

    def with_tag_details(self) -> Self:
        return self._tags(replace(self.tags, details=True))


@dataclass(frozen=True)
class TaggableOperation(ObjectOperation):
    changes: TagChanges = field(default_factory=TagChanges)

    def tag(self, tag_ids_or_names: Iterable[str]) -> Self:
        return replace(self, changes=self.changes.tag(tag_ids_or_names))

    def untag(self, tag_ids_or_names: Iterable[str]) -> Self:
        return replace(self, changes=self.changes.untag(tag_ids_or_names))

    def query_params(self) -> dict[str, Any]:
        return {**super().query_params(), **self.changes.query_params()}


@dataclass(frozen=True)
class TaggableQuery(ObjectQuery, TagFilterMixin):
    tags: TagFilter = field(default_factory=TagFilter)

    def query_params(self) -> dict[str, Any]:
        return {**super().query_params(), **self.tags.query_params()}
