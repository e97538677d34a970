"""MongoFindQuery: fluent builder over a Motor/PyMongo collection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..coercion import is_nan
from ..exceptions import UnknownRelationError

logger = logging.getLogger(__name__)

_DIRECTIONS: dict[str, int] = {
    "asc": 1,
    "ascending": 1,
    "1": 1,
    "desc": -1,
    "descending": -1,
    "-1": -1,
}


@dataclass(frozen=True)
class Lookup:
    """How ``populate(path)`` resolves *path* against another collection.

    Attributes:
        from_collection: Collection holding the referenced documents.
        local_field: Field of the queried document holding the reference.
        foreign_field: Matched field in ``from_collection``.
        as_field: Output field; defaults to the populate path.
        single: Unwind the joined array into a single sub-document.
    """

    from_collection: str
    local_field: str
    foreign_field: str = "_id"
    as_field: str | None = None
    single: bool = False

    def stages(self, path: str) -> list[dict[str, Any]]:
        target = self.as_field or path
        stages: list[dict[str, Any]] = [
            {
                "$lookup": {
                    "from": self.from_collection,
                    "localField": self.local_field,
                    "foreignField": self.foreign_field,
                    "as": target,
                }
            }
        ]
        if self.single:
            stages.append(
                {
                    "$unwind": {
                        "path": f"${target}",
                        "preserveNullAndEmptyArrays": True,
                    }
                }
            )
        return stages


class MongoFindQuery:
    """
    Accumulates ``find`` arguments through the operator builder methods.

    Example::

        params = {"status": "active", "$sort": "-created_at", "$page": "2"}
        modifier = get_query_modifier(params)
        query = modifier(MongoFindQuery(db.orders, params))
        orders = await query.to_list()

    Without ``populate`` calls the query runs as ``collection.find``; with
    them it runs as an aggregation pipeline using the configured lookups.
    """

    def __init__(
        self,
        collection: Any,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        *,
        lookups: Mapping[str, Lookup] | None = None,
    ) -> None:
        self.collection = collection
        self.filter: dict[str, Any] = dict(filter or {})
        self.operators: dict[str, Any] = {}
        self._lookups = dict(lookups or {})
        self._sort: list[tuple[str, int]] = []
        self._skip: int | None = None
        self._limit: int | None = None
        self._projection: dict[str, int] = {}
        self._populate: list[str] = []

    # -- builder methods -----------------------------------------------------

    def sort(self, spec: Any) -> MongoFindQuery:
        """Append sort keys.

        Accepts ``"-created_at name"``, ``{"name": "asc"}`` or
        ``[("name", 1)]``; a leading ``-`` means descending.
        """
        if isinstance(spec, str):
            for token in spec.replace(",", " ").split():
                if token.startswith("-"):
                    self._sort.append((token[1:], -1))
                else:
                    self._sort.append((token.lstrip("+"), 1))
        elif isinstance(spec, Mapping):
            for field, direction in spec.items():
                self._sort.append((field, _direction(direction)))
        elif isinstance(spec, list | tuple):
            for field, direction in spec:
                self._sort.append((field, _direction(direction)))
        else:
            raise TypeError(f"Unsupported sort specification: {spec!r}")
        return self

    def skip(self, count: Any) -> MongoFindQuery:
        value = _non_negative_int(count)
        if value is None:
            logger.warning("Ignoring invalid skip value %r", count)
        else:
            self._skip = value
        return self

    def limit(self, count: Any) -> MongoFindQuery:
        value = _non_negative_int(count)
        if value is None:
            logger.warning("Ignoring invalid limit value %r", count)
        else:
            self._limit = value
        return self

    def select(self, spec: Any) -> MongoFindQuery:
        """Add fields to the projection; ``-field`` excludes it."""
        if isinstance(spec, Mapping):
            self._projection.update({k: 1 if v else 0 for k, v in spec.items()})
            return self
        for token in str(spec).replace(",", " ").split():
            if token.startswith("-"):
                self._projection[token[1:]] = 0
            else:
                self._projection[token.lstrip("+")] = 1
        return self

    def populate(self, path: str) -> MongoFindQuery:
        """Resolve *path* (space separated paths allowed) via its ``Lookup``."""
        for name in str(path).split():
            if name not in self._lookups:
                raise UnknownRelationError(name)
            if name not in self._populate:
                self._populate.append(name)
        return self

    # -- introspection -------------------------------------------------------

    @property
    def sort_keys(self) -> list[tuple[str, int]]:
        return list(self._sort)

    @property
    def skip_count(self) -> int | None:
        return self._skip

    @property
    def limit_count(self) -> int | None:
        return self._limit

    @property
    def projection(self) -> dict[str, int] | None:
        return dict(self._projection) or None

    @property
    def populated(self) -> list[str]:
        return list(self._populate)

    # -- execution -----------------------------------------------------------

    def find_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``collection.find``."""
        kwargs: dict[str, Any] = {"filter": dict(self.filter)}
        if self._projection:
            kwargs["projection"] = dict(self._projection)
        if self._sort:
            kwargs["sort"] = list(self._sort)
        if self._skip is not None:
            kwargs["skip"] = self._skip
        if self._limit is not None:
            kwargs["limit"] = self._limit
        return kwargs

    def to_pipeline(self) -> list[dict[str, Any]]:
        """Equivalent aggregation pipeline, lookups included."""
        pipeline: list[dict[str, Any]] = []
        if self.filter:
            pipeline.append({"$match": dict(self.filter)})
        if self._sort:
            pipeline.append({"$sort": dict(self._sort)})
        if self._skip:
            pipeline.append({"$skip": self._skip})
        if self._limit:
            pipeline.append({"$limit": self._limit})
        for path in self._populate:
            pipeline.extend(self._lookups[path].stages(path))
        if self._projection:
            pipeline.append({"$project": dict(self._projection)})
        return pipeline

    def cursor(self) -> Any:
        """Return a ``find`` cursor, or an aggregation cursor when populating."""
        if self._populate:
            return self.collection.aggregate(self.to_pipeline())
        return self.collection.find(**self.find_kwargs())

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        """Run the query on a Motor collection and return the documents."""
        result: list[dict[str, Any]] = await self.cursor().to_list(length=length)
        return result

    def __repr__(self) -> str:
        return f"MongoFindQuery({self.find_kwargs()!r}, populate={self._populate!r})"


def _direction(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value in (1, -1):
        return value
    direction = _DIRECTIONS.get(str(value).strip().lower())
    if direction is None:
        raise ValueError(f"Unsupported sort direction: {value!r}")
    return direction


def _non_negative_int(value: Any) -> int | None:
    if isinstance(value, bool) or is_nan(value):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value < 0:
        return None
    return value
