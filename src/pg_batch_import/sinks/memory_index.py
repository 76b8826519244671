from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Dict, List, Tuple

from pg_batch_import.schema.models import TypedValue
from pg_batch_import.sinks.base import EntityKind


class InMemoryIndexSink:
    """
    IndexSink that keeps every index in nested dictionaries.

    Layout: index name -> entity kind -> (key, value) -> [(typed value, id)].
    Lookups accept either a TypedValue or a plain Python value; a plain
    value only matches entries whose Python type is the same, so `True`
    never matches the integer 1.
    """

    def __init__(self) -> None:
        self._indexes: Dict[str, Dict[EntityKind, DefaultDict[Tuple[str, Any], List[Tuple[TypedValue, Any]]]]] = {}

    def add_to_index(
        self,
        index_name: str,
        kind: EntityKind,
        entity_id: Any,
        key: str,
        value: TypedValue,
    ) -> None:
        by_kind = self._indexes.setdefault(index_name, {})
        entries = by_kind.setdefault(kind, defaultdict(list))
        entries[(key, value.value)].append((value, entity_id))

    def index_names(self) -> List[str]:
        return sorted(self._indexes)

    def get(self, index_name: str, key: str, value: Any, kind: EntityKind = EntityKind.NODE) -> List[Any]:
        """Ids stored under `key == value` in the named index, in insertion order."""
        entries = self._indexes.get(index_name, {}).get(kind)
        if not entries:
            return []
        raw = value.value if isinstance(value, TypedValue) else value
        hits = entries.get((key, raw), [])
        if isinstance(value, TypedValue):
            return [eid for tv, eid in hits if tv == value]
        return [eid for tv, eid in hits if type(tv.value) is type(raw)]

    def single(self, index_name: str, key: str, value: Any, kind: EntityKind = EntityKind.NODE) -> Any:
        """
        The one id stored under `key == value`.

        Raises:
            LookupError: If there are no hits or more than one.
        """
        hits = self.get(index_name, key, value, kind)
        if len(hits) != 1:
            raise LookupError(
                f"expected exactly one hit for {key}={value!r} in index '{index_name}', got {len(hits)}"
            )
        return hits[0]
