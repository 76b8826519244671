"""
Capabilities the importer writes through.

The importer never reads back from a sink: it allocates identifiers,
sets properties and adds index entries. Both protocols are runtime
checkable so plain classes qualify by shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Hashable, Protocol, runtime_checkable

from pg_batch_import.schema.models import TypedValue


class EntityKind(Enum):
    NODE = "node"
    RELATIONSHIP = "relationship"


@runtime_checkable
class GraphSink(Protocol):
    """Storage engine that allocates ids and persists properties."""

    def create_node(self) -> Hashable:
        ...

    def set_node_property(self, node_id: Any, name: str, value: TypedValue) -> None:
        ...

    def create_relationship(self, start: Any, end: Any, type_label: str) -> Hashable:
        ...

    def set_relationship_property(self, rel_id: Any, name: str, value: TypedValue) -> None:
        ...


@runtime_checkable
class IndexSink(Protocol):
    """Secondary index service keyed by index name; creates indexes on first use."""

    def add_to_index(
        self,
        index_name: str,
        kind: EntityKind,
        entity_id: Any,
        key: str,
        value: TypedValue,
    ) -> None:
        ...
