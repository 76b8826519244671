"""
Bulk loader for property graphs stored as two tab-separated files.

The node file holds one node per line (`id<TAB>props...`), the
relationship file one relationship per line (`from<TAB>to<TAB>type<TAB>props...`).
An optional header line declares property columns as `[index|]name[@type]`.

Notes:
- This module re-exports the supported public surface (e.g.
  `from pg_batch_import import Importer`).
- `__all__` defines that surface; anything not listed is internal.
"""

from pg_batch_import.errors import (
    DataImportError,
    DuplicateExternalId,
    InvalidColumnSpec,
    MalformedLine,
    PropertyTypeError,
    SinkFailure,
    UnknownNodeReference,
)
from pg_batch_import.schema import ABSENT, ColumnDescriptor, FileKind, Schema, TypedValue, TypeTag
from pg_batch_import.sinks import EntityKind, GraphSink, IndexSink, InMemoryIndexSink, NetworkxGraphSink
from pg_batch_import.pipeline import ImportConfig, Importer, ImportResult, run_import

__all__ = [
    "DataImportError",
    "DuplicateExternalId",
    "InvalidColumnSpec",
    "MalformedLine",
    "PropertyTypeError",
    "SinkFailure",
    "UnknownNodeReference",
    "ABSENT",
    "ColumnDescriptor",
    "FileKind",
    "Schema",
    "TypedValue",
    "TypeTag",
    "EntityKind",
    "GraphSink",
    "IndexSink",
    "InMemoryIndexSink",
    "NetworkxGraphSink",
    "ImportConfig",
    "Importer",
    "ImportResult",
    "run_import",
]
