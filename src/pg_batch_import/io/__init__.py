"""
I/O layer for the bulk importer.

This package provides line streaming over input files, per-column value
coercion, and the external-id maps that link the node pass to the
relationship pass.
"""

from pg_batch_import.io.lines import NonEmptyLines, iter_lines, source_label
from pg_batch_import.io.coerce import coerce_value, to_float32
from pg_batch_import.io.id_map import ExternalIdMap, SqliteExternalIdMap

__all__ = [
    "NonEmptyLines",
    "iter_lines",
    "source_label",
    "coerce_value",
    "to_float32",
    "ExternalIdMap",
    "SqliteExternalIdMap",
]
