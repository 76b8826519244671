"""
Schema layer: column types, header grammar and header sensing.

This package turns the first line of an input file into an effective
Schema: an ordered list of ColumnDescriptor objects that is applied
positionally to every data line of the same file.
"""

from pg_batch_import.schema.models import (
    ABSENT,
    TAG_LITERALS,
    ColumnDescriptor,
    FileKind,
    Schema,
    TypedValue,
    TypeTag,
)
from pg_batch_import.schema.columns import parse_column_spec, parse_columns, parse_type_tag
from pg_batch_import.schema.header import implicit_schema, is_header, sense_header, split_fields

__all__ = [
    "ABSENT",
    "TAG_LITERALS",
    "ColumnDescriptor",
    "FileKind",
    "Schema",
    "TypedValue",
    "TypeTag",
    "parse_column_spec",
    "parse_columns",
    "parse_type_tag",
    "implicit_schema",
    "is_header",
    "sense_header",
    "split_fields",
]
