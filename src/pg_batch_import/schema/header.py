from __future__ import annotations

from typing import List, Tuple

from pg_batch_import.schema.columns import parse_columns
from pg_batch_import.schema.models import FileKind, Schema

FIELD_SEPARATOR = "\t"


def split_fields(line: str) -> List[str]:
    """Split a data or header line on tabs. No quoting or escaping applies."""
    return line.split(FIELD_SEPARATOR)


def implicit_schema(kind: FileKind) -> Schema:
    """Schema used when a file has no header: identity columns only."""
    return Schema(kind=kind, columns=(), has_header=False)


def is_header(first_line: str, kind: FileKind) -> bool:
    """
    Decide whether the first line of a file is a header.

    The first line is a header iff its first tab-separated field is exactly
    the kind's sentinel literal (`id` for nodes, `from` for relationships).
    No trimming or case folding is applied.
    """
    return split_fields(first_line)[0] == kind.header_sentinel


def sense_header(first_line: str, kind: FileKind) -> Tuple[Schema, bool]:
    """
    Build the effective schema of a file from its first line.

    Args:
        first_line (str): First non-empty line of the file, terminator removed.
        kind (FileKind): Node or relationship file.

    Returns:
        Tuple[Schema, bool]:
            - Effective schema
            - True if the first line was consumed as a header and must not
              be read again as data

    Raises:
        InvalidColumnSpec: If a header token is malformed. The error carries
            the field index of the token; the caller adds the line number.
    """
    if not is_header(first_line, kind):
        return implicit_schema(kind), False

    fields = split_fields(first_line)
    width = kind.identity_width
    # relationship headers name all three identity columns; anything shorter
    # just contributes no properties
    columns = parse_columns(fields[width:], first_field_index=width)
    return Schema(kind=kind, columns=columns, has_header=True), True
