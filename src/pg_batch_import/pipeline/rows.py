"""
Helpers shared by the node and relationship passes: progress output,
header sensing over a line stream, per-line coercion against a schema,
and guarded sink calls.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from pg_batch_import.errors import (
    DataImportError,
    InvalidColumnSpec,
    MalformedLine,
    PropertyTypeError,
    SinkFailure,
)
from pg_batch_import.io.coerce import coerce_value
from pg_batch_import.io.lines import LineSource, NonEmptyLines
from pg_batch_import.schema.header import implicit_schema, sense_header, split_fields
from pg_batch_import.schema.models import ABSENT, ColumnDescriptor, FileKind, Schema, TypedValue
from pg_batch_import.sinks.base import EntityKind, IndexSink

# (field index in the line, column, coerced value)
CoercedField = Tuple[int, ColumnDescriptor, TypedValue]


# ============================================================
# Logging helper
# ============================================================

def _p(verbose: bool, *args, **kwargs):
    """
    Conditional print helper for verbose progress output.

    Args:
        verbose (bool): Whether output is enabled.
    """
    if verbose:
        print(*args, **kwargs)


# ============================================================
# Coercion
# ============================================================

def coerce_fields(
    fields: Sequence[str],
    schema: Schema,
    *,
    source: str,
    line_number: int,
) -> List[CoercedField]:
    """
    Coerce the property fields of one data line against its schema.

    Identity fields are skipped. Missing trailing fields and empty fields
    are absent and produce nothing.

    Args:
        fields (Sequence[str]): Tab-split line, identity fields included.
        schema (Schema): Effective schema of the file.
        source (str): Source label for error context.
        line_number (int): Physical line number for error context.

    Returns:
        List[CoercedField]: Present values in column order.

    Raises:
        PropertyTypeError: If a field does not parse as its column type.
    """
    width = schema.identity_width
    out: List[CoercedField] = []
    for offset, (raw, col) in enumerate(zip(fields[width:], schema.columns)):
        field_index = width + offset
        try:
            tv = coerce_value(raw, col.type)
        except PropertyTypeError as e:
            raise PropertyTypeError(
                f"column '{col.property_name}': {e.message}",
                source=source,
                line_number=line_number,
                field_index=field_index,
            ) from None
        if tv is ABSENT:
            continue
        out.append((field_index, col, tv))
    return out


# ============================================================
# Sink calls
# ============================================================

def call_sink(
    fn: Callable[..., Any],
    *args: Any,
    source: str,
    line_number: int,
    field_index: Optional[int] = None,
) -> Any:
    """
    Invoke a sink method, surfacing any failure as a located SinkFailure.

    A SinkFailure raised by the sink is re-raised as the same object.
    Any other exception is wrapped, keeping the original as `__cause__`.
    """
    try:
        return fn(*args)
    except SinkFailure as e:
        raise e.locate(source, line_number, field_index)
    except DataImportError:
        raise
    except Exception as e:
        raise SinkFailure(
            f"{getattr(fn, '__name__', 'sink call')} failed: {type(e).__name__}: {e}",
            source=source,
            line_number=line_number,
            field_index=field_index,
        ) from e


def write_properties(
    values: Sequence[CoercedField],
    entity_id: Any,
    kind: EntityKind,
    set_property: Callable[[Any, str, TypedValue], None],
    index_sink: Optional[IndexSink],
    *,
    source: str,
    line_number: int,
) -> None:
    """
    Set each present value as a property and, for indexed columns, add
    the entity to the named index under the property name.

    Property and index writes are separate sink calls. Index writes are
    skipped when `index_sink` is None; loaders reject that case up front
    through `SchemaStream.require_index_sink`.
    """
    for field_index, col, tv in values:
        call_sink(
            set_property, entity_id, col.property_name, tv,
            source=source, line_number=line_number, field_index=field_index,
        )
        if col.index_name is None or index_sink is None:
            continue
        call_sink(
            index_sink.add_to_index, col.index_name, kind, entity_id, col.property_name, tv,
            source=source, line_number=line_number, field_index=field_index,
        )


# ============================================================
# Header + data line stream
# ============================================================

class SchemaStream:
    """
    Sense the header of a line source and stream its data lines.

    The first non-empty line is inspected once. If it is a header it is
    consumed; otherwise it is replayed as the first data line under the
    implicit identity-only schema.

    Attributes:
        schema (Schema): Effective schema of the source.
        header_line (Optional[int]): Line number of the header, if any.
    """

    def __init__(self, source: LineSource, kind: FileKind, label: str):
        self.label = label
        self._lines = NonEmptyLines(source, label)
        self._first: Optional[Tuple[int, str]] = next(self._lines, None)
        self.header_line: Optional[int] = None

        if self._first is None:
            self.schema = implicit_schema(kind)
            return

        n, text = self._first
        try:
            self.schema, consumed = sense_header(text, kind)
        except InvalidColumnSpec as e:
            self._lines.close()
            raise e.locate(label, n)
        if consumed:
            self.header_line = n
            self._first = None

    def __iter__(self) -> Iterator[Tuple[int, List[str]]]:
        if self._first is not None:
            n, text = self._first
            self._first = None
            yield n, split_fields(text)
        for n, text in self._lines:
            yield n, split_fields(text)

    @property
    def skipped_lines(self) -> List[int]:
        """Interior empty lines skipped so far."""
        return list(self._lines.skipped)

    def check_width(self, fields: Sequence[str], line_number: int) -> None:
        """
        Raises:
            MalformedLine: If the line has more fields than the schema allows.
        """
        limit = self.schema.max_fields
        if len(fields) > limit:
            raise MalformedLine(
                f"{len(fields)} fields but the schema allows at most {limit}",
                source=self.label,
                line_number=line_number,
                field_index=limit,
            )

    def require_index_sink(self, index_sink: Optional[IndexSink]) -> None:
        """
        Raises:
            SinkFailure: If the schema has indexed columns and no index sink
                is configured. Located at the header, before any data line.
        """
        if index_sink is not None:
            return
        indexed = self.schema.indexed_columns()
        if not indexed:
            return
        col = indexed[0]
        raise SinkFailure(
            f"column '{col.property_name}' is indexed in '{col.index_name}' but no index sink is configured",
            source=self.label,
            line_number=self.header_line,
            field_index=self.schema.identity_width + self.schema.columns.index(col),
        )

    def close(self) -> None:
        self._lines.close()
