from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TypeTag(Enum):
    """Closed set of property types a column may declare."""

    TEXT = "Text"
    INT64 = "Int64"
    INT32 = "Int32"
    INT16 = "Int16"
    INT8 = "Int8"
    CHARACTER = "Character"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    BOOLEAN = "Boolean"


# header literal (lower-cased) -> TypeTag
TAG_LITERALS: Dict[str, TypeTag] = {
    "string": TypeTag.TEXT,
    "long": TypeTag.INT64,
    "int": TypeTag.INT32,
    "short": TypeTag.INT16,
    "byte": TypeTag.INT8,
    "char": TypeTag.CHARACTER,
    "float": TypeTag.FLOAT32,
    "double": TypeTag.FLOAT64,
    "boolean": TypeTag.BOOLEAN,
}


class FileKind(Enum):
    """
    Kind of input file.

    Each kind has a fixed number of leading identity columns and a literal
    sentinel that marks its first line as a header.
    """

    NODE = "node"
    RELATIONSHIP = "relationship"

    @property
    def identity_width(self) -> int:
        return 1 if self is FileKind.NODE else 3

    @property
    def header_sentinel(self) -> str:
        return "id" if self is FileKind.NODE else "from"


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    One property column parsed from a header token.

    `index_name` is set only when the token used the `index|name` form.
    """

    property_name: str
    index_name: Optional[str] = None
    type: TypeTag = TypeTag.TEXT


@dataclass(frozen=True)
class Schema:
    """
    Effective schema of one input file.

    Attributes:
        kind (FileKind): Node or relationship file.
        columns (Tuple[ColumnDescriptor, ...]): Property columns in header
            order, excluding the identity columns.
        has_header (bool): Whether the first line was consumed as a header.
    """

    kind: FileKind
    columns: Tuple[ColumnDescriptor, ...] = field(default_factory=tuple)
    has_header: bool = False

    @property
    def identity_width(self) -> int:
        return self.kind.identity_width

    @property
    def max_fields(self) -> int:
        """Largest number of tab-separated fields a data line may carry."""
        return self.identity_width + len(self.columns)

    def indexed_columns(self) -> Tuple[ColumnDescriptor, ...]:
        return tuple(c for c in self.columns if c.index_name is not None)


class _Absent:
    """Marker for an empty field; never written to a sink."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class TypedValue:
    """A coerced property value tagged with its declared type."""

    type: TypeTag
    value: Any

    def __repr__(self) -> str:
        return f"{self.type.value}({self.value!r})"
