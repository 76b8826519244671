from __future__ import annotations

from typing import Optional, Sequence, Tuple

from pg_batch_import.errors import InvalidColumnSpec
from pg_batch_import.schema.models import TAG_LITERALS, ColumnDescriptor, TypeTag

INDEX_SEPARATOR = "|"
TYPE_SEPARATOR = "@"


def parse_type_tag(tag: str) -> TypeTag:
    """
    Resolve a header type literal (e.g. `long`, `String`) to a TypeTag.

    Matching is case-insensitive over the closed literal set.

    Raises:
        InvalidColumnSpec: If the literal is not a known type.
    """
    tt = TAG_LITERALS.get(tag.lower())
    if tt is None:
        known = ", ".join(sorted(TAG_LITERALS))
        raise InvalidColumnSpec(f"unknown type tag '{tag}' (expected one of: {known})")
    return tt


def parse_column_spec(token: str) -> ColumnDescriptor:
    """
    Parse one header token of the form `[index|]name[@type]`.

    Args:
        token (str): A single tab-separated header field, identity columns
            excluded.

    Returns:
        ColumnDescriptor: Parsed column with Text as the default type.

    Raises:
        InvalidColumnSpec: On an empty property name, an empty index name
            before `|`, or an unknown type tag.
    """
    index_name: Optional[str] = None
    rest = token

    if INDEX_SEPARATOR in token:
        index_name, _, rest = token.partition(INDEX_SEPARATOR)
        if not index_name:
            raise InvalidColumnSpec(f"empty index name in column spec '{token}'")

    type_tag = TypeTag.TEXT
    if TYPE_SEPARATOR in rest:
        rest, _, tag = rest.rpartition(TYPE_SEPARATOR)
        type_tag = parse_type_tag(tag)

    if not rest:
        raise InvalidColumnSpec(f"empty property name in column spec '{token}'")

    return ColumnDescriptor(property_name=rest, index_name=index_name, type=type_tag)


def parse_columns(
    tokens: Sequence[str],
    *,
    first_field_index: int = 0,
) -> Tuple[ColumnDescriptor, ...]:
    """
    Parse header tokens into column descriptors, preserving order.

    `first_field_index` is the position of `tokens[0]` in the full header
    line, used only to locate errors.
    """
    out = []
    for i, tok in enumerate(tokens):
        try:
            out.append(parse_column_spec(tok))
        except InvalidColumnSpec as e:
            raise e.locate(field_index=first_field_index + i)
    return tuple(out)
