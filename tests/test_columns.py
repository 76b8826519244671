import pytest

from pg_batch_import.errors import InvalidColumnSpec
from pg_batch_import.schema import (
    ColumnDescriptor,
    FileKind,
    TypeTag,
    is_header,
    parse_column_spec,
    parse_columns,
    sense_header,
)


def test_plain_name_defaults_to_text():
    assert parse_column_spec("name") == ColumnDescriptor("name", None, TypeTag.TEXT)


def test_index_and_type():
    col = parse_column_spec("entities|entityid@long")
    assert col.index_name == "entities"
    assert col.property_name == "entityid"
    assert col.type is TypeTag.INT64


@pytest.mark.parametrize(
    "tag,expected",
    [
        ("String", TypeTag.TEXT),
        ("long", TypeTag.INT64),
        ("int", TypeTag.INT32),
        ("short", TypeTag.INT16),
        ("byte", TypeTag.INT8),
        ("char", TypeTag.CHARACTER),
        ("float", TypeTag.FLOAT32),
        ("double", TypeTag.FLOAT64),
        ("boolean", TypeTag.BOOLEAN),
        ("LONG", TypeTag.INT64),
    ],
)
def test_type_tags(tag, expected):
    assert parse_column_spec(f"x@{tag}").type is expected


@pytest.mark.parametrize("token", ["x@weird", "x@", "|name", "people|", "@long", "people|@int", ""])
def test_invalid_tokens(token):
    with pytest.raises(InvalidColumnSpec):
        parse_column_spec(token)


def test_parse_columns_locates_bad_token():
    with pytest.raises(InvalidColumnSpec) as exc:
        parse_columns(["a", "b@nope"], first_field_index=3)
    assert exc.value.field_index == 4


def test_schema_derivation_is_idempotent():
    header = "id\tpeople|name\tage@long\tc@char"
    first, _ = sense_header(header, FileKind.NODE)
    second, _ = sense_header(header, FileKind.NODE)
    assert first == second
    assert [c.property_name for c in first.columns] == ["name", "age", "c"]


def test_node_header_sentinel():
    assert is_header("id\tname", FileKind.NODE)
    assert is_header("id", FileKind.NODE)
    assert not is_header("42", FileKind.NODE)
    assert not is_header("ID\tname", FileKind.NODE)
    assert not is_header(" id\tname", FileKind.NODE)


def test_relationship_header_sentinel():
    schema, consumed = sense_header("from\tto\ttype\tsince@long", FileKind.RELATIONSHIP)
    assert consumed
    assert schema.has_header
    assert schema.columns == (ColumnDescriptor("since", None, TypeTag.INT64),)
    assert schema.max_fields == 4


def test_data_first_line_gets_implicit_schema():
    schema, consumed = sense_header("1\t2\tKNOWS", FileKind.RELATIONSHIP)
    assert not consumed
    assert schema.columns == ()
    assert schema.max_fields == 3


def test_header_error_carries_field_index():
    with pytest.raises(InvalidColumnSpec) as exc:
        sense_header("from\tto\ttype\tok\tbad@x", FileKind.RELATIONSHIP)
    assert exc.value.field_index == 4
