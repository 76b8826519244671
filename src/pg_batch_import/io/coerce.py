from __future__ import annotations

import math
import re
import struct
from typing import Callable, Dict, Tuple, Union

from pg_batch_import.errors import PropertyTypeError
from pg_batch_import.schema.models import ABSENT, TypedValue, TypeTag, _Absent


# ============================================================
# Grammar
# ============================================================

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
_FLOAT_SPECIALS = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "+Infinity": math.inf,
    "-Infinity": -math.inf,
}

INT_RANGES: Dict[TypeTag, Tuple[int, int]] = {
    TypeTag.INT64: (-(2 ** 63), 2 ** 63 - 1),
    TypeTag.INT32: (-(2 ** 31), 2 ** 31 - 1),
    TypeTag.INT16: (-(2 ** 15), 2 ** 15 - 1),
    TypeTag.INT8: (-(2 ** 7), 2 ** 7 - 1),
}


# ============================================================
# Per-type parsers
# ============================================================

def _parse_int(raw: str, tt: TypeTag) -> int:
    if not _INT_RE.fullmatch(raw):
        raise PropertyTypeError(f"'{raw}' is not a decimal integer ({tt.value})")
    v = int(raw)
    lo, hi = INT_RANGES[tt]
    if v < lo or v > hi:
        raise PropertyTypeError(f"{raw} is out of range for {tt.value} [{lo}, {hi}]")
    return v


def _parse_double(raw: str, tt: TypeTag) -> float:
    if raw in _FLOAT_SPECIALS:
        return _FLOAT_SPECIALS[raw]
    if not _FLOAT_RE.fullmatch(raw):
        raise PropertyTypeError(f"'{raw}' is not a decimal number ({tt.value})")
    return float(raw)


def to_float32(v: float) -> float:
    """Round a Python float to the nearest IEEE-754 single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", v))[0]
    except OverflowError:
        return math.copysign(math.inf, v)


def _parse_float(raw: str, tt: TypeTag) -> float:
    return to_float32(_parse_double(raw, tt))


def _parse_char(raw: str, tt: TypeTag) -> str:
    if len(raw) != 1:
        raise PropertyTypeError(f"'{raw}' is not a single character ({tt.value})")
    return raw


def _parse_bool(raw: str, tt: TypeTag) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise PropertyTypeError(f"'{raw}' is not 'true' or 'false' ({tt.value})")


_PARSERS: Dict[TypeTag, Callable[[str, TypeTag], object]] = {
    TypeTag.TEXT: lambda raw, tt: raw,
    TypeTag.INT64: _parse_int,
    TypeTag.INT32: _parse_int,
    TypeTag.INT16: _parse_int,
    TypeTag.INT8: _parse_int,
    TypeTag.CHARACTER: _parse_char,
    TypeTag.FLOAT32: _parse_float,
    TypeTag.FLOAT64: _parse_double,
    TypeTag.BOOLEAN: _parse_bool,
}


def coerce_value(raw: str, type_tag: TypeTag) -> Union[TypedValue, _Absent]:
    """
    Convert a raw text field into a typed value.

    An empty field is ABSENT for every type (sparse properties). Parsing is
    locale-independent; the decimal point is always `.`.

    Args:
        raw (str): Field text exactly as split from the line.
        type_tag (TypeTag): Declared column type.

    Returns:
        Union[TypedValue, _Absent]: The typed value, or ABSENT.

    Raises:
        PropertyTypeError: If the text does not parse as the declared type,
            or an integer does not fit the declared width.
    """
    if raw == "":
        return ABSENT
    return TypedValue(type_tag, _PARSERS[type_tag](raw, type_tag))
