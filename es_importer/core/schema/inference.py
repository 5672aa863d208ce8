"""
Scalar type inference for CSV field values.

Every raw text value is mapped to exactly one JSON literal: null, integer,
float, boolean or string. Inference is per value, not per column, so a
column may carry mixed types across documents.
"""

import math
import re
from enum import Enum

# Signed 64-bit range; larger integers are emitted as floats
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_ESCAPES = {
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
}
# Remaining control characters below U+0020 use the \u00xx form
_JSON_ESCAPE_TABLE = {
    code: _ESCAPES.get(code, f"\\u{code:04x}") for code in range(0x20)
}
_JSON_ESCAPE_TABLE.update(_ESCAPES)


class ScalarType(str, Enum):
    """Inferred JSON-native type of a field value."""

    NULL = "null"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"


def escape_json_string(value: str) -> str:
    """
    Escape text for use between JSON double quotes.

    Backslash, double quote, newline, carriage return and tab get their
    two-character escapes; other characters below U+0020 become \\u00xx.
    Everything else, including non-ASCII, passes through.
    """
    return value.translate(_JSON_ESCAPE_TABLE)


def _parse_int(value: str) -> int | None:
    if not _INTEGER_RE.fullmatch(value):
        return None
    # Leading zeros carry no value; more than 19 significant digits exceeds int64
    digits = value.lstrip("+-").lstrip("0") or "0"
    if len(digits) > 19:
        return None
    number = int(digits)
    if value.startswith("-"):
        number = -number
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _parse_float(value: str) -> float | None:
    if not _FLOAT_RE.fullmatch(value):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def infer_scalar_type(value: str) -> ScalarType:
    """
    Decide which JSON type a raw value is emitted as.

    Order: empty -> null, integer, float, true/false (any case), string.

    Args:
        value: Field text, already stripped by the caller

    Returns:
        ScalarType
    """
    if value == "":
        return ScalarType.NULL
    if _parse_int(value) is not None:
        return ScalarType.INTEGER
    if _parse_float(value) is not None:
        return ScalarType.FLOAT
    if value.lower() in ("true", "false"):
        return ScalarType.BOOLEAN
    return ScalarType.STRING


def infer_json_literal(value: str) -> str:
    """
    Serialize a raw field value as a JSON scalar literal.

    Total and pure: numeric-looking text that does not parse (e.g. "1.2.3",
    "nan", "1e999") is emitted as a string.

    Examples:
        >>> infer_json_literal("")
        'null'
        >>> infer_json_literal("042")
        '42'
        >>> infer_json_literal("-3.5")
        '-3.5'
        >>> infer_json_literal("TRUE")
        'true'
        >>> infer_json_literal('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    scalar_type = infer_scalar_type(value)

    if scalar_type is ScalarType.NULL:
        return "null"
    if scalar_type is ScalarType.INTEGER:
        return str(_parse_int(value))
    if scalar_type is ScalarType.FLOAT:
        return repr(_parse_float(value))
    if scalar_type is ScalarType.BOOLEAN:
        return value.lower()
    return f'"{escape_json_string(value)}"'
