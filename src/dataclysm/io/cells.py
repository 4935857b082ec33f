from __future__ import annotations

import math
import re
from typing import Any, List, Optional, Union

CellValue = Union[None, bool, int, float, str]

NULL_LITERALS = ("null", "nan")

# Base-10 integers and decimals with an optional exponent. No hex, no
# underscores, no inf/nan, no inner whitespace.
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_CHUNK_DIGITS = 1000
_CHUNK = 10 ** _CHUNK_DIGITS


def parse_number(value: str) -> Optional[Union[int, float]]:
    """
    Parse a trimmed string with the strict numeric grammar.

    Args:
        value (str): Candidate string.

    Returns:
        Optional[Union[int, float]]: `int` for plain integers, `float` for
        decimals and exponents, or None when the string is not a finite number.
    """
    s = value.strip()
    if not s or not _NUMBER_RE.match(s):
        return None
    # float() saturates to inf instead of raising, so huge literals are
    # rejected here before int() can hit the digit limit
    num = float(s)
    if not math.isfinite(num):
        return None
    if _INTEGER_RE.match(s):
        try:
            return int(s)
        except ValueError:
            # leading zeros can still exceed the int/str digit limit
            return num
    return num


def infer_cell(value: str) -> CellValue:
    """
    Classify a raw CSV field into a typed cell value.

    The checks run in a fixed order: null literals, numbers, booleans and
    finally the string itself. An empty string is always null, never zero.

    Args:
        value (str): Unwrapped, trimmed field text.

    Returns:
        CellValue: None, int/float, bool, or the original string.
    """
    lowered = value.lower()
    if value == "" or lowered in NULL_LITERALS:
        return None

    num = parse_number(value)
    if num is not None:
        return num

    if lowered == "true":
        return True
    if lowered == "false":
        return False

    return value


def is_number_cell(v: Any) -> bool:
    # bool is an int subclass and must not pass as a number
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_missing_cell(v: Any) -> bool:
    if isinstance(v, float) and math.isnan(v):
        return True
    return v is None or v == ""


def cell_kind(v: Any) -> Optional[str]:
    """Coarse type tag of a cell value, or None for missing cells."""
    if is_missing_cell(v):
        return None
    if isinstance(v, bool):
        return "boolean"
    if is_number_cell(v):
        return "number"
    return "string"


def _int_text(v: int) -> str:
    try:
        return str(v)
    except ValueError:
        pass
    # past the int/str digit limit: convert in fixed-width decimal chunks
    sign = "-" if v < 0 else ""
    v = abs(v)
    chunks: List[int] = []
    while v:
        v, rest = divmod(v, _CHUNK)
        chunks.append(rest)
    head = str(chunks.pop())
    return sign + head + "".join(f"{c:0{_CHUNK_DIGITS}d}" for c in reversed(chunks))


def stringify_cell(v: Any) -> str:
    """Natural text form of a cell: empty for null, lowercase booleans."""
    if v is None:
        return ""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return _int_text(v)
    return str(v)
