from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from dataclysm.io.cells import infer_cell, stringify_cell
from dataclysm.schema.models import Dataset, Row

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_line(line: str) -> List[str]:
    """
    Split one CSV line into fields.

    A double quote toggles the in-quotes state and is not kept; a comma
    separates fields only outside quotes. Each field is trimmed and then
    loses one surrounding quote on either side, if any.

    Args:
        line (str): A single line without its terminator.

    Returns:
        List[str]: Unwrapped field values.
    """
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    fields.append("".join(buf))

    return [_unwrap(f.strip()) for f in fields]


def _unwrap(field: str) -> str:
    if field.startswith('"'):
        field = field[1:]
    if field.endswith('"'):
        field = field[:-1]
    return field


def parse_csv(text: str) -> Tuple[List[str], List[Row]]:
    """
    Parse CSV text into a header and typed rows.

    Blank lines are ignored everywhere. The first remaining line is the
    header. Data lines whose field count differs from the header's are
    skipped without error. Row ids are `row-<n>`, `n` being the 1-based
    position of the data line.

    Args:
        text (str): Whole CSV document.

    Returns:
        Tuple[List[str], List[Row]]: Column names in file order and the
        accepted rows. Both are empty for blank input.
    """
    lines = [ln for ln in _LINE_SPLIT_RE.split(text) if ln.strip() != ""]
    if not lines:
        return [], []

    headers = split_line(lines[0])
    rows: List[Row] = []

    for i, line in enumerate(lines[1:], start=1):
        values = split_line(line)
        if len(values) != len(headers):
            continue
        cells = {h: infer_cell(v) for h, v in zip(headers, values)}
        rows.append(Row(id=f"row-{i}", cells=cells))

    return headers, rows


def parse_dataset(text: str) -> Dataset:
    headers, rows = parse_csv(text)
    return Dataset(headers=headers, rows=rows)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def export_csv(rows: Sequence[Row]) -> str:
    """
    Serialize rows to CSV text.

    The header is taken from the first row only; ids and flags are never
    written. Header names are emitted as-is, every cell is quoted. Lines are
    joined by a single newline with none after the last row.

    Args:
        rows (Sequence[Row]): Rows sharing one set of columns.

    Returns:
        str: CSV text, or an empty string when there are no rows.
    """
    if not rows:
        return ""

    headers = list(rows[0].cells.keys())
    out = [",".join(headers)]
    for r in rows:
        out.append(",".join(_quote(stringify_cell(r.cells.get(h))) for h in headers))

    return "\n".join(out)
