"""CSV text -> header-keyed rows with best-effort scalar coercion."""
from __future__ import annotations

import csv
import io
import re

from csvchat.domain.models import Row, Scalar

_FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_MAX_SAFE_INT = 2**53


def coerce_value(raw: str | None) -> Scalar:
    """Map a CSV cell to ``None``, ``bool``, ``int``, ``float`` or the text itself.

    Numbers outside the exactly-representable float range stay text so that
    long identifiers (account numbers and the like) are not rounded.
    """
    if raw is None or raw == "":
        return None
    if raw in ("true", "TRUE"):
        return True
    if raw in ("false", "FALSE"):
        return False
    if _FLOAT_RE.match(raw):
        number = float(raw)
        if abs(number) > _MAX_SAFE_INT:
            return raw
        if number.is_integer() and "." not in raw and "e" not in raw.lower():
            return int(number)
        return number
    return raw


def parse_csv(text: str) -> list[Row]:
    """Parse CSV *text* whose first line is the header.

    Blank lines are skipped. Short rows get ``None`` for the missing cells;
    cells beyond the header are dropped.
    """
    reader = csv.reader(io.StringIO(text))
    header: list[str] | None = None
    rows: list[Row] = []
    for record in reader:
        if not record:
            continue
        if header is None:
            header = record
            continue
        padded = record + [None] * (len(header) - len(record))
        rows.append({name: coerce_value(cell) for name, cell in zip(header, padded)})
    return rows


def decode_csv(content: bytes) -> str:
    """Decode uploaded bytes, tolerating a UTF-8 byte-order mark."""
    return content.decode("utf-8-sig")
