"""
Field-level CSV helpers.

Unlike `csv.reader`, `split_fields` keeps quote characters in
the field verbatim and nothing is unescaped, so a title such as
``"Toy Story, The"`` reaches the graph exactly as it appears in the file.
"""
from __future__ import annotations

import math
import re
from typing import List

from movielens_graph.app.core.errors import RowParseError

QUOTE = '"'

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

INT_RE = re.compile(r"[+-]?[0-9]+")
FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def split_fields(line: str, delimiter: str = ",") -> List[str]:
    """Split one line on `delimiter`, ignoring delimiters between double quotes.

    An unmatched quote swallows the rest of the line into the current field.
    """
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    for ch in line:
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    fields.append("".join(buf))
    return fields


def split_genres(value: str, delimiter: str = "|", *, source: str = "", line_no: int = 0) -> List[str]:
    genres = value.split(delimiter)
    if any(not g for g in genres):
        raise RowParseError(
            f"genres: empty genre name in {value!r}",
            source=source, line_no=line_no, column="genres", value=value,
        )
    return genres


def require_fields(fields: List[str], count: int, *, source: str = "", line_no: int = 0) -> None:
    if len(fields) < count:
        raise RowParseError(
            f"expected at least {count} fields, got {len(fields)}",
            source=source,
            line_no=line_no,
        )


def parse_int(value: str, column: str, *, source: str = "", line_no: int = 0,
              low: int = INT32_MIN, high: int = INT32_MAX) -> int:
    # int() alone would also take "1_0" and " 7 "
    if not INT_RE.fullmatch(value):
        raise RowParseError(
            f"{column}: not an integer: {value!r}", source=source, line_no=line_no, column=column, value=value
        )
    parsed = int(value)
    if not low <= parsed <= high:
        raise RowParseError(
            f"{column}: {parsed} out of range [{low}, {high}]",
            source=source, line_no=line_no, column=column, value=value,
        )
    return parsed


def parse_timestamp(value: str, column: str = "timestamp", *, source: str = "", line_no: int = 0) -> int:
    return parse_int(value, column, source=source, line_no=line_no, low=INT64_MIN, high=INT64_MAX)


def parse_float(value: str, column: str, *, source: str = "", line_no: int = 0) -> float:
    if not FLOAT_RE.fullmatch(value):
        raise RowParseError(
            f"{column}: not a number: {value!r}", source=source, line_no=line_no, column=column, value=value
        )
    parsed = float(value)
    if not math.isfinite(parsed):
        raise RowParseError(
            f"{column}: not a finite number: {value!r}", source=source, line_no=line_no, column=column, value=value
        )
    return parsed
