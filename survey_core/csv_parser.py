"""Parser for the survey CSV export.

The export is "almost" CSV: every line may carry a row-index prefix such as
``12|`` and quoting is only used to protect commas. Parsing is best-effort and
never raises; malformed rows simply produce empty cells.

Doubled quotes inside a quoted field are not un-escaped. Quote characters in
data lines only toggle the quoted state and are dropped, so a doubled pair
such as ``""hi""`` reads back as plain ``hi``.
"""

from __future__ import annotations

import re
from typing import List

from survey_core.columns import Record

_LINE_BREAK = re.compile(r"\r?\n")
_ROW_PREFIX = re.compile(r"^\d+\|", re.ASCII)
# Comma followed by an even number of quotes up to the end of the line.
_HEADER_SPLIT = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')
_EDGE_QUOTES = re.compile(r'^"|"$')


def strip_row_prefix(line: str) -> str:
    return _ROW_PREFIX.sub("", line, count=1)


def clean_cell(value: str) -> str:
    """Drop one leading and one trailing double quote, then trim."""
    return _EDGE_QUOTES.sub("", value).strip()


def split_header(line: str) -> List[str]:
    return [clean_cell(token) for token in _HEADER_SPLIT.split(strip_row_prefix(line))]


def split_line(line: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in strip_row_prefix(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def parse_csv(text: str) -> List[Record]:
    lines = [line for line in _LINE_BREAK.split(text or "") if line.strip()]
    if not lines:
        return []

    header = split_header(lines[0])
    records: List[Record] = []
    for line in lines[1:]:
        parts = split_line(line)
        record: Record = {}
        for idx, key in enumerate(header):
            record[key] = clean_cell(parts[idx] if idx < len(parts) else "")
        records.append(record)
    return records
