"""Responses table: search, rating filter, sorting, pagination and CSV export.

Every operation takes a :class:`TableState` and returns a new one; the record
sequence itself is never reordered or mutated. Filtered and sorted rows are
re-derived from the original records on each read.
"""

from __future__ import annotations

import math
import unicodedata
from dataclasses import asdict, replace
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Sequence

from survey_core.columns import (
    DATE_COLUMN_INDEX,
    FILTER_COLUMN_INDEX,
    TABLE_COLUMNS,
    Record,
    record_value,
)
from survey_core.data import get_date
from survey_core.filters import TableState

EPOCH = datetime(1970, 1, 1)
# Non-finite spellings a loose numeric check accepts; "inf" and "nan" are text.
INFINITY_SPELLINGS = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


# ---------------- State transitions ----------------
def set_search(state: TableState, term: Optional[str]) -> TableState:
    return replace(state, search=(term or "").lower(), page=1)


def set_filter(state: TableState, value: Optional[str]) -> TableState:
    return replace(state, filter_value=value or "", page=1)


def set_page(state: TableState, page: int) -> TableState:
    return replace(state, page=int(page))


def sort_by(state: TableState, column_index: int) -> TableState:
    key = TABLE_COLUMNS[column_index].key
    ascending = (not state.sort_ascending) if state.sort_key == key else True
    return replace(state, sort_key=key, sort_ascending=ascending, page=1)


# ---------------- Derived views ----------------
def matches(state: TableState, record: Record) -> bool:
    if state.filter_value:
        rating = record_value(record, TABLE_COLUMNS[FILTER_COLUMN_INDEX].key)
        if rating != state.filter_value:
            return False
    if state.search:
        return any(state.search in record_value(record, c.key).lower() for c in TABLE_COLUMNS)
    return True


def _as_number(value: str) -> Optional[float]:
    # Blank strings count as zero, like a loose numeric check would.
    text = value.strip()
    if not text:
        return 0.0
    if text in INFINITY_SPELLINGS:
        return INFINITY_SPELLINGS[text]
    if "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def collation_key(value: str):
    """Sort key ordering text the way a Portuguese reader expects.

    Letters compare without accents or case first; accents and case only break
    ties, plain before accented and lowercase before uppercase. Independent of
    the process locale.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), value.swapcase())


def _compare_values(a: str, b: str) -> int:
    na, nb = _as_number(a), _as_number(b)
    if na is not None and nb is not None:
        return (na > nb) - (na < nb)
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def _compare_dates(a: str, b: str) -> int:
    da = get_date(a) or EPOCH
    db = get_date(b) or EPOCH
    return (da > db) - (da < db)


def sort_records(records: Iterable[Record], key: str, ascending: bool = True) -> List[Record]:
    compare = _compare_dates if key == TABLE_COLUMNS[DATE_COLUMN_INDEX].key else _compare_values

    def cmp(ra: Record, rb: Record) -> int:
        va, vb = record_value(ra, key), record_value(rb, key)
        return compare(va, vb) if ascending else compare(vb, va)

    return sorted(records, key=cmp_to_key(cmp))


def filter_records(records: Sequence[Record], state: TableState) -> List[Record]:
    rows: Iterable[Record] = records
    if state.sort_key:
        rows = sort_records(records, state.sort_key, state.sort_ascending)
    return [r for r in rows if matches(state, r)]


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0


def page_slice(rows: Sequence[Record], state: TableState) -> List[Record]:
    start = (state.page - 1) * state.page_size
    if start < 0:
        return []
    return list(rows[start : start + state.page_size])


def table_info(total: int, state: TableState) -> str:
    end = state.page * state.page_size
    return f"Mostrando {min(total, end)} de {total} respostas"


# ---------------- Export ----------------
def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def to_csv(records: Sequence[Record]) -> str:
    """Header from the first record's keys; every value quoted; CRLF rows."""
    if not records:
        return ""
    header = list(records[0].keys())
    lines = [",".join(header)]
    for record in records:
        lines.append(",".join(_quote(record.get(k) or "") for k in header))
    return "\r\n".join(lines)


def export_filtered(records: Sequence[Record], state: TableState) -> str:
    return to_csv(filter_records(records, state))


# ---------------- Payloads ----------------
def compute_table_page(state: TableState, records: Sequence[Record]) -> Dict[str, Any]:
    filtered = filter_records(records, state)
    total = len(filtered)
    rows = page_slice(filtered, state)
    return {
        "state": asdict(state),
        "columns": [asdict(c) for c in TABLE_COLUMNS],
        "rows": [{c.key: record_value(r, c.key) for c in TABLE_COLUMNS} for r in rows],
        "total": total,
        "total_records": len(records),
        "pages": page_count(total, state.page_size),
        "info": table_info(total, state),
    }


class TableController:
    """Owns the parsed records and the current table state."""

    def __init__(self, records: Sequence[Record], state: Optional[TableState] = None):
        self.records = tuple(records)
        self.state = state or TableState()

    def set_search(self, term: Optional[str]) -> TableState:
        self.state = set_search(self.state, term)
        return self.state

    def set_filter(self, value: Optional[str]) -> TableState:
        self.state = set_filter(self.state, value)
        return self.state

    def set_page(self, page: int) -> TableState:
        self.state = set_page(self.state, page)
        return self.state

    def sort_by(self, column_index: int) -> TableState:
        self.state = sort_by(self.state, column_index)
        return self.state

    def filtered(self) -> List[Record]:
        return filter_records(self.records, self.state)

    def page_rows(self) -> List[Record]:
        return page_slice(self.filtered(), self.state)

    def page_count(self) -> int:
        return page_count(len(self.filtered()), self.state.page_size)

    def export_filtered(self) -> str:
        return export_filtered(self.records, self.state)

    def view(self) -> Dict[str, Any]:
        return compute_table_page(self.state, self.records)
