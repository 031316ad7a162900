from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from survey_core.columns import PAGE_SIZE, TABLE_COLUMNS


@dataclass(frozen=True)
class TableState:
    search: str = ""
    filter_value: str = ""
    page: int = 1
    page_size: int = PAGE_SIZE
    sort_key: Optional[str] = None
    sort_ascending: bool = True


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_table_state(raw: Optional[dict]) -> TableState:
    """Build a TableState from loosely typed input (API bodies, UI widgets)."""
    raw = raw or {}

    search = str(raw.get("search") or "").lower()
    filter_value = str(raw.get("filter_value") or "").strip()
    page = _as_int(raw.get("page", 1), 1)
    page_size = _as_int(raw.get("page_size", PAGE_SIZE), PAGE_SIZE)
    if page_size < 1:
        page_size = PAGE_SIZE

    known_keys = {c.key for c in TABLE_COLUMNS}
    sort_key = raw.get("sort_key") or None
    if sort_key is not None and sort_key not in known_keys:
        sort_key = None
    sort_ascending = bool(raw.get("sort_ascending", True))

    return TableState(
        search=search,
        filter_value=filter_value,
        page=page,
        page_size=page_size,
        sort_key=sort_key,
        sort_ascending=sort_ascending,
    )
