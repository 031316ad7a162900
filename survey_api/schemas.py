from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from survey_core.columns import PAGE_SIZE


class TableStateModel(BaseModel):
    search: str = ""
    filter_value: str = ""
    page: int = 1
    page_size: int = PAGE_SIZE
    sort_key: Optional[str] = None
    sort_ascending: bool = True


class ColumnModel(BaseModel):
    key: str
    label: str


class MetaColumnsResponse(BaseModel):
    columns: List[ColumnModel]
    filter_column: str
    filter_options: List[str] = Field(default_factory=list)
    page_size: int = PAGE_SIZE
