from __future__ import annotations

from dataclasses import asdict
import logging
import math
from typing import Sequence

from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from survey_api.schemas import ColumnModel, MetaColumnsResponse, TableStateModel
from survey_core.columns import EXPORT_FILENAME, FILTER_COLUMN_INDEX, FILTER_OPTIONS, PAGE_SIZE, TABLE_COLUMNS, Record
from survey_core.data import SurveyLoadError, load_survey_data
from survey_core.filters import TableState, normalize_table_state
from survey_core.metrics_feedback import compute_summary
from survey_core.table import compute_table_page, export_filtered, sort_by


app = FastAPI(title="UBS Survey Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _state_from_model(model: TableStateModel) -> TableState:
    return normalize_table_state(model.model_dump())


def _records() -> Sequence[Record]:
    return load_survey_data()["records"]  # type: ignore[return-value]


def _json(data: object) -> JSONResponse:
    """Return JSON with NaN/inf mapped to null."""

    def _safe_float(value: float) -> float | None:
        if math.isnan(value) or math.isinf(value):
            return None
        return value

    return JSONResponse(content=jsonable_encoder(data, custom_encoder={float: _safe_float}))


def _error(exc: Exception, where: str) -> JSONResponse:
    if isinstance(exc, SurveyLoadError):
        logger.warning("%s: survey source unavailable: %s", where, exc)
        return JSONResponse(
            status_code=502,
            content={"error": f"Erro ao carregar dados: {exc}", "type": type(exc).__name__},
        )
    logger.exception("%s failed", where)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/columns")
def meta_columns():
    payload = MetaColumnsResponse(
        columns=[ColumnModel(**asdict(c)) for c in TABLE_COLUMNS],
        filter_column=TABLE_COLUMNS[FILTER_COLUMN_INDEX].key,
        filter_options=FILTER_OPTIONS,
        page_size=PAGE_SIZE,
    )
    return _json(payload.model_dump())


@app.get("/summary")
def summary():
    try:
        return _json(compute_summary(_records()))
    except Exception as exc:
        return _error(exc, "summary")


@app.post("/responses")
def responses(state: TableStateModel):
    try:
        return _json(compute_table_page(_state_from_model(state), _records()))
    except Exception as exc:
        return _error(exc, "responses")


@app.post("/responses/sort")
def responses_sort(state: TableStateModel, column: int = Query(..., ge=0, lt=len(TABLE_COLUMNS))):
    try:
        new_state = sort_by(_state_from_model(state), column)
        return _json(compute_table_page(new_state, _records()))
    except Exception as exc:
        return _error(exc, "responses_sort")


@app.post("/export")
def export(state: TableStateModel):
    try:
        csv_text = export_filtered(_records(), _state_from_model(state))
    except Exception as exc:
        return _error(exc, "export")
    if not csv_text:
        return Response(status_code=204)
    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
