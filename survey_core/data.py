from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd
import requests

from survey_core.columns import TABLE_COLUMNS, Record, record_value
from survey_core.csv_parser import parse_csv


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
DEFAULT_SOURCE = DATA_DIR / "survey.csv"
SOURCE_ENV_VAR = "SURVEY_CSV_SOURCE"
FETCH_TIMEOUT = 30.0

_NUMBER_RE = re.compile(r"\d{1,3}", re.ASCII)
_DATE_RE = re.compile(r"(\d{4})/(\d{2})/(\d{2})", re.ASCII)
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)", re.ASCII)


class SurveyLoadError(Exception):
    pass


def get_source() -> str:
    return os.environ.get(SOURCE_ENV_VAR) or str(DEFAULT_SOURCE)


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def fetch_text(url: str, *, timeout: float = FETCH_TIMEOUT) -> str:
    logger.info("Fetching survey CSV from %s", url)
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise SurveyLoadError(str(exc)) from exc
    if not resp.ok:
        raise SurveyLoadError(f"Erro HTTP {resp.status_code}: {resp.reason}")
    return resp.content.decode("utf-8-sig", errors="replace")


def read_text(path: Path) -> str:
    logger.info("Reading survey CSV from %s", path)
    try:
        return path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise SurveyLoadError(f"Não foi possível ler {path}: {exc}") from exc


def load_survey_text(source: str) -> str:
    if is_url(source):
        return fetch_text(source)
    return read_text(Path(source))


def source_signature(source: str) -> Optional[float]:
    """mtime for local files so edits invalidate the cache; URLs are fetched once."""
    if is_url(source):
        return None
    try:
        return Path(source).stat().st_mtime
    except OSError:
        return None


# ---------------- Value helpers ----------------
def get_number(value: object) -> Optional[int]:
    """First run of up to three digits ('31 anos' -> 31), else None."""
    if not value:
        return None
    match = _NUMBER_RE.search(str(value))
    return int(match.group(0)) if match else None


def get_date(value: object) -> Optional[datetime]:
    """Date part of timestamps like '2025/08/04 10:02:03 da manhã GMT-3'."""
    match = _DATE_RE.search(str(value or ""))
    if not match:
        return None
    try:
        return datetime(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def parse_int_prefix(value: object) -> Optional[int]:
    """Leading integer of a string ('4 - bom' -> 4), None when there is none."""
    match = _INT_PREFIX_RE.match(str(value or ""))
    return int(match.group(1)) if match else None


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def format_decimal(value: Optional[float], decimals: int) -> str:
    rounded = round_half_up(value, decimals)
    if rounded is None:
        return "0"
    return f"{rounded:.{decimals}f}"


def records_frame(records: Sequence[Record]) -> pd.DataFrame:
    """One column per table column key, empty string for missing fields."""
    keys = [c.key for c in TABLE_COLUMNS]
    rows = [[record_value(r, k) for k in keys] for r in records]
    return pd.DataFrame(rows, columns=keys, dtype=object)


# ---------------- Public API (Streamlit + FastAPI) ----------------
@lru_cache(maxsize=4)
def _load_survey_data_cached(source: str, signature: Optional[float]) -> Dict[str, object]:
    text = load_survey_text(source)
    records = parse_csv(text)
    columns: List[str] = list(records[0].keys()) if records else []
    logger.info("Parsed %d survey responses from %s", len(records), source)
    return {
        "source": source,
        "records": tuple(records),
        "columns": columns,
    }


def load_survey_data(source: Optional[str] = None) -> Dict[str, object]:
    source = source or get_source()
    try:
        return _load_survey_data_cached(source, source_signature(source))
    except SurveyLoadError as exc:
        logger.warning("Failed to load survey data from %s: %s", source, exc)
        raise


def clear_survey_cache() -> None:
    _load_survey_data_cached.cache_clear()
