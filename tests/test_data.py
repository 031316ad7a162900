from datetime import datetime

import pytest
import requests

from survey_core import data as data_mod
from survey_core.data import (
    SurveyLoadError,
    fetch_text,
    get_date,
    get_number,
    load_survey_data,
    load_survey_text,
    parse_int_prefix,
    round_half_up,
)


class FakeResponse:
    def __init__(self, status_code=200, reason="OK", content=b""):
        self.status_code = status_code
        self.reason = reason
        self.content = content

    @property
    def ok(self):
        return self.status_code < 400


def test_get_number():
    assert get_number("31 anos") == 31
    assert get_number("55") == 55
    assert get_number("1234") == 123
    assert get_number("") is None
    assert get_number(None) is None
    assert get_number("não informado") is None


def test_get_date():
    assert get_date("2025/08/04 10:02:03 da manhã GMT-3") == datetime(2025, 8, 4)
    assert get_date("04/08/2025") is None
    assert get_date("2025/13/45") is None
    assert get_date(None) is None


def test_parse_int_prefix():
    assert parse_int_prefix("5") == 5
    assert parse_int_prefix(" 4 - bom") == 4
    assert parse_int_prefix("nota 5") is None
    assert parse_int_prefix("") is None


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(66.665, 2) == 66.67
    assert round_half_up(None) is None


def test_load_local_file(tmp_path, sample_text):
    path = tmp_path / "survey.csv"
    path.write_text(sample_text, encoding="utf-8")
    ctx = load_survey_data(str(path))
    assert ctx["source"] == str(path)
    assert len(ctx["records"]) == 6
    assert ctx["columns"][0] == "Carimbo de data/hora"


def test_utf8_bom_is_dropped(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffa,b\n1,2\n".encode("utf-8"))
    assert load_survey_data(str(path))["records"] == ({"a": "1", "b": "2"},)


def test_local_file_is_cached_until_modified(tmp_path, monkeypatch):
    path = tmp_path / "survey.csv"
    path.write_text("a\n1\n", encoding="utf-8")
    calls = []
    real = data_mod.load_survey_text

    def counting(source):
        calls.append(source)
        return real(source)

    monkeypatch.setattr(data_mod, "load_survey_text", counting)
    first = load_survey_data(str(path))
    assert load_survey_data(str(path)) is first
    assert len(calls) == 1


def test_missing_file_raises(tmp_path):
    with pytest.raises(SurveyLoadError):
        load_survey_text(str(tmp_path / "missing.csv"))


def test_source_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.csv"
    path.write_text("x,y\n1,2\n", encoding="utf-8")
    monkeypatch.setenv("SURVEY_CSV_SOURCE", str(path))
    assert load_survey_data()["records"] == ({"x": "1", "y": "2"},)


def test_fetch_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(404, "Not Found"))
    with pytest.raises(SurveyLoadError, match="Erro HTTP 404: Not Found"):
        fetch_text("https://example.test/survey.csv")


def test_fetch_network_error(monkeypatch):
    def boom(url, timeout):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "get", boom)
    with pytest.raises(SurveyLoadError, match="connection refused"):
        load_survey_data("http://example.test/survey.csv")


def test_fetch_success(monkeypatch, sample_text):
    monkeypatch.setattr(
        requests, "get", lambda url, timeout: FakeResponse(content=sample_text.encode("utf-8"))
    )
    ctx = load_survey_data("https://example.test/survey.csv")
    assert len(ctx["records"]) == 6
