from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture
def app(tmp_path, monkeypatch, sample_text):
    path = tmp_path / "survey.csv"
    path.write_text(sample_text, encoding="utf-8")
    monkeypatch.setenv("SURVEY_CSV_SOURCE", str(path))
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def _styles_present(at):
    return any("<style>" in md.value for md in at.markdown)


def _open_responses(at):
    at.sidebar.radio[0].set_value("Respostas").run()
    assert not at.exception


def test_styles_are_emitted_on_every_rerun(app):
    assert _styles_present(app)
    app.run()
    assert _styles_present(app)
    _open_responses(app)
    assert _styles_present(app)


def test_search_box_keeps_typed_case(app):
    _open_responses(app)
    app.text_input(key="search_input").input("MARIA").run()
    assert app.text_input(key="search_input").value == "MARIA"
    assert app.session_state["table_state"].search == "maria"
    app.run()
    assert app.text_input(key="search_input").value == "MARIA"
    assert any(c.value == "Mostrando 1 de 1 respostas" for c in app.caption)


def test_search_survives_page_switch(app):
    _open_responses(app)
    app.text_input(key="search_input").input("Ana").run()
    app.sidebar.radio[0].set_value("Insights").run()
    _open_responses(app)
    assert app.text_input(key="search_input").value == "Ana"
    assert app.session_state["table_state"].search == "ana"
