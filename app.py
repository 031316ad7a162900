import logging
from contextlib import contextmanager
from typing import Dict, List

import altair as alt
import pandas as pd
import streamlit as st

from survey_core.columns import EXPORT_FILENAME, FILTER_OPTIONS, TABLE_COLUMNS
from survey_core.data import SurveyLoadError, load_survey_data
from survey_core.filters import TableState
from survey_core.metrics_feedback import compute_summary
from survey_core.table import TableController

alt.data_transformers.disable_max_rows()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    # Emitted on every rerun; Streamlit discards elements a rerun does not repeat.
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        .feedback-item {border-left: 3px solid #4299e1;padding: 6px 10px;margin-bottom: 8px;background: #f9fafb;}
        .feedback-meta {color: #6b7280;font-size: 0.8rem;display: flex;gap: 12px;}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body


def format_state_summary(state: TableState) -> str:
    search_chip = f"Busca: {state.search}" if state.search else "Busca: vazia"
    filter_chip = f"Nota UBS: {state.filter_value}" if state.filter_value else "Nota UBS: Todas"
    sort_label = next((c.label for c in TABLE_COLUMNS if c.key == state.sort_key), None)
    sort_chip = (
        f"Ordenação: {sort_label} ({'asc' if state.sort_ascending else 'desc'})" if sort_label else "Ordenação: original"
    )
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [search_chip, filter_chip, sort_chip]])


def render_page_header(title: str, breadcrumb: str):
    st.markdown(
        f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
        unsafe_allow_html=True,
    )


def render_feedback_list(items: List[Dict[str, str]]):
    if not items:
        st.info("Nenhum comentário nesta categoria.")
        return
    for item in items:
        st.markdown(
            f"<div class='feedback-item'><div class='feedback-text'>\"{item['comment']}\"</div>"
            f"<div class='feedback-meta'><span>{item['name']}</span><span>{item['timestamp']}</span></div></div>",
            unsafe_allow_html=True,
        )


# ---------- UI setup ----------
st.set_page_config(page_title="Pesquisa de Satisfação UBS", layout="wide")
inject_base_styles()
st.title("Pesquisa de Satisfação UBS")
st.caption("Resumo das respostas, distribuição das notas e tabela pesquisável.")

try:
    data_ctx = load_survey_data()
except SurveyLoadError as exc:
    st.error(f"Erro ao carregar dados: {exc}")
    st.stop()

records = data_ctx["records"]
summary = compute_summary(records)

if "table_state" not in st.session_state:
    st.session_state["table_state"] = TableState()
    st.session_state["search_raw"] = ""
table = TableController(records, st.session_state["table_state"])


def render_overview():
    kpis = summary["kpis"]
    with card("Visão geral"):
        cols = st.columns(4)
        cols[0].metric("Total de respostas", kpis["total_responses"])
        cols[1].metric("Nota média UBS", kpis["avg_rating"])
        cols[2].metric("Taxa de satisfação", f"{kpis['satisfaction_rate']}%", help="Notas 4 ou 5.")
        cols[3].metric("Nota média horário corrido", kpis["avg_schedule_rating"])
        info = st.columns(3)
        period = summary["period"]
        if period:
            info[0].markdown(f"**Período:** {period['label']}  \n{period['detail']}")
        ages = summary["ages"]
        if ages:
            info[1].markdown(f"**Idade:** {ages['label']}")
        info[2].markdown(f"**Expectativas:** {summary['expectations']['label']}")

    charts = summary["charts"]
    c1, c2 = st.columns(2)
    with c1:
        with card("Notas: experiência na UBS"):
            st.vega_lite_chart(charts["ubs_ratings"], use_container_width=True)
    with c2:
        with card("Notas: horário corrido"):
            st.vega_lite_chart(charts["schedule_ratings"], use_container_width=True)
    c3, c4 = st.columns(2)
    with c3:
        with card("Expectativas atendidas"):
            st.vega_lite_chart(charts["expectations"], use_container_width=True)
    with c4:
        with card("Faixa etária"):
            if "ages" in charts:
                st.vega_lite_chart(charts["ages"], use_container_width=True)
            else:
                st.info("Sem idades informadas.")


def render_table():
    with card("Respostas"):
        c1, c2, c3 = st.columns([5, 2, 3])
        # The widget keeps the raw term; the table state keeps the lower-cased one.
        if "search_input" not in st.session_state:
            st.session_state["search_input"] = st.session_state["search_raw"]
        search = c1.text_input("Buscar", key="search_input")
        st.session_state["search_raw"] = search
        if search.lower() != table.state.search:
            table.set_search(search)
        options = [""] + FILTER_OPTIONS
        current = table.state.filter_value if table.state.filter_value in options else ""
        filter_value = c2.selectbox(
            "Nota UBS",
            options=options,
            index=options.index(current),
            format_func=lambda v: v or "Todas",
        )
        if filter_value != table.state.filter_value:
            table.set_filter(filter_value)
        labels = [c.label for c in TABLE_COLUMNS]
        sort_col = c3.selectbox("Ordenar por", options=list(range(len(labels))), format_func=lambda i: labels[i])
        if c3.button("Ordenar / inverter"):
            table.sort_by(sort_col)

        st.markdown(f"<div class='chip-row'>{format_state_summary(table.state)}</div>", unsafe_allow_html=True)
        view = table.view()
        pages = view["pages"]
        if pages > 1:
            page = st.number_input("Página", min_value=1, max_value=pages, value=min(table.state.page, pages), step=1)
            if page != table.state.page:
                table.set_page(int(page))
                view = table.view()

        df = pd.DataFrame(view["rows"], columns=[c.key for c in TABLE_COLUMNS])
        df.columns = labels
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.caption(view["info"])
        export_csv = table.export_filtered()
        if export_csv:
            st.download_button(
                "Exportar CSV",
                data=export_csv.encode("utf-8"),
                file_name=EXPORT_FILENAME,
                mime="text/csv",
            )


def render_feedback():
    feedback = summary["feedback"]
    with card("Comentários"):
        cols = st.columns(3)
        cols[0].metric("Comentários", feedback["kpis"]["total_comments"])
        cols[1].metric("Positivos", feedback["kpis"]["positive_comments"])
        cols[2].metric("Sugestões", feedback["kpis"]["suggestion_comments"])
        tabs = st.tabs(["Nota 5", "Nota 4", "Sugestões"])
        with tabs[0]:
            render_feedback_list(feedback["excellent"])
        with tabs[1]:
            render_feedback_list(feedback["good"])
        with tabs[2]:
            render_feedback_list(feedback["suggestions"])


def render_insights():
    with card("Insights"):
        cols = st.columns(2)
        for idx, insight in enumerate(summary["insights"]):
            with cols[idx % 2]:
                st.markdown(f"**{insight['title']}**  \n{insight['content']}")


with st.sidebar:
    st.markdown("### Navegar")
    current_page = st.radio("Navegar", ["Visão geral", "Respostas", "Comentários", "Insights"], index=0)
    st.markdown("---")
    st.caption(f"Fonte: {data_ctx['source']}")

render_page_header(current_page, f"Início / {current_page}")

if current_page == "Visão geral":
    render_overview()
elif current_page == "Respostas":
    render_table()
elif current_page == "Comentários":
    render_feedback()
else:
    render_insights()

st.session_state["table_state"] = table.state
