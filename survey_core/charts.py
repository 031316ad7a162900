from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

SCORE_COLORS = ["#e53e3e", "#ed8936", "#ecc94b", "#48bb78", "#2f855a"]
EXPECTATION_COLORS = {"Sim": "#48bb78", "Parcial": "#ecc94b", "Não": "#e53e3e"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def rating_distribution_chart(bars: List[Dict[str, Any]], title: str = "") -> alt.Chart:
    df = pd.DataFrame(bars, columns=["score", "count"])
    return (
        alt.Chart(df, title=title)
        .mark_bar()
        .encode(
            x=alt.X("score:O", title="Nota", axis=alt.Axis(labelAngle=0)),
            y=alt.Y("count:Q", title="Respostas", axis=alt.Axis(format="d", gridDash=[4, 4], domain=False, ticks=False)),
            color=alt.Color(
                "score:O",
                scale=alt.Scale(domain=[1, 2, 3, 4, 5], range=SCORE_COLORS),
                legend=None,
            ),
            tooltip=[alt.Tooltip("score:O", title="Nota"), alt.Tooltip("count:Q", title="Respostas")],
        )
        .properties(height=180)
    )


def expectations_chart(shares: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(shares, columns=["answer", "count", "pct"])
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("pct:Q", title="%", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("answer:N", title=None, sort=list(EXPECTATION_COLORS)),
            color=alt.Color(
                "answer:N",
                scale=alt.Scale(domain=list(EXPECTATION_COLORS), range=list(EXPECTATION_COLORS.values())),
                legend=None,
            ),
            tooltip=["answer", "count", alt.Tooltip("pct:Q", format=".1f")],
        )
        .properties(height=120)
    )


def age_distribution_chart(buckets: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(buckets, columns=["bucket", "count"])
    return (
        alt.Chart(df)
        .mark_bar(color="#4299e1")
        .encode(
            x=alt.X("bucket:N", title="Faixa etária", sort=None, axis=alt.Axis(labelAngle=0)),
            y=alt.Y("count:Q", title="Respostas", axis=alt.Axis(format="d")),
            tooltip=["bucket", "count"],
        )
        .properties(height=180)
    )
