from survey_core.metrics_feedback import compute_feedback, compute_insights, compute_summary, is_positive
from survey_core.metrics_overview import (
    age_bucket,
    compute_overview,
    rating_bars,
    satisfaction_rate,
)


def test_overview_kpis(sample_records):
    overview = compute_overview(sample_records)
    kpis = overview["kpis"]
    assert kpis["total_responses"] == 6
    assert kpis["avg_rating"] == "4.00"
    assert kpis["satisfaction_rate"] == 67
    assert kpis["avg_schedule_rating"] == "3.83"


def test_overview_period_and_ages(sample_records):
    overview = compute_overview(sample_records)
    assert overview["period"]["label"] == "04/08/2025 a 07/08/2025"
    assert overview["period"]["dated_responses"] == 6
    ages = overview["ages"]
    assert ages["label"] == "Média: 40.3 | Mín: 19 | Máx: 67"
    assert [b["bucket"] for b in ages["buckets"]] == ["-19", "20-29", "30-39", "40-49", "50-59", "60+"]


def test_overview_expectations(sample_records):
    exp = compute_overview(sample_records)["expectations"]
    assert (exp["yes"], exp["partial"], exp["no"]) == (4, 1, 1)
    assert exp["label"] == "Sim: 4 | Parcial: 1 | Não: 1"
    assert [round(s["pct"], 1) for s in exp["shares"]] == [66.7, 16.7, 16.7]


def test_overview_charts_are_vega_specs(sample_records):
    charts = compute_overview(sample_records)["charts"]
    assert set(charts) == {"ubs_ratings", "schedule_ratings", "expectations", "ages"}
    assert all("$schema" in spec for spec in charts.values())


def test_overview_without_records():
    overview = compute_overview([])
    assert overview["kpis"] == {
        "total_responses": 0,
        "avg_rating": "0",
        "satisfaction_rate": 0,
        "avg_schedule_rating": "0",
    }
    assert overview["period"] is None
    assert overview["ages"] is None
    assert "ages" not in overview["charts"]


def test_rating_bars_scale_to_tallest():
    bars = rating_bars([5, 5, 5, 2])
    assert [b["count"] for b in bars] == [0, 1, 0, 0, 3]
    assert bars[4]["height"] == 180
    assert bars[1]["height"] == 60
    assert all(b["height"] == 0 for b in rating_bars([]))


def test_satisfaction_rate_rounds_half_up():
    assert satisfaction_rate([4, 1]) == 50
    assert satisfaction_rate([5, 1, 1, 1, 1, 1, 1, 1]) == 13
    assert satisfaction_rate([]) == 0


def test_age_buckets():
    assert [age_bucket(a) for a in (5, 20, 39, 49, 50, 60, 99)] == [
        "-19", "20-29", "30-39", "40-49", "50-59", "60+", "60+",
    ]


def test_feedback_classification(sample_records):
    feedback = compute_feedback(sample_records)
    assert feedback["kpis"] == {"total_comments": 5, "positive_comments": 2, "suggestion_comments": 5}
    assert [i["name"] for i in feedback["excellent"]] == ["Maria Souza", "Roberto"]
    assert [i["name"] for i in feedback["good"]] == ["João Lima"]
    assert len(feedback["suggestions"]) == 5
    assert feedback["excellent"][0]["timestamp"].startswith("2025/08/04")


def test_positive_needs_top_rating_and_keyword(sample_records):
    maria = dict(sample_records[0])
    assert is_positive(maria)
    maria["3. Em uma escala de 1 a 5, como você avaliaria sua experiência na UBS? ( 1 = Muito ruim | 5 = Excelente )"] = "4"
    assert not is_positive(maria)


def test_insights(sample_records):
    summary = compute_summary(sample_records)
    insights = summary["insights"]
    assert [i["title"] for i in insights] == [
        "Alta Satisfação Geral",
        "Horário Corrido Bem Avaliado",
        "Expectativas Atendidas",
        "Sugestões de Melhoria",
    ]
    assert "4.00" in insights[0]["content"] and "67%" in insights[0]["content"]
    assert insights[3]["content"] == "Foram registradas 5 sugestões/comentários."
    assert compute_insights(summary, summary["feedback"]) == insights
