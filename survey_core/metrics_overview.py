from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from survey_core.charts import (
    age_distribution_chart,
    expectations_chart,
    rating_distribution_chart,
    to_vega_spec,
)
from survey_core.columns import (
    AGE_KEY,
    DATE_KEY,
    EXPECTATIONS_KEY,
    SCHEDULE_RATING_KEY,
    UBS_RATING_KEY,
    Record,
)
from survey_core.data import format_decimal, get_date, get_number, records_frame, round_half_up

BAR_MAX_HEIGHT = 180
SCORES = [1, 2, 3, 4, 5]
AGE_BUCKETS = ["-19", "20-29", "30-39", "40-49", "50-59", "60+"]


def ratings_from(series: pd.Series) -> List[int]:
    """Scores in the 1..5 range; anything else is ignored."""
    values = (get_number(v) for v in series)
    return [v for v in values if v is not None and 1 <= v <= 5]


def average_label(values: Sequence[int]) -> str:
    if not values:
        return "0"
    return format_decimal(sum(values) / len(values), 2)


def satisfaction_rate(ratings: Sequence[int]) -> int:
    if not ratings:
        return 0
    satisfied = sum(1 for r in ratings if r >= 4)
    return int(round_half_up(100 * satisfied / len(ratings)) or 0)


def rating_bars(ratings: Sequence[int]) -> List[Dict[str, Any]]:
    counts = [sum(1 for r in ratings if r == score) for score in SCORES]
    top = max(counts + [1])
    return [
        {"score": score, "count": count, "height": BAR_MAX_HEIGHT * count / top}
        for score, count in zip(SCORES, counts)
    ]


def age_bucket(age: int) -> str:
    if age < 20:
        return "-19"
    if age < 30:
        return "20-29"
    if age < 40:
        return "30-39"
    if age < 50:
        return "40-49"
    if age < 60:
        return "50-59"
    return "60+"


def age_summary(ages: Sequence[int]) -> Optional[Dict[str, Any]]:
    if not ages:
        return None
    avg = format_decimal(sum(ages) / len(ages), 1)
    counts = pd.Series([age_bucket(a) for a in ages]).value_counts()
    buckets = [{"bucket": b, "count": int(counts[b])} for b in AGE_BUCKETS if b in counts.index]
    return {
        "average": avg,
        "min": min(ages),
        "max": max(ages),
        "label": f"Média: {avg} | Mín: {min(ages)} | Máx: {max(ages)}",
        "buckets": buckets,
    }


def expectation_counts(series: pd.Series) -> Dict[str, int]:
    answers = series.fillna("").astype(str).str.lower()
    return {
        "yes": int((answers == "sim").sum()),
        "partial": int(answers.str.contains("parcial", regex=False).sum()),
        "no": int((answers == "não").sum()),
    }


def expectation_shares(counts: Dict[str, int]) -> List[Dict[str, Any]]:
    total = counts["yes"] + counts["partial"] + counts["no"]
    out = []
    for answer, key in [("Sim", "yes"), ("Parcial", "partial"), ("Não", "no")]:
        value = counts[key]
        out.append({"answer": answer, "count": value, "pct": (100 * value / total) if total else 0.0})
    return out


def survey_period(series: pd.Series) -> Optional[Dict[str, Any]]:
    dates = sorted(d for d in (get_date(v) for v in series) if d is not None)
    if not dates:
        return None
    start, end = dates[0].strftime("%d/%m/%Y"), dates[-1].strftime("%d/%m/%Y")
    return {
        "start": start,
        "end": end,
        "label": f"{start} a {end}",
        "dated_responses": len(dates),
        "detail": f"{len(dates)} respostas com data",
    }


def compute_overview(records: Sequence[Record]) -> Dict[str, Any]:
    df = records_frame(records)

    ratings = ratings_from(df[UBS_RATING_KEY])
    schedule_ratings = ratings_from(df[SCHEDULE_RATING_KEY])
    ages = [a for a in (get_number(v) for v in df[AGE_KEY]) if a is not None]
    expectations = expectation_counts(df[EXPECTATIONS_KEY])

    ubs_bars = rating_bars(ratings)
    schedule_bars = rating_bars(schedule_ratings)
    shares = expectation_shares(expectations)
    ages_info = age_summary(ages)

    charts: Dict[str, Any] = {
        "ubs_ratings": to_vega_spec(rating_distribution_chart(ubs_bars, "Experiência na UBS")),
        "schedule_ratings": to_vega_spec(rating_distribution_chart(schedule_bars, "Horário corrido")),
        "expectations": to_vega_spec(expectations_chart(shares)),
    }
    if ages_info:
        charts["ages"] = to_vega_spec(age_distribution_chart(ages_info["buckets"]))

    return {
        "kpis": {
            "total_responses": len(records),
            "avg_rating": average_label(ratings),
            "satisfaction_rate": satisfaction_rate(ratings),
            "avg_schedule_rating": average_label(schedule_ratings),
        },
        "period": survey_period(df[DATE_KEY]),
        "ages": ages_info,
        "expectations": {
            **expectations,
            "label": f"Sim: {expectations['yes']} | Parcial: {expectations['partial']} | Não: {expectations['no']}",
            "shares": shares,
        },
        "distributions": {"ubs_ratings": ubs_bars, "schedule_ratings": schedule_bars},
        "charts": charts,
    }
