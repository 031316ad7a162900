from __future__ import annotations

from typing import Any, Dict, List, Sequence

from survey_core.columns import COMMENT_KEY, DATE_KEY, NAME_KEY, UBS_RATING_KEY, Record, record_value
from survey_core.data import parse_int_prefix
from survey_core.metrics_overview import compute_overview

POSITIVE_KEYWORDS = ("ótimo", "excelente", "maravilhoso", "bom", "satisfeito")


def _comment(record: Record) -> str:
    return record_value(record, COMMENT_KEY).strip()


def _rating(record: Record):
    return parse_int_prefix(record_value(record, UBS_RATING_KEY))


def is_positive(record: Record) -> bool:
    text = record_value(record, COMMENT_KEY).lower()
    return _rating(record) == 5 and any(word in text for word in POSITIVE_KEYWORDS)


def is_suggestion(record: Record) -> bool:
    rating = _rating(record)
    return (rating is not None and rating < 5) or len(record_value(record, COMMENT_KEY)) > 0


def feedback_item(record: Record) -> Dict[str, str]:
    return {
        "comment": record_value(record, COMMENT_KEY),
        "name": record_value(record, NAME_KEY),
        "timestamp": record_value(record, DATE_KEY),
    }


def compute_feedback(records: Sequence[Record]) -> Dict[str, Any]:
    comments = [c for c in (_comment(r) for r in records) if c]
    positive = [r for r in records if is_positive(r)]
    suggestions = [r for r in records if is_suggestion(r)]

    excellent = [r for r in records if _rating(r) == 5 and _comment(r)]
    good = [r for r in records if _rating(r) == 4 and _comment(r)]
    with_comment = [r for r in suggestions if _comment(r)]

    return {
        "kpis": {
            "total_comments": len(comments),
            "positive_comments": len(positive),
            "suggestion_comments": len(suggestions),
        },
        "excellent": [feedback_item(r) for r in excellent],
        "good": [feedback_item(r) for r in good],
        "suggestions": [feedback_item(r) for r in with_comment],
    }


def compute_insights(overview: Dict[str, Any], feedback: Dict[str, Any]) -> List[Dict[str, str]]:
    kpis = overview.get("kpis", {})
    exp = overview.get("expectations", {})
    return [
        {
            "title": "Alta Satisfação Geral",
            "content": (
                f"A nota média da experiência na UBS é {kpis.get('avg_rating', '0')} e "
                f"{kpis.get('satisfaction_rate', 0)}% dos usuários deram nota 4 ou 5."
            ),
        },
        {
            "title": "Horário Corrido Bem Avaliado",
            "content": f"A nota média para o horário corrido é {kpis.get('avg_schedule_rating', '0')}.",
        },
        {
            "title": "Expectativas Atendidas",
            "content": (
                f"{exp.get('yes', 0)} usuários disseram que suas expectativas foram atendidas, "
                f"{exp.get('partial', 0)} parcialmente e {exp.get('no', 0)} não."
            ),
        },
        {
            "title": "Sugestões de Melhoria",
            "content": f"Foram registradas {feedback['kpis']['total_comments']} sugestões/comentários.",
        },
    ]


def compute_summary(records: Sequence[Record]) -> Dict[str, Any]:
    overview = compute_overview(records)
    feedback = compute_feedback(records)
    return {**overview, "feedback": feedback, "insights": compute_insights(overview, feedback)}
