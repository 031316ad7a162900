from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping


Record = Dict[str, str]

PAGE_SIZE = 10
EXPORT_FILENAME = "respostas_filtradas.csv"

DATE_KEY = "Carimbo de data/hora"
NAME_KEY = "1. Qual seu nome?"
AGE_KEY = "2. Qual sua idade?"
UBS_RATING_KEY = (
    "3. Em uma escala de 1 a 5, como você avaliaria sua experiência na UBS? ( 1 = Muito ruim | 5 = Excelente )"
)
EXPECTATIONS_KEY = "4. O atendimento que você recebeu atendeu às suas expectativas?"
SCHEDULE_RATING_KEY = (
    "5. Em uma escala de 1 a 5, como você avalia a experiência com o horário corrido?  ( 1 = Muito ruim | 5 = Excelente )"
)
COMMENT_KEY = "6. O que poderiamos melhorar? Resposta aberta:"


@dataclass(frozen=True)
class ColumnDescriptor:
    key: str
    label: str


# Display order of the responses table.
TABLE_COLUMNS: List[ColumnDescriptor] = [
    ColumnDescriptor(DATE_KEY, "Data"),
    ColumnDescriptor(NAME_KEY, "Nome"),
    ColumnDescriptor(AGE_KEY, "Idade"),
    ColumnDescriptor(UBS_RATING_KEY, "Nota Experiência UBS"),
    ColumnDescriptor(EXPECTATIONS_KEY, "Expectativas Atendidas"),
    ColumnDescriptor(SCHEDULE_RATING_KEY, "Nota Horário Corrido"),
    ColumnDescriptor(COMMENT_KEY, "Sugestão/Melhoria"),
]

DATE_COLUMN_INDEX = 0
FILTER_COLUMN_INDEX = 3
FILTER_OPTIONS = ["1", "2", "3", "4", "5"]


def record_value(record: Mapping[str, str], key: str) -> str:
    """Read a field, falling back to the key with a trailing space for questions.

    Some exports keep a trailing space after the question mark in the header.
    """
    value = record.get(key)
    if value is None and key.endswith("?"):
        value = record.get(key + " ")
    return value or ""
