import pytest

from survey_core.csv_parser import parse_csv
from survey_core.data import clear_survey_cache

SAMPLE_CSV = (
    '0|"Carimbo de data/hora","1. Qual seu nome?","2. Qual sua idade?",'
    '"3. Em uma escala de 1 a 5, como você avaliaria sua experiência na UBS? ( 1 = Muito ruim | 5 = Excelente )",'
    '"4. O atendimento que você recebeu atendeu às suas expectativas? ",'
    '"5. Em uma escala de 1 a 5, como você avalia a experiência com o horário corrido?  ( 1 = Muito ruim | 5 = Excelente )",'
    '"6. O que poderiamos melhorar? Resposta aberta:"\r\n'
    '1|"2025/08/04 10:02:03 da manhã GMT-3","Maria Souza","31 anos","5","Sim","5","Atendimento ótimo, equipe muito atenciosa"\r\n'
    '2|"2025/08/04 11:15:40 da manhã GMT-3","João Lima","55","4","Sim","4","Mais médicos no período da tarde"\r\n'
    '3|"2025/08/05 09:01:12 da manhã GMT-3","Ana Paula","42","3","Parcialmente","2","Demora na recepção, falta de cadeiras"\r\n'
    '4|"2025/08/05 02:30:00 da tarde GMT-3","Carlos","67","5","Sim","4",""\r\n'
    '5|"2025/08/06 08:45:21 da manhã GMT-3","Fernanda","19","2","Não","3","Remédios em falta na farmácia"\r\n'
    '6|"2025/08/07 03:10:09 da tarde GMT-3","Roberto","28","5","Sim","5","Excelente, muito bom o horário corrido"\r\n'
)


@pytest.fixture
def sample_text():
    return SAMPLE_CSV


@pytest.fixture
def sample_records():
    return parse_csv(SAMPLE_CSV)


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_survey_cache()
    yield
    clear_survey_cache()
