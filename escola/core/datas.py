"""
Utilitários de calendário.

Todas as datas "de parede" (matrícula, vencimentos, chamada) usam o
fuso fixo definido em constants.FUSO_HORARIO.
"""

from datetime import date, datetime
from typing import Union

from escola.core.constants import FUSO_HORARIO, DIA_VENCIMENTO


def agora() -> datetime:
    return datetime.now(FUSO_HORARIO)


def mes_referencia(quando: datetime) -> str:
    """Ex: 2025-08"""
    return f"{quando.year}-{quando.month:02d}"


def proximo_mes(quando: datetime) -> datetime:
    """Primeiro dia do mês seguinte (dezembro vira janeiro do ano seguinte)."""
    if quando.month == 12:
        return datetime(quando.year + 1, 1, 1, tzinfo=FUSO_HORARIO)
    return datetime(quando.year, quando.month + 1, 1, tzinfo=FUSO_HORARIO)


def data_vencimento(quando: datetime) -> datetime:
    """Dia 5 do mês de 'quando', à meia-noite no fuso fixo."""
    return datetime(quando.year, quando.month, DIA_VENCIMENTO, tzinfo=FUSO_HORARIO)


def id_dia(quando: datetime) -> str:
    """Ex: 09-08-2025"""
    return f"{quando.day:02d}-{quando.month:02d}-{quando.year}"


def para_data(valor: Union[date, datetime, str, None]):
    """
    Normaliza datas vindas do Firestore (Timestamp), do JSON (ISO) ou do Python.

    Timestamps do Firestore chegam em UTC; datas de nascimento são gravadas
    à meia-noite UTC pelo front-end, então usamos a parte de data sem converter.
    """
    if valor is None or valor == '':
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    texto = str(valor).strip()
    if texto.endswith('Z'):
        texto = texto[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(texto).date()
    except ValueError:
        return date.fromisoformat(texto[:10])


def calcular_idade(nascimento: date, hoje: date) -> int:
    """
    Idade civil: diferença de anos, descontando um se o aniversário
    ainda não chegou neste ano (comparação por mês e dia).
    """
    idade = hoje.year - nascimento.year
    if (hoje.month, hoje.day) < (nascimento.month, nascimento.day):
        idade -= 1
    return idade
