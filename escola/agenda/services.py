"""
Camada de Serviço (Service Layer) da Agenda

Monta as entradas da grade de horários a partir de 'courses' (aulas
semanais) e 'uniqueEvents' (eventos com data). A renderização do
calendário é do front-end.
"""

from datetime import date, datetime, time
from typing import Dict, List, Optional

from escola.core import database, datas
from escola.core.constants import (
    COLECAO_CURSOS,
    COLECAO_EVENTOS_UNICOS,
    COLECAO_PROFESSORES,
    COLECAO_SALAS,
    DIAS_SEMANA,
    FUSO_HORARIO,
)
from escola.core.erros import ErroServico
from escola.core.logger import get_logger

logger = get_logger(__name__)

# date.weekday(): segunda = 0
NOMES_DIAS = ('SEGUNDA', 'TERÇA', 'QUARTA', 'QUINTA', 'SEXTA', 'SÁBADO', 'DOMINGO')


def indice_dia(dia: Optional[str]) -> Optional[int]:
    """'Segunda' ou 'SEGUNDA-FEIRA' -> 1 (domingo = 0)."""
    if not dia:
        return None
    return DIAS_SEMANA.get(dia.strip().upper().split('-')[0])


def _combinar(dia: datetime, horario: str) -> datetime:
    # O front-end grava a data à meia-noite UTC: vale a parte de data, sem converter
    hora, minuto = (int(parte) for parte in horario.split(':'))
    return datetime.combine(datas.para_data(dia), time(hora, minuto), tzinfo=FUSO_HORARIO)


def _nome_pessoa(db, ref, cache: Dict[str, str], padrao: str) -> str:
    pessoa_id = database.id_referencia(ref)
    if not pessoa_id:
        return padrao
    if pessoa_id not in cache:
        try:
            snapshot = db.collection(COLECAO_PROFESSORES).document(pessoa_id).get()
            cache[pessoa_id] = (snapshot.to_dict() or {}).get('name', padrao) if snapshot.exists else padrao
        except Exception as e:
            logger.error(f"Erro ao buscar professor {pessoa_id}: {e}")
            return padrao
    return cache[pessoa_id]


def montar_grade(sala_id: Optional[str] = None) -> List[dict]:
    """Entradas da grade, opcionalmente só de uma sala."""
    db = database.get_db()
    professores: Dict[str, str] = {}
    eventos = []

    for doc in db.collection(COLECAO_CURSOS).stream():
        curso = doc.to_dict() or {}
        professor = _nome_pessoa(db, curso.get('professorRef'), professores, 'Professor não encontrado')
        sala = database.id_referencia(curso.get('roomRef'))

        for aula in curso.get('schedule') or []:
            indice = indice_dia(aula.get('day'))
            if indice is None:
                logger.warning(f"Dia inválido '{aula.get('day')}' no curso {doc.id}")
                continue
            eventos.append({
                'id': doc.id,
                'title': f"{curso.get('name')} - {professor}",
                'startTime': aula.get('startTime'),
                'endTime': aula.get('endTime'),
                'daysOfWeek': [indice],
                'roomId': sala,
                'courseId': doc.id,
                'isUniqueEvent': False,
            })

    for doc in db.collection(COLECAO_EVENTOS_UNICOS).stream():
        evento = doc.to_dict() or {}
        responsavel = _nome_pessoa(db, evento.get('respRef'), professores, 'Responsável não encontrado')
        sala = database.id_referencia(evento.get('roomRef'))
        dia = evento.get('date')
        if not isinstance(dia, datetime):
            logger.warning(f"Evento {doc.id} sem data válida")
            continue

        for item in evento.get('schedule') or []:
            eventos.append({
                'id': doc.id,
                'title': f"{evento.get('name')} - {responsavel}",
                'start': _combinar(dia, item['startTime']).isoformat(),
                'end': _combinar(dia, item['endTime']).isoformat(),
                'allDay': False,
                'roomId': sala,
                'courseId': doc.id,
                'isUniqueEvent': True,
            })

    if sala_id:
        eventos = [evento for evento in eventos if evento['roomId'] == sala_id]
    return eventos


def criar_evento_unico(nome: str, sala_id: str, responsavel_id: str, dia: date,
                       inicio: str, fim: str) -> str:
    if fim <= inicio:
        raise ErroServico('invalid-argument', 'O horário de término deve ser depois do início.')

    db = database.get_db()
    evento = {
        'name': nome.strip(),
        'roomRef': db.collection(COLECAO_SALAS).document(sala_id),
        'respRef': db.collection(COLECAO_PROFESSORES).document(responsavel_id),
        'date': datetime(dia.year, dia.month, dia.day, tzinfo=FUSO_HORARIO),
        'schedule': [{
            'day': NOMES_DIAS[dia.weekday()],
            'startTime': inicio,
            'endTime': fim,
        }],
        'registeredStudents': [],
    }
    _, doc_ref = db.collection(COLECAO_EVENTOS_UNICOS).add(evento)
    logger.info(f"Evento único criado: {doc_ref.id} ({nome})")
    return doc_ref.id
