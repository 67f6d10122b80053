"""
Camada de Serviço (Service Layer) da Chamada

Uma lista de chamada ('callRecords/{DD-MM-YYYY}-{eventId}') é uma foto
dos alunos inscritos no curso/evento no momento em que a sessão começa.
No máximo uma por evento por dia.
"""

from typing import Optional

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore

from escola.core import database, datas
from escola.core.constants import (
    COLECAO_ALUNOS,
    COLECAO_CHAMADAS,
    COLECAO_CURSOS,
    COLECAO_EVENTOS_UNICOS,
    STATUS_CHAMADA_ATIVA,
    STATUS_CHAMADA_ENCERRADA,
)
from escola.core.erros import ErroServico
from escola.core.logger import get_logger
from escola.core.modelos import ItemPresenca, RegistroChamada

logger = get_logger(__name__)

MENSAGEM_SESSAO_EXISTENTE = "Sessão já existe."


def iniciar_sessao_chamada(usuario: Optional[dict], dados: Optional[dict]) -> dict:
    """
    Abre a lista de chamada do evento no dia de hoje.

    Entrada: { eventId, courseId, isUniqueEvent }
    Saída:   { success, callRecordId, message? }

    Se a lista do dia já existir, devolve success=False com o mesmo ID
    e não altera nada.
    """
    # 1. Autenticação (antes de qualquer leitura)
    if not usuario:
        logger.error("Tentativa de chamada não autenticada para iniciar_sessao_chamada.")
        raise ErroServico('unauthenticated', 'Apenas usuários autenticados podem iniciar uma sessão de chamada.')

    # 2. Validação de dados e identificação da coleção
    dados = dados or {}
    event_id = dados.get('eventId')
    course_id = dados.get('courseId')
    if not event_id or not course_id:
        logger.error("Dados inválidos: eventId ou courseId ausentes.")
        raise ErroServico('invalid-argument', 'O ID do evento e do curso são obrigatórios.')

    colecao = COLECAO_EVENTOS_UNICOS if dados.get('isUniqueEvent') else COLECAO_CURSOS

    # 3. Lista de alunos da coleção correta
    db = database.get_db()
    evento_ref = db.collection(colecao).document(str(course_id))
    evento_doc = evento_ref.get()
    if not evento_doc.exists:
        logger.error(f"Documento {course_id} não encontrado na coleção {colecao}.")
        raise ErroServico('not-found', 'O evento ou curso especificado não existe.')

    # Só a lista de inscritos e o nome importam; o resto do documento não é validado
    evento = evento_doc.to_dict() or {}
    lista_presenca = [ItemPresenca(student_ref=ref) for ref in evento.get('registeredStudents') or []]

    # 4. Nome do documento: dia + evento
    call_record_id = f"{datas.id_dia(datas.agora())}-{event_id}"

    try:
        registro_ref = db.collection(COLECAO_CHAMADAS).document(call_record_id)

        if registro_ref.get().exists:
            logger.warning(f"Sessão de chamada para o evento {event_id} já existe. Não será criada novamente.")
            return {'success': False, 'callRecordId': call_record_id, 'message': MENSAGEM_SESSAO_EXISTENTE}

        # 5. Criação do documento ('name' para cursos, 'title' para eventos antigos)
        registro = RegistroChamada(
            event_ref=evento_ref,
            name=evento.get('name') or evento.get('title'),
            attendance_list=lista_presenca,
            status=STATUS_CHAMADA_ATIVA,
        ).para_firestore()
        registro['createdAt'] = firestore.SERVER_TIMESTAMP

        registro_ref.create(registro)

    except AlreadyExists:
        # Outra requisição criou a mesma lista entre a leitura e a escrita
        logger.warning(f"Sessão {call_record_id} criada concorrentemente. Mantendo a existente.")
        return {'success': False, 'callRecordId': call_record_id, 'message': MENSAGEM_SESSAO_EXISTENTE}
    except Exception as e:
        logger.error(f"Erro ao criar a sessão de chamada: {e}", exc_info=True)
        raise ErroServico('internal', 'Erro interno ao iniciar a sessão de chamada.')

    logger.info(f"Nova sessão de chamada criada com ID: {call_record_id} para o evento {event_id}.")
    return {'success': True, 'callRecordId': call_record_id}


def obter_registro(call_record_id: str) -> dict:
    """Lista de chamada com o nome de cada aluno resolvido."""
    db = database.get_db()
    snapshot = db.collection(COLECAO_CHAMADAS).document(call_record_id).get()
    if not snapshot.exists:
        raise ErroServico('not-found', 'Nenhum registro de chamada encontrado.')

    registro = snapshot.to_dict() or {}
    alunos = []
    for item in registro.get('attendanceList') or []:
        aluno_id = database.id_referencia(item.get('studentRef'))
        nome = 'Nome não encontrado'
        if aluno_id:
            aluno = db.collection(COLECAO_ALUNOS).document(aluno_id).get()
            if aluno.exists:
                nome = ((aluno.to_dict() or {}).get('basicInfo') or {}).get('fullName', nome)
        alunos.append({**database.serializar(item), 'studentId': aluno_id, 'studentName': nome})

    resposta = database.serializar(registro)
    resposta['id'] = call_record_id
    resposta['attendanceList'] = alunos
    return resposta


def _alternar_presenca(transacao, registro_ref, aluno_id: str, presente: bool):
    snapshot = registro_ref.get(transaction=transacao)
    if not snapshot.exists:
        raise ErroServico('not-found', 'Nenhum registro de chamada encontrado.')

    registro = snapshot.to_dict() or {}
    if registro.get('status') != STATUS_CHAMADA_ATIVA:
        raise ErroServico('failed-precondition', 'A sessão de chamada já foi encerrada.')

    lista = list(registro.get('attendanceList') or [])
    for indice, item in enumerate(lista):
        if database.id_referencia(item.get('studentRef')) == aluno_id:
            lista[indice] = {
                **item,
                'present': presente,
                'checkInTime': datas.agora() if presente else None,
            }
            transacao.update(registro_ref, {'attendanceList': lista})
            return lista[indice]

    raise ErroServico('not-found', 'Aluno não está na lista de chamada.')


def registrar_presenca(call_record_id: str, aluno_id: str, presente: bool) -> dict:
    """Marca/desmarca a presença; a lista inteira é regravada na transação."""
    db = database.get_db()
    registro_ref = db.collection(COLECAO_CHAMADAS).document(call_record_id)
    item = firestore.transactional(_alternar_presenca)(db.transaction(), registro_ref, aluno_id, presente)
    logger.info(f"Presença de {aluno_id} em {call_record_id}: {'presente' if presente else 'ausente'}")
    return database.serializar(item)


def encerrar_sessao(call_record_id: str) -> None:
    db = database.get_db()
    registro_ref = db.collection(COLECAO_CHAMADAS).document(call_record_id)
    if not registro_ref.get().exists:
        raise ErroServico('not-found', 'Nenhum registro de chamada encontrado.')
    registro_ref.update({'status': STATUS_CHAMADA_ENCERRADA})
    logger.info(f"Sessão de chamada {call_record_id} encerrada.")
