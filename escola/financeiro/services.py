"""
Camada de Serviço (Service Layer) do Financeiro

Gera a taxa de matrícula e as mensalidades dos alunos a partir de:
(a) escritas no documento do aluno (cursos novos em 'enrolledCourses');
(b) o job mensal do Cloud Scheduler (dia 1, 00:00, America/Sao_Paulo).

Os pagamentos usam IDs determinísticos ('{YYYY-MM}-{cursoId}' e
'taxa_de_matricula-{cursoId}') e são gravados com create(), que falha se
o documento já existir. Repetir um evento ou o job não duplica nada e
nunca sobrescreve um pagamento que já foi marcado como pago.
"""

import re
import unicodedata
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from pydantic import ValidationError

from escola.core import database, datas
from escola.core.constants import (
    ATIVIDADES_COM_ATESTADO,
    COLECAO_ALUNOS,
    COLECAO_CURSOS,
    COLECAO_MENSALIDADES,
    FUSO_HORARIO,
    MAIORIDADE,
    PERIODO_TAXA_MATRICULA,
    SLOT_ATESTADO_MEDICO,
    SLOTS_DOCUMENTOS_BASE,
    SLOTS_DOCUMENTOS_MENOR,
    STATUS_PAGO,
    VALOR_TAXA_MATRICULA,
)
from escola.core.erros import ErroServico
from escola.core.logger import get_logger
from escola.core.modelos import Curso, Mensalidade

logger = get_logger(__name__)

PADRAO_MES = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')

# === FUNÇÕES AUXILIARES ===

def ids_cursos(dados: Optional[dict]) -> List[str]:
    """IDs dos cursos em 'enrolledCourses', na ordem e sem repetição."""
    ids = []
    for ref in (dados or {}).get('enrolledCourses') or []:
        curso_id = database.id_referencia(ref)
        if curso_id and curso_id not in ids:
            ids.append(curso_id)
    return ids

def cursos_novos(antes: Optional[dict], depois: Optional[dict]) -> List[str]:
    """Cursos presentes depois da escrita e ausentes antes (comparação por ID)."""
    anteriores = set(ids_cursos(antes))
    return [curso_id for curso_id in ids_cursos(depois) if curso_id not in anteriores]

def normalizar_texto(texto: Optional[str]) -> str:
    if not texto: return ""
    nfkd_form = unicodedata.normalize('NFKD', texto)
    sem_acento = "".join([c for c in nfkd_form if not unicodedata.combining(c)])
    return " ".join(sem_acento.lower().split())

def exige_atestado(nome_curso: Optional[str]) -> bool:
    nome = normalizar_texto(nome_curso)
    return any(atividade in nome for atividade in ATIVIDADES_COM_ATESTADO)

def slots_iniciais(dados: dict, hoje: date) -> List[str]:
    """Slots de documentos de um aluno recém-criado (menores ganham dois extras)."""
    slots = list(SLOTS_DOCUMENTOS_BASE)
    nascimento = datas.para_data((dados.get('basicInfo') or {}).get('dateOfBirth'))
    if nascimento and datas.calcular_idade(nascimento, hoje) < MAIORIDADE:
        slots.extend(SLOTS_DOCUMENTOS_MENOR)
    return slots

def _garantir_slots(aluno_ref, existentes: Set[str], slots: Iterable[str]) -> List[str]:
    """Cria (vazios) os slots que faltam em 'documents', sem tocar nos existentes."""
    faltando = [slot for slot in slots if slot not in existentes]
    if faltando:
        aluno_ref.update({f'documents.{slot}': None for slot in faltando})
        existentes.update(faltando)
    return faltando

def _buscar_curso(db, curso_id: str) -> Optional[Curso]:
    """
    Nome e preço do curso, ou None se ele não existir.
    Só esses campos são validados; um preço ilegível vira ErroServico.
    """
    snapshot = db.collection(COLECAO_CURSOS).document(curso_id).get()
    if not snapshot.exists:
        return None

    dados = snapshot.to_dict() or {}
    campos = {campo: dados[campo] for campo in ('name', 'price') if dados.get(campo) is not None}
    try:
        return Curso.model_validate(campos)
    except ValidationError:
        raise ErroServico('invalid-argument', f"Curso {curso_id} com nome ou preço inválido: {dados.get('price')!r}")

def _criar_se_ausente(doc_ref, dados: dict) -> bool:
    """create() condicional: False se o documento já existia."""
    try:
        doc_ref.create(dados)
        return True
    except AlreadyExists:
        return False

# === PAGAMENTOS ===

def garantir_taxa_matricula(aluno_ref, curso_id: str, quando: datetime) -> bool:
    """Taxa única por (aluno, curso), no período sentinela 'taxa_de_matricula'."""
    doc_ref = aluno_ref.collection(COLECAO_MENSALIDADES).document(f"{PERIODO_TAXA_MATRICULA}-{curso_id}")

    taxa = Mensalidade(
        month=PERIODO_TAXA_MATRICULA,
        amount=VALOR_TAXA_MATRICULA,
        due_date=quando,
        course_id=curso_id,
    ).para_firestore()
    taxa['createdAt'] = firestore.SERVER_TIMESTAMP

    criada = _criar_se_ausente(doc_ref, taxa)
    if criada:
        logger.info(f"Taxa de matrícula criada: aluno {aluno_ref.id}, curso {curso_id}")
    return criada

def garantir_mensalidade(aluno_ref, curso_id: str, curso: Curso, mes: datetime) -> bool:
    """
    Mensalidade do mês de 'mes' com vencimento no dia 5.
    O valor é copiado do curso agora; reajustes futuros não a alteram.
    """
    mes_id = datas.mes_referencia(mes)
    doc_ref = aluno_ref.collection(COLECAO_MENSALIDADES).document(f"{mes_id}-{curso_id}")

    mensalidade = Mensalidade(
        month=mes_id,
        amount=curso.price,
        due_date=datas.data_vencimento(mes),
        course_id=curso_id,
        course_name=curso.name,
    ).para_firestore()
    mensalidade['createdAt'] = firestore.SERVER_TIMESTAMP

    criada = _criar_se_ausente(doc_ref, mensalidade)
    if criada:
        logger.info(f"Mensalidade {mes_id} criada: aluno {aluno_ref.id}, curso {curso_id}")
    else:
        logger.info(f"Mensalidade {mes_id} já existe: aluno {aluno_ref.id}, curso {curso_id}")
    return criada

# === GATILHO (a): ESCRITA NO ALUNO ===

def processar_escrita_aluno(aluno_id: str, antes: Optional[dict], depois: Optional[dict],
                            quando: Optional[datetime] = None) -> dict:
    """
    Reage à criação/atualização de um aluno.

    Para cada curso novo: taxa de matrícula, slot de atestado (se a atividade
    exigir) e a mensalidade do PRÓXIMO mês. Um curso inexistente ou com preço
    ilegível não gera cobrança nenhuma (nem a taxa): fica registrado em
    'erros' e os demais continuam sendo processados.
    """
    resumo = {
        'alunoId': aluno_id,
        'cursosNovos': [],
        'taxasCriadas': 0,
        'mensalidadesCriadas': 0,
        'slotsCriados': [],
        'erros': [],
    }

    if depois is None:
        logger.info(f"Aluno {aluno_id} removido; nenhuma cobrança a gerar.")
        return resumo

    quando = quando or datas.agora()
    db = database.get_db()
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id)
    documentos = set((depois.get('documents') or {}).keys())

    # Primeira criação do aluno: slots de documentos
    if antes is None:
        try:
            resumo['slotsCriados'] += _garantir_slots(aluno_ref, documentos, slots_iniciais(depois, quando.date()))
        except Exception as e:
            logger.error(f"Erro ao criar slots de documentos do aluno {aluno_id}: {e}", exc_info=True)
            resumo['erros'].append({'cursoId': None, 'erro': str(e)})

    novos = cursos_novos(antes, depois)
    resumo['cursosNovos'] = novos
    mes_cobranca = datas.proximo_mes(quando)

    for curso_id in novos:
        try:
            curso = _buscar_curso(db, curso_id)
            if curso is None:
                logger.error(f"Curso {curso_id} não encontrado (aluno {aluno_id}). Nada foi cobrado.")
                resumo['erros'].append({'cursoId': curso_id, 'erro': 'Curso não encontrado'})
                continue

            if garantir_taxa_matricula(aluno_ref, curso_id, quando):
                resumo['taxasCriadas'] += 1

            if exige_atestado(curso.name):
                resumo['slotsCriados'] += _garantir_slots(aluno_ref, documentos, [SLOT_ATESTADO_MEDICO])

            if garantir_mensalidade(aluno_ref, curso_id, curso, mes_cobranca):
                resumo['mensalidadesCriadas'] += 1

        except Exception as e:
            logger.error(f"Erro ao processar o curso {curso_id} do aluno {aluno_id}: {e}", exc_info=True)
            resumo['erros'].append({'cursoId': curso_id, 'erro': str(e)})

    return resumo

# === GATILHO (b): JOB MENSAL ===

def gerar_mensalidades_do_mes(quando: Optional[datetime] = None) -> dict:
    """
    Garante a mensalidade do mês CORRENTE para todo aluno com curso.

    Seguro para rodar várias vezes: o que já existe é ignorado.
    Preço/nome dos cursos ficam em cache durante a execução.
    """
    quando = quando or datas.agora()
    db = database.get_db()
    cache_cursos: Dict[str, Optional[Curso]] = {}

    resumo = {
        'mes': datas.mes_referencia(quando),
        'alunos': 0,
        'criadas': 0,
        'existentes': 0,
        'erros': [],
    }

    for doc in db.collection(COLECAO_ALUNOS).stream():
        cursos = ids_cursos(doc.to_dict())
        if not cursos:
            continue
        resumo['alunos'] += 1

        for curso_id in cursos:
            try:
                if curso_id not in cache_cursos:
                    cache_cursos[curso_id] = _buscar_curso(db, curso_id)
                curso = cache_cursos[curso_id]

                if curso is None:
                    logger.error(f"Curso {curso_id} não encontrado (aluno {doc.id}). Pulando.")
                    resumo['erros'].append({'alunoId': doc.id, 'cursoId': curso_id, 'erro': 'Curso não encontrado'})
                    continue

                if garantir_mensalidade(doc.reference, curso_id, curso, quando):
                    resumo['criadas'] += 1
                else:
                    resumo['existentes'] += 1

            except Exception as e:
                logger.error(f"Erro na mensalidade do aluno {doc.id}, curso {curso_id}: {e}", exc_info=True)
                resumo['erros'].append({'alunoId': doc.id, 'cursoId': curso_id, 'erro': str(e)})

    logger.info(
        f"Job mensal {resumo['mes']}: {resumo['alunos']} aluno(s), "
        f"{resumo['criadas']} criada(s), {resumo['existentes']} já existente(s), {len(resumo['erros'])} erro(s)."
    )
    return resumo

# === CONSULTA E BAIXA ===

def status_mensalidade(pagamento: Optional[dict], quando: datetime) -> str:
    """'nao_cadastrado' | 'pago' | 'vencido' | 'em_aberto'"""
    if not pagamento:
        return 'nao_cadastrado'
    if pagamento.get('status') == STATUS_PAGO:
        return 'pago'

    vencimento = pagamento.get('dueDate')
    if vencimento and quando > vencimento:
        return 'vencido'
    return 'em_aberto'

def mensalidades_do_mes(aluno_id: str, mes: Optional[str] = None) -> dict:
    """Situação das mensalidades do aluno no mês (padrão: mês corrente), por curso."""
    quando = datas.agora()
    mes = mes or datas.mes_referencia(quando)
    if not PADRAO_MES.match(mes):
        raise ErroServico('invalid-argument', 'Mês deve estar no formato AAAA-MM.')

    db = database.get_db()
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id)
    snapshot = aluno_ref.get()
    if not snapshot.exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')

    itens = []
    for curso_id in ids_cursos(snapshot.to_dict()):
        pagamento_id = f"{mes}-{curso_id}"
        pagamento = aluno_ref.collection(COLECAO_MENSALIDADES).document(pagamento_id).get()
        dados = pagamento.to_dict() if pagamento.exists else None
        itens.append({
            'cursoId': curso_id,
            'pagamentoId': pagamento_id,
            'pagamento': database.serializar(dados),
            'status': status_mensalidade(dados, quando),
        })

    return {'mes': mes, 'mensalidades': itens}

def registrar_pagamento(aluno_id: str, pagamento_id: str, data_pagamento: Optional[date] = None) -> dict:
    """Marca a mensalidade (ou a taxa) como paga."""
    db = database.get_db()
    doc_ref = (
        db.collection(COLECAO_ALUNOS).document(aluno_id)
        .collection(COLECAO_MENSALIDADES).document(pagamento_id)
    )
    snapshot = doc_ref.get()
    if not snapshot.exists:
        raise ErroServico('not-found', 'Pagamento não encontrado.')
    if (snapshot.to_dict() or {}).get('status') == STATUS_PAGO:
        raise ErroServico('failed-precondition', 'Este pagamento já foi registrado.')

    if data_pagamento:
        pago_em = datetime(data_pagamento.year, data_pagamento.month, data_pagamento.day, tzinfo=FUSO_HORARIO)
    else:
        pago_em = datas.agora()

    doc_ref.update({'status': STATUS_PAGO, 'paymentDate': pago_em})
    logger.info(f"Pagamento {pagamento_id} do aluno {aluno_id} registrado em {pago_em:%d/%m/%Y}")
    return {'pagamentoId': pagamento_id, 'status': STATUS_PAGO, 'paymentDate': pago_em.isoformat()}
