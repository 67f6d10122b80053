"""
Rotas dos Gatilhos

POST /gatilhos/alunos/criado   { alunoId, dados }          -> número de matrícula
POST /gatilhos/alunos/escrito  { alunoId, antes, depois }  -> taxa e mensalidades
POST /gatilhos/mensalidades                                -> job mensal (cron '0 0 1 * *')

Depois do token validado a resposta é sempre 200: erros são logados e
devolvidos no corpo, para a plataforma não reenviar o evento e repetir
efeitos colaterais.
"""

import hmac
from flask import current_app, request

from . import gatilhos_bp
from escola.alunos import services as alunos_services
from escola.financeiro import services as financeiro_services
from escola.core.erros import ErroServico
from escola.core.logger import get_logger

logger = get_logger(__name__)

@gatilhos_bp.before_request
def verificar_token():
    esperado = current_app.config.get('GATILHOS_TOKEN')
    recebido = request.headers.get('X-Gatilho-Token', '')
    # compare_digest só aceita str ASCII; em bytes qualquer cabeçalho vale
    if not esperado or not hmac.compare_digest(recebido.encode('utf-8'), esperado.encode('utf-8')):
        logger.warning(f"Gatilho recusado (token inválido): {request.path}")
        raise ErroServico('unauthenticated', 'Token de gatilho inválido.')

def _evento() -> dict:
    return request.get_json(silent=True) or {}

@gatilhos_bp.route('/alunos/criado', methods=['POST'])
def aluno_criado():
    evento = _evento()
    aluno_id = evento.get('alunoId')
    if not aluno_id:
        logger.error("Evento de criação sem alunoId. Ignorado.")
        return {'ok': False, 'erro': 'alunoId ausente'}

    # gerar_matricula não levanta exceção: falhas ficam no log
    matricula = alunos_services.gerar_matricula(aluno_id, evento.get('dados') or {})
    return {'ok': True, 'alunoId': aluno_id, 'matricula': matricula}

@gatilhos_bp.route('/alunos/escrito', methods=['POST'])
def aluno_escrito():
    evento = _evento()
    aluno_id = evento.get('alunoId')
    if not aluno_id:
        logger.error("Evento de escrita sem alunoId. Ignorado.")
        return {'ok': False, 'erro': 'alunoId ausente'}

    try:
        resumo = financeiro_services.processar_escrita_aluno(aluno_id, evento.get('antes'), evento.get('depois'))
    except Exception as e:
        logger.error(f"Erro ao processar escrita do aluno {aluno_id}: {e}", exc_info=True)
        return {'ok': False, 'alunoId': aluno_id, 'erro': str(e)}

    return {'ok': not resumo['erros'], **resumo}

@gatilhos_bp.route('/mensalidades', methods=['POST'])
def mensalidades_do_mes():
    try:
        resumo = financeiro_services.gerar_mensalidades_do_mes()
    except Exception as e:
        # Interrompido no meio: rodar de novo é seguro (create-if-absent)
        logger.error(f"Job mensal interrompido: {e}", exc_info=True)
        return {'ok': False, 'erro': str(e)}

    return {'ok': not resumo['erros'], **resumo}
