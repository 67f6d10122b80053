"""
Rotas do Módulo Financeiro

Situação das mensalidades do aluno e baixa de pagamentos.
"""

from flask import request

from . import financeiro_bp
from . import services as financeiro_services
from .forms import PagamentoForm
from escola.core.acesso import exigir_admin
from escola.core.erros import ErroServico

@financeiro_bp.before_request
def restringir_acesso():
    exigir_admin()

@financeiro_bp.route('/alunos/<aluno_id>/mensalidades')
def mensalidades(aluno_id):
    """
    Retorna JSON: { "mes": "2025-08", "mensalidades": [ {cursoId, pagamento, status} ] }
    """
    return financeiro_services.mensalidades_do_mes(aluno_id, request.args.get('mes'))

@financeiro_bp.route('/alunos/<aluno_id>/mensalidades/<pagamento_id>/pagar', methods=['POST'])
def pagar(aluno_id, pagamento_id):
    form = PagamentoForm()
    if not form.validate_on_submit():
        raise ErroServico('invalid-argument', f"Erro de Validação: {form.errors}")

    return financeiro_services.registrar_pagamento(aluno_id, pagamento_id, form.data_pagamento.data)
