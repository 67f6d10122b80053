"""
Rotas do Módulo de Chamada

POST /chamada/iniciar  { eventId, courseId, isUniqueEvent }
GET  /chamada/<id>
POST /chamada/<id>/presenca  { aluno_id, presente }
POST /chamada/<id>/encerrar
"""

from flask import request

from . import chamada_bp
from . import services as chamada_services
from .forms import PresencaForm
from escola.core.acesso import usuario_atual
from escola.core.erros import ErroServico
from escola.core.extensions import limiter

def _exigir_login() -> None:
    if not usuario_atual():
        raise ErroServico('unauthenticated', 'Faça login para continuar.')

@chamada_bp.route('/iniciar', methods=['POST'])
@limiter.limit("30 per minute")
def iniciar():
    # A checagem de autenticação acontece no serviço, antes de qualquer leitura
    resultado = chamada_services.iniciar_sessao_chamada(usuario_atual(), request.get_json(silent=True))
    return resultado, 201 if resultado['success'] else 200

@chamada_bp.route('/<call_record_id>')
def detalhes(call_record_id):
    _exigir_login()
    return chamada_services.obter_registro(call_record_id)

@chamada_bp.route('/<call_record_id>/presenca', methods=['POST'])
def presenca(call_record_id):
    _exigir_login()
    form = PresencaForm()
    if not form.validate_on_submit():
        raise ErroServico('invalid-argument', f"Erro de Validação: {form.errors}")

    return chamada_services.registrar_presenca(call_record_id, form.aluno_id.data.strip(), form.presente.data)

@chamada_bp.route('/<call_record_id>/encerrar', methods=['POST'])
def encerrar(call_record_id):
    _exigir_login()
    chamada_services.encerrar_sessao(call_record_id)
    return {'success': True}
