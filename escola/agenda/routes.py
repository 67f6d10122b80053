"""
Rotas do Módulo de Agenda
"""

from flask import request, jsonify

from . import agenda_bp
from . import services as agenda_services
from .forms import EventoForm
from escola.core.acesso import exigir_admin, usuario_atual
from escola.core.erros import ErroServico

@agenda_bp.route('')
def grade():
    """Grade completa ou de uma sala (?sala=<id>)."""
    if not usuario_atual():
        raise ErroServico('unauthenticated', 'Faça login para continuar.')
    return jsonify(agenda_services.montar_grade(request.args.get('sala')))

@agenda_bp.route('/eventos', methods=['POST'])
def criar_evento():
    exigir_admin()
    form = EventoForm()
    if not form.validate_on_submit():
        raise ErroServico('invalid-argument', f"Erro de Validação: {form.errors}")

    evento_id = agenda_services.criar_evento_unico(
        form.name.data,
        form.room.data.strip(),
        form.responsible.data.strip(),
        form.date.data,
        form.start_time.data,
        form.end_time.data,
    )
    return {'id': evento_id}, 201
