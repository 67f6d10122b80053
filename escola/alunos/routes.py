"""
Rotas do Módulo de Alunos

Cadastro, consulta, cursos e documentos. Respostas em JSON.
"""

from flask import request, jsonify

from . import alunos_bp
from . import services as alunos_services
from .forms import CursoAlunoForm
from escola.core.acesso import exigir_admin
from escola.core.erros import ErroServico

@alunos_bp.before_request
def restringir_acesso():
    exigir_admin()

@alunos_bp.route('', methods=['GET'])
def listar():
    return jsonify(alunos_services.listar_alunos(request.args.get('nome')))

@alunos_bp.route('', methods=['POST'])
def cadastrar():
    aluno_id = alunos_services.cadastrar_aluno(request.get_json(silent=True))
    return {'id': aluno_id}, 201

@alunos_bp.route('/<aluno_id>')
def detalhes(aluno_id):
    return alunos_services.obter_aluno(aluno_id)

@alunos_bp.route('/<aluno_id>/cursos', methods=['POST'])
def adicionar_curso(aluno_id):
    form = CursoAlunoForm()
    if not form.validate_on_submit():
        raise ErroServico('invalid-argument', f"Erro de Validação: {form.errors}")

    alunos_services.adicionar_curso(aluno_id, form.curso_id.data.strip())
    return {'success': True}

@alunos_bp.route('/<aluno_id>/cursos/<curso_id>', methods=['DELETE'])
def remover_curso(aluno_id, curso_id):
    alunos_services.remover_curso(aluno_id, curso_id)
    return {'success': True}

@alunos_bp.route('/<aluno_id>/documentos/<slot>', methods=['POST'])
def enviar_documento(aluno_id, slot):
    arquivo = request.files.get('arquivo')
    if arquivo is None or arquivo.filename == '':
        raise ErroServico('invalid-argument', 'Nenhum arquivo enviado.')

    metadados = alunos_services.salvar_documento(aluno_id, slot, arquivo, arquivo.filename)
    return metadados, 201

@alunos_bp.route('/<aluno_id>/documentos/<slot>', methods=['GET'])
def link_documento(aluno_id, slot):
    return {'url': alunos_services.url_documento(aluno_id, slot)}
