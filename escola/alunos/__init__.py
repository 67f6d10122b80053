"""
Módulo de Alunos (Blueprint)

Cadastro de alunos, vínculo com cursos e envio de documentos.
Todas as rotas são restritas a administradores.
"""

from flask import Blueprint

alunos_bp = Blueprint(
    'alunos_bp',
    __name__,
    url_prefix='/admin/alunos'
)

# Importa as rotas no final para evitar dependência circular
from . import routes
