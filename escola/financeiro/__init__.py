"""
Módulo Financeiro (Blueprint)

Consulta de mensalidades e registro de pagamentos (somente admin).
A geração das mensalidades roda nos gatilhos (ver escola.gatilhos).
"""

from flask import Blueprint

financeiro_bp = Blueprint(
    'financeiro_bp',
    __name__,
    url_prefix='/admin/financeiro'
)

from . import routes
