"""
Módulo de Chamada (Blueprint)

Abertura de listas de chamada e registro de presença.
Exige apenas um operador autenticado (não precisa ser admin).
"""

from flask import Blueprint

chamada_bp = Blueprint(
    'chamada_bp',
    __name__,
    url_prefix='/chamada'
)

from . import routes
