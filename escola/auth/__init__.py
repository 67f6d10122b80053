"""
Módulo de Autenticação (Blueprint)

Login dos operadores da secretaria com a conta Google
(Login, Logout, Callback e perfil da sessão).
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth_bp',
    __name__
)

# Importa as rotas no final para evitar dependência circular
from . import routes
