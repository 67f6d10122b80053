"""
Controle de Acesso das Rotas

Funções usadas no 'before_request' dos Blueprints administrativos.
O perfil do operador fica na sessão após o login Google (auth_bp).
"""

from typing import Optional
from flask import session

from escola.core.erros import ErroServico
from escola.core.logger import get_logger

logger = get_logger(__name__)

def usuario_atual() -> Optional[dict]:
    return session.get('user_profile')

def verificar_admin(user_profile: Optional[dict]) -> bool:
    if not user_profile: return False
    es_admin = user_profile.get('role') == 'admin'
    if not es_admin:
        logger.warning(f"Acesso negado: {user_profile.get('email')}")
    return es_admin

def exigir_admin() -> None:
    """Levanta ErroServico se não houver sessão (401) ou se não for admin (403)."""
    user_profile = usuario_atual()
    if not user_profile:
        raise ErroServico('unauthenticated', 'Faça login para continuar.')
    if not verificar_admin(user_profile):
        raise ErroServico('permission-denied', 'Apenas administradores podem acessar este recurso.')
