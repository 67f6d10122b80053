"""
Camada de Serviço (Service Layer) da Autenticação

Responsável pelos perfis dos operadores no Firestore ('usuarios'),
com suporte a Roles e Logging estruturado.
"""

from typing import Optional
from google.cloud import firestore
from escola.core import database
from escola.core.constants import COLECAO_USUARIOS
from escola.core.logger import get_logger

logger = get_logger(__name__)

def verificar_ou_criar_usuario(google_profile: dict) -> dict:
    """
    Verifica ou cria um operador no Firestore.
    Define automaticamente a role='user' para novos cadastros.
    """
    user_email = google_profile.get('email')
    if not user_email:
        logger.error("Perfil do Google recebido sem e-mail.")
        raise ValueError("Perfil do Google não contém e-mail.")

    db = database.get_db()
    doc_ref = db.collection(COLECAO_USUARIOS).document(user_email)

    try:
        doc = doc_ref.get()

        if doc.exists:
            user_data = doc.to_dict() or {}
            user_data['email'] = user_email

            # Usuários antigos sem role viram 'user'
            if 'role' not in user_data:
                user_data['role'] = 'user'

            user_data.pop('criado_em', None)
            logger.info(f"Login efetuado: {user_email} (Role: {user_data.get('role')})")
            return user_data

        # Primeiro Acesso (Novo Usuário)
        logger.info(f"Criando novo usuário: {user_email}")

        novo_usuario = {
            'nome': google_profile.get('nome'),
            'google_id': google_profile.get('google_id'),
            'role': 'user',  # Ninguém nasce admin: ver setup_admin.py
            'criado_em': firestore.SERVER_TIMESTAMP
        }
        doc_ref.set(novo_usuario)

        # Objeto para a sessão, sem o Timestamp
        dados_sessao = {k: v for k, v in novo_usuario.items() if k != 'criado_em'}
        dados_sessao['email'] = user_email
        return dados_sessao

    except Exception as e:
        logger.error(f"Erro ao processar login para {user_email}: {e}", exc_info=True)
        raise

def promover_admin(email: str) -> bool:
    """Dá role='admin' ao operador. False se ele nunca fez login."""
    db = database.get_db()
    doc_ref = db.collection(COLECAO_USUARIOS).document(email)
    if not doc_ref.get().exists:
        return False
    doc_ref.update({'role': 'admin'})
    logger.info(f"Usuário promovido a admin: {email}")
    return True

def obter_usuario(email: str) -> Optional[dict]:
    """Busca os dados atualizados de um operador."""
    try:
        doc = database.get_db().collection(COLECAO_USUARIOS).document(email).get()
        if doc.exists:
            data = doc.to_dict() or {}
            data.pop('criado_em', None)
            data['email'] = email
            return data
        return None
    except Exception as e:
        logger.error(f"Erro ao buscar usuário {email}: {e}", exc_info=True)
        return None
