"""
Rotas do Módulo de Autenticação

Gerencia as rotas para /login, /logout, o callback do Google e /me.
"""

from flask import redirect, url_for, session, current_app

from . import services as auth_services
from . import auth_bp
from escola.core.erros import ErroServico
from escola.core.extensions import oauth
from escola.core.logger import get_logger

logger = get_logger(__name__)

@auth_bp.route('/login')
def login():
    """ Redireciona para o Google (ou para o front-end, se já logado). """
    if 'user_profile' in session:
        return redirect(current_app.config.get('FRONTEND_URL') or url_for('auth_bp.me'))

    redirect_uri = url_for('auth_bp.google_callback', _external=True)
    return oauth.google.authorize_redirect(redirect_uri)


@auth_bp.route('/google/callback')
def google_callback():
    """ Retorno do Google após login. """
    try:
        token = oauth.google.authorize_access_token()
        user_info = oauth.google.userinfo(token=token)

        if not user_info:
            raise ValueError("Falha ao obter dados do Google.")

        google_profile = {
            'email': user_info.get('email'),
            'nome': user_info.get('name'),
            'google_id': user_info.get('sub')
        }

        session['user_profile'] = auth_services.verificar_ou_criar_usuario(google_profile)

    except Exception as e:
        logger.error(f"Erro no login: {e}", exc_info=True)
        raise ErroServico('unauthenticated', 'Não foi possível concluir o login com o Google.')

    return redirect(current_app.config.get('FRONTEND_URL') or url_for('auth_bp.me'))


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    session.pop('user_profile', None)
    return {'success': True}


@auth_bp.route('/me')
def me():
    """ Perfil atualizado do operador logado. """
    if 'user_profile' not in session:
        raise ErroServico('unauthenticated', 'Faça login para continuar.')

    dados_atualizados = auth_services.obter_usuario(session['user_profile']['email'])
    if dados_atualizados:
        session['user_profile'] = dados_atualizados
    return session['user_profile']
