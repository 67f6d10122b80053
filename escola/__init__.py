"""
Módulo Principal da Aplicação (Application Factory)
"""

from flask import Flask
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix # Importação necessária para o Cloud Run
from config import Config

from .core.erros import ErroServico
from .core.extensions import limiter, oauth
from .core.logger import get_logger

logger = get_logger(__name__)

def create_app(config_class=Config):
    """
    Cria e configura uma instância da aplicação Flask.
    """

    app = Flask(__name__, instance_relative_config=True)

    # === CORREÇÃO HTTPS (Cloud Run) ===
    # O Flask fica atrás de um Proxy; assim gera URLs com 'https://'
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # 1. Carrega a configuração
    app.config.from_object(config_class)

    # 2. Inicializa o Authlib
    oauth.init_app(app)

    google_client_id = app.config.get('GOOGLE_CLIENT_ID')
    google_client_secret = app.config.get('GOOGLE_CLIENT_SECRET')

    if google_client_id and google_client_secret:
        oauth.register(
            name='google',
            client_id=google_client_id,
            client_secret=google_client_secret,
            server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
            client_kwargs={
                'scope': 'openid email profile'
            }
        )
    else:
        logger.warning("GOOGLE_CLIENT_ID ou GOOGLE_CLIENT_SECRET não definidos.")

    # 3. Rate Limiting
    limiter.init_app(app)

    # 4. Erros em JSON
    @app.errorhandler(ErroServico)
    def tratar_erro_servico(erro):
        return erro.para_dict(), erro.status_http

    @app.errorhandler(HTTPException)
    def tratar_erro_http(erro):
        mensagem = 'Página não encontrada' if erro.code == 404 else erro.description
        return {'error': {'status': erro.name, 'message': mensagem}}, erro.code

    # 5. Configura os Blueprints (Módulos)
    from .auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/')

    from .alunos import alunos_bp
    app.register_blueprint(alunos_bp)

    from .financeiro import financeiro_bp
    app.register_blueprint(financeiro_bp)

    from .chamada import chamada_bp
    app.register_blueprint(chamada_bp)

    from .agenda import agenda_bp
    app.register_blueprint(agenda_bp)

    # Gatilhos chegam em rajadas (Eventarc): sem limite de requisições
    from .gatilhos import gatilhos_bp
    limiter.exempt(gatilhos_bp)
    app.register_blueprint(gatilhos_bp)

    # 6. Rota de Health Check
    @app.route("/health")
    def health_check():
        return "Servidor Escola no ar!", 200

    return app
