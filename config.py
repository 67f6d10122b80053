"""
Módulo de Configuração (Blindado)

Define a classe de configuração principal. Implementa o padrão 'Fail Fast':
se uma variável crítica estiver faltando, a aplicação nem inicia.
"""

import os
from dotenv import load_dotenv

# Carrega variáveis do arquivo .env
load_dotenv()

# Em produção (Cloud Run), OAUTHLIB_INSECURE_TRANSPORT não deve existir.
if os.environ.get('FLASK_DEBUG') == '1':
    os.environ['OAUTHLIB_INSECURE_TRANSPORT'] = '1'

class Config:
    """
    Classe de configuração base da aplicação.
    """

    # === SEGURANÇA CRÍTICA (Fail Fast) ===
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise ValueError("ERRO CRÍTICO: 'SECRET_KEY' não encontrada no .env. A aplicação não pode iniciar insegura.")

    # === GOOGLE CLOUD & STORAGE ===
    GOOGLE_CLOUD_PROJECT = os.environ.get('GOOGLE_CLOUD_PROJECT')
    GCS_BUCKET_NAME = os.environ.get('GCS_BUCKET_NAME')

    # Sem bucket, o envio de documentos dos alunos falha na hora do upload
    if not GCS_BUCKET_NAME:
        print("AVISO: 'GCS_BUCKET_NAME' não configurado. Uploads de documentos falharão.")

    # === GATILHOS (Eventarc / Cloud Scheduler) ===
    # Token compartilhado enviado no cabeçalho X-Gatilho-Token
    GATILHOS_TOKEN = os.environ.get('GATILHOS_TOKEN')
    if not GATILHOS_TOKEN:
        print("AVISO: 'GATILHOS_TOKEN' ausente. Todas as chamadas de gatilho serão recusadas.")

    # === LIMITES DE REQUISIÇÃO ===
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_ENABLED = True

    # === FLASK ===
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1')
    # Para onde o login redireciona (app React). Sem ele, vai para /me.
    FRONTEND_URL = os.environ.get('FRONTEND_URL')

    # === OAUTH (LOGIN) ===
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET')

    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
         raise ValueError("ERRO CRÍTICO: Credenciais OAuth (CLIENT_ID/SECRET) ausentes.")
