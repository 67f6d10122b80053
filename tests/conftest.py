import os

# Config é "Fail Fast": as variáveis precisam existir antes do import
os.environ.setdefault('SECRET_KEY', 'chave-de-teste')
os.environ.setdefault('GOOGLE_CLIENT_ID', 'client-id-teste')
os.environ.setdefault('GOOGLE_CLIENT_SECRET', 'client-secret-teste')
os.environ.setdefault('GATILHOS_TOKEN', 'token-teste')

from unittest.mock import patch

import pytest

from config import Config
from escola import create_app
from firestore_fake import FirestoreFake, transactional_fake


class ConfigTeste(Config):
    TESTING = True
    RATELIMIT_ENABLED = False
    GATILHOS_TOKEN = 'token-teste'
    GCS_BUCKET_NAME = 'bucket-teste'
    GOOGLE_CLOUD_PROJECT = 'projeto-teste'


@pytest.fixture
def db_fake():
    banco = FirestoreFake()
    with patch('escola.core.database.get_db', return_value=banco), \
         patch('google.cloud.firestore.transactional', transactional_fake):
        yield banco


@pytest.fixture
def app(db_fake):
    return create_app(ConfigTeste)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Coloca um operador na sessão: login('admin') ou login('user')."""
    def _login(role='admin', email='secretaria@escola.com'):
        with client.session_transaction() as sessao:
            sessao['user_profile'] = {'email': email, 'nome': 'Secretaria', 'role': role}
    return _login
