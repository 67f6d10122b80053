"""
Módulo Central de Extensões.
Evita importações circulares centralizando as instâncias das extensões.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from authlib.integrations.flask_client import OAuth

# 1. Limiter (Rate Limiting)
# O storage vem de RATELIMIT_STORAGE_URI (Redis em produção, memória em dev).
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"]
)

# 2. OAuth (Authlib)
oauth = OAuth()
