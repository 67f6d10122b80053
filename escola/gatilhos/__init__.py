"""
Módulo de Gatilhos (Blueprint)

Recebe os eventos do Firestore (via Eventarc) e o "tick" mensal do
Cloud Scheduler. Cada chamada é independente e sem estado.
"""

from flask import Blueprint

gatilhos_bp = Blueprint(
    'gatilhos_bp',
    __name__,
    url_prefix='/gatilhos'
)

from . import routes
