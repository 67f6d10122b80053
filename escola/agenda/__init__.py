"""
Módulo de Agenda (Blueprint)

Dados da grade de horários (cursos semanais + eventos únicos).
"""

from flask import Blueprint

agenda_bp = Blueprint(
    'agenda_bp',
    __name__,
    url_prefix='/agenda'
)

from . import routes
