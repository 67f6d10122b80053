"""
Módulo de Logging Centralizado.

Logs em stdout, recolhidos pelo Cloud Logging tanto no Cloud Run
quanto nas execuções dos gatilhos e do job mensal.
"""

import logging
import os
import sys

NIVEL_PADRAO = os.environ.get('LOG_LEVEL', 'INFO').upper()

def get_logger(name: str) -> logging.Logger:
    """
    Retorna um logger com formatação padronizada.

    Args:
        name (str): Nome do módulo que está logando (geralmente __name__).

    Returns:
        logging.Logger: Instância configurada do logger.
    """
    logger = logging.getLogger(name)

    # Um único handler por logger, mesmo com imports repetidos
    if not logger.handlers:
        logger.setLevel(getattr(logging, NIVEL_PADRAO, logging.INFO))

        formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
