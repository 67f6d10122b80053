"""
Módulo de Conexão com o Banco de Dados (Core)

Inicializa sob demanda o cliente do Google Firestore, usado
pelos "Service Layers" da aplicação e pelos gatilhos.
"""

from datetime import date, datetime
from typing import Any, Optional
from google.cloud import firestore
from escola.core.logger import get_logger

logger = get_logger(__name__)

_cliente: Optional[firestore.Client] = None

def get_db() -> firestore.Client:
    """
    Retorna o cliente do Firestore, criando-o na primeira chamada.

    O SDK busca as credenciais na variável de ambiente
    'GOOGLE_APPLICATION_CREDENTIALS' (ou na conta de serviço do Cloud Run).
    """
    global _cliente
    if _cliente is None:
        try:
            _cliente = firestore.Client()
            logger.info("Conexão com o Firestore estabelecida com sucesso.")
        except Exception as e:
            logger.critical(f"ERRO AO CONECTAR COM O FIRESTORE: {e}", exc_info=True)
            raise ConnectionError("Não foi possível conectar ao Firestore.") from e
    return _cliente

def id_referencia(ref) -> Optional[str]:
    """
    Id estável de uma referência de documento.

    Aceita DocumentReference, caminho ('courses/abc') ou o próprio id.
    """
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref.rstrip('/').split('/')[-1] or None
    return getattr(ref, 'id', None)

def serializar(valor: Any) -> Any:
    """Converte um documento do Firestore em algo que o jsonify aceita."""
    if isinstance(valor, dict):
        return {chave: serializar(v) for chave, v in valor.items()}
    if isinstance(valor, (list, tuple)):
        return [serializar(v) for v in valor]
    if isinstance(valor, (datetime, date)):
        return valor.isoformat()
    if hasattr(valor, 'path') and hasattr(valor, 'id'):
        return valor.id
    if valor is firestore.SERVER_TIMESTAMP:
        return None
    return valor
