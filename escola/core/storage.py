"""
Módulo de Integração com Google Cloud Storage (Service Layer)

Guarda os documentos dos alunos (RG, comprovantes, atestados) em blobs
privados. O acesso é sempre por Signed URL temporária.
"""

from datetime import timedelta
from typing import Any, Optional
from google.cloud import storage
from flask import current_app
import uuid

from escola.core.logger import get_logger

logger = get_logger(__name__)

def _get_client() -> storage.Client:
    return storage.Client(project=current_app.config['GOOGLE_CLOUD_PROJECT'])

def _get_bucket() -> storage.Bucket:
    bucket_name = current_app.config.get('GCS_BUCKET_NAME')
    if not bucket_name:
        raise ValueError("GCS_BUCKET_NAME não configurado")
    return _get_client().bucket(bucket_name)

def generate_signed_url(blob_name: str, expiration: int = 3600) -> Optional[str]:
    """
    Gera uma Signed URL temporária para download do arquivo.
    Args:
        blob_name: ID interno do arquivo no GCS.
        expiration: Tempo em segundos (padrão 1 hora).
    """
    try:
        blob = _get_bucket().blob(blob_name)
        return blob.generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=expiration),
            method="GET"
        )
    except Exception as e:
        logger.error(f"Erro ao gerar Signed URL para {blob_name}: {e}", exc_info=True)
        return None

def upload_file(arquivo_storage: Any, pasta: str, nome_original: str, content_type: str) -> str:
    """
    Faz o upload em '<pasta>/<uuid>_<nome>' e retorna o NOME DO BLOB.
    O arquivo NÃO fica público.
    """
    bucket = _get_bucket()

    nome_blob = f"{pasta}/{uuid.uuid4().hex}_{nome_original.replace(' ', '_')}"

    blob = bucket.blob(nome_blob)
    arquivo_storage.seek(0)
    blob.upload_from_file(arquivo_storage, content_type=content_type)

    logger.info(f"Arquivo enviado ao bucket: {nome_blob}")
    return nome_blob

def delete_file(blob_name: str) -> None:
    """Remove arquivo do Bucket pelo nome do blob. Falhas só são logadas."""
    if not blob_name:
        return
    try:
        _get_bucket().blob(blob_name).delete()
        logger.info(f"Arquivo removido do bucket: {blob_name}")
    except Exception as e:
        logger.error(f"Erro ao deletar arquivo {blob_name}: {e}")
