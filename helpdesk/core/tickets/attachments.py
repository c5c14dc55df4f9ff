"""
Anexos de tickets no object storage.

Chave dos objetos: "tickets/{epoch_millis}-{token}-{filename}", onde
token é um trecho aleatório de uuid4 que distingue arquivos de mesmo
nome enviados no mesmo milissegundo.

- upload_all: envia todos os arquivos em sequência, antes de o ticket
  ser gravado. Qualquer falha aborta a criação (StorageError).
- presign_all: troca chaves por URLs temporárias. Falhas são
  registradas em log e a chave é omitida da resposta.
"""

import logging
import time
import uuid
from typing import Callable, Iterable, List, Optional

from helpdesk.core.shared.exceptions import StorageError

from .dtos import AttachmentUploadDTO
from .ports import ObjectStorage

logger = logging.getLogger(__name__)

KEY_PREFIX = "tickets"
DEFAULT_URL_TTL = 300
TOKEN_LENGTH = 12


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def build_key(
    filename: str,
    millis: Optional[int] = None,
    token: Optional[str] = None,
) -> str:
    """
    Monta a chave do objeto.

    Separadores de caminho no nome do arquivo são trocados por "_"
    para que a chave fique sempre sob o prefixo "tickets/".
    """
    if millis is None:
        millis = _epoch_millis()
    if token is None:
        token = uuid.uuid4().hex[:TOKEN_LENGTH]
    safe_name = (filename or "file").replace("/", "_").replace("\\", "_")
    return f"{KEY_PREFIX}/{millis}-{token}-{safe_name}"


def upload_all(
    storage: ObjectStorage,
    uploads: Iterable[AttachmentUploadDTO],
    clock: Callable[[], int] = _epoch_millis,
) -> List[str]:
    """
    Envia os anexos e retorna as chaves, na ordem recebida.

    Raises:
        StorageError: No primeiro upload que falhar. Objetos já
            enviados não são removidos.
    """
    keys: List[str] = []
    for upload in uploads:
        key = build_key(upload.filename, clock())
        try:
            storage.put(key, upload.content, upload.content_type)
        except StorageError:
            logger.error(
                f"Falha no upload do anexo {key} "
                f"({len(keys)} anexos já enviados)"
            )
            raise
        logger.debug(f"Anexo enviado: {key} ({len(upload.content)} bytes)")
        keys.append(key)
    return keys


def presign_all(
    storage: ObjectStorage,
    keys: Iterable[str],
    ttl_seconds: int = DEFAULT_URL_TTL,
) -> List[str]:
    """Gera URLs temporárias; chaves que falham são omitidas."""
    urls: List[str] = []
    for key in keys:
        try:
            urls.append(storage.presign_get(key, ttl_seconds))
        except StorageError as e:
            logger.warning(f"Não foi possível gerar link para {key}: {e}")
    return urls
