"""
Object storage sobre o Storage do Django.

Alternativa ao S3 para desenvolvimento e testes: grava os anexos no
backend de arquivos configurado (FileSystemStorage por padrão).
O Storage do Django não assina URLs; presign_get devolve storage.url.
"""

import logging

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from helpdesk.core.shared.exceptions import StorageError

logger = logging.getLogger(__name__)


class DjangoStorageObjectStorage:
    """Adapter ObjectStorage sobre django.core.files.storage."""

    def __init__(self, storage=None):
        self._storage = storage or default_storage

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            saved_name = self._storage.save(key, ContentFile(data))
        except Exception as e:
            logger.error(f"Falha ao gravar {key} no storage: {e}")
            raise StorageError(f"Could not upload {key}: {e}", key=key)

        if saved_name != key:
            # O Storage renomeia quando a chave já existe
            logger.error(f"Storage gravou {key} como {saved_name}")
            raise StorageError(f"Key already exists: {key}", key=key)

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        try:
            if not self._storage.exists(key):
                raise StorageError(f"Object not found: {key}", key=key)
            return self._storage.url(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Could not build URL for {key}: {e}", key=key)
