"""
Object storage em S3 (boto3).

Implementa o port ObjectStorage do Core:
- put: PutObject com o content type original do arquivo
- presign_get: URL assinada de GetObject com validade em segundos

Erros do boto/botocore são convertidos em StorageError.
"""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from helpdesk.core.shared.exceptions import StorageError

logger = logging.getLogger(__name__)


def create_s3_client(
    region_name: Optional[str] = None,
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
):
    """
    Cria cliente S3.

    Credenciais vazias ficam a cargo da cadeia padrão do boto3
    (variáveis de ambiente, profile, role da instância).
    """
    import boto3

    return boto3.client(
        's3',
        region_name=region_name or None,
        aws_access_key_id=aws_access_key_id or None,
        aws_secret_access_key=aws_secret_access_key or None,
    )


class S3ObjectStorage:
    """
    Adapter S3 para anexos de tickets.

    Example:
        storage = S3ObjectStorage(create_s3_client("us-east-1"), "helpdesk-attachments")
        storage.put("tickets/1700000000000-3f2a9c1be04d-log.txt", b"...", "text/plain")
        url = storage.presign_get("tickets/1700000000000-3f2a9c1be04d-log.txt", 300)
    """

    def __init__(self, client, bucket: str):
        if not bucket:
            raise ValueError("AWS_S3_BUCKET não configurado")
        self._client = client
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type or 'application/octet-stream',
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 put_object falhou para {self._bucket}/{key}: {e}")
            raise StorageError(f"Could not upload {key}: {e}", key=key)

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self._bucket, 'Key': key},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"S3 presign falhou para {self._bucket}/{key}: {e}")
            raise StorageError(f"Could not sign URL for {key}: {e}", key=key)
