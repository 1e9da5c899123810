"""
Cloudflare R2 / S3-compatible storage gateway.

Uses boto3 with S3-compatible API to interact with Cloudflare R2.
This is storage-provider agnostic - works with any S3-compatible storage.

The gateway owns no durable state. It only issues presigned PUT URLs:
browsers upload straight to the bucket, the bucket stays private, and each
URL carries a hard expiry independent of the request that produced it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresignedUpload:
    """A write capability for one object key."""
    url: str
    expires_at: datetime


def build_storage_key(user_id: str, file_id: str) -> str:
    """
    Object key for a file.

    Pattern: users/{user_id}/files/{file_id}

    Built from server-generated ids only, never from the client's file name,
    so keys cannot collide or escape the user's prefix.
    """
    return f"users/{user_id}/files/{file_id}"


class ObjectStorageGateway:
    """
    S3-compatible client for Cloudflare R2.

    Built once at startup from Settings; credentials are checked by
    Settings validation so a missing value never reaches this point.
    """

    def __init__(self, settings: Settings, client=None):
        self._bucket = settings.r2_bucket
        # Use signature_version='s3v4' for R2 compatibility
        self._client = client or boto3.client(
            's3',
            endpoint_url=settings.r2_endpoint,
            aws_access_key_id=settings.r2_access_key,
            aws_secret_access_key=settings.r2_secret_key,
            region_name=settings.r2_region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}  # R2 uses path-style
            )
        )
        logger.info(f"Object storage gateway initialized for bucket: {self._bucket}")

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._bucket

    def presign_upload(
        self,
        object_key: str,
        content_type: str,
        expires_in: int,
        now: Optional[datetime] = None
    ) -> PresignedUpload:
        """
        Generate a presigned PUT URL for direct upload.

        Args:
            object_key: The S3 object key (path in bucket)
            content_type: MIME type the upload must be sent with
            expires_in: URL lifetime in seconds
            now: Reference time for expires_at, defaults to now (UTC)

        Returns:
            PresignedUpload with the URL and its expiry time

        Raises:
            StorageError: If signing fails

        Security:
            - Only allows PUT (upload), not GET
            - Content-Type must match what was signed
        """
        if expires_in <= 0:
            raise ValueError("expires_in must be positive")

        # Taken before signing so the reported expiry never outlives the URL
        now = now or datetime.now(timezone.utc)

        try:
            url = self._client.generate_presigned_url(
                ClientMethod='put_object',
                Params={
                    'Bucket': self._bucket,
                    'Key': object_key,
                    'ContentType': content_type,
                },
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL for {object_key}: {e}")
            raise StorageError("Failed to generate upload URL") from e

        logger.debug(f"Generated presigned URL for {object_key}")
        return PresignedUpload(url=url, expires_at=now + timedelta(seconds=expires_in))
