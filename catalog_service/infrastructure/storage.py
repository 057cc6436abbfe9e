"""Object storage for catalog images.

Images are uploaded under opaque keys and handed to clients as public
URLs resolved at read time.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

import boto3
import structlog
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from catalog_service.domain.exceptions import ConfigurationError, UpstreamFailure
from catalog_service.infrastructure.config import settings

logger = structlog.get_logger()


class FileStorage(ABC):
    """Interface of the object store holding catalog images."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Store ``data`` under ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the object stored under ``key``."""

    @abstractmethod
    def resolve(self, key: str) -> str:
        """Return the public URL of ``key``."""


def build_public_url(
    key: str,
    bucket: str | None,
    region: str | None,
    public_base_url: str | None = None,
) -> str:
    """Build the public URL of an object.

    Args:
        key: Object key.
        bucket: Bucket name.
        region: Bucket region.
        public_base_url: CDN or gateway URL that replaces the S3 host.

    Returns:
        Absolute URL of the object.

    Raises:
        ConfigurationError: If the bucket, or the region without a base
            URL, is not configured.
    """
    if not bucket:
        raise ConfigurationError("Invalid s3 configuration", details={"missing": "bucket"})
    if public_base_url:
        return f"{public_base_url.rstrip('/')}/{key}"
    if not region:
        raise ConfigurationError("Invalid s3 configuration", details={"missing": "region"})
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


class S3Storage(FileStorage):
    """S3 (or S3-compatible) image storage backed by boto3.

    boto3 is blocking, so every call runs in a worker thread.
    """

    def __init__(
        self,
        bucket: str | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize storage.

        Args:
            bucket: Bucket name (defaults to settings).
            region: Bucket region (defaults to settings).
            endpoint_url: Custom endpoint, e.g. MinIO (defaults to settings).
            public_base_url: URL prefix for public links (defaults to settings).
            client: Pre-built boto3 S3 client.
        """
        self.bucket = bucket if bucket is not None else settings.s3_bucket
        self.region = region if region is not None else settings.s3_region
        self.endpoint_url = endpoint_url if endpoint_url is not None else settings.s3_endpoint_url
        self.public_base_url = (
            public_base_url if public_base_url is not None else settings.s3_public_base_url
        )
        self.client = client or boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=self.endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            config=BotoConfig(signature_version="s3v4"),
        )

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Upload an image.

        Raises:
            UpstreamFailure: If the object store rejects the call.
        """
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type

        try:
            await asyncio.to_thread(self.client.put_object, **params)
        except (BotoCoreError, ClientError) as e:
            logger.error("Image upload failed", key=key, bucket=self.bucket, error=str(e))
            raise UpstreamFailure(f"Failed to upload image: {e}", details={"key": key}) from e

        logger.info("Image uploaded", key=key, bucket=self.bucket, size=len(data))

    async def delete(self, key: str) -> None:
        """Delete an image.

        Raises:
            UpstreamFailure: If the object store rejects the call.
        """
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Image delete failed", key=key, bucket=self.bucket, error=str(e))
            raise UpstreamFailure(f"Failed to delete image: {e}", details={"key": key}) from e

        logger.info("Image deleted", key=key, bucket=self.bucket)

    def resolve(self, key: str) -> str:
        """Resolve an image key to its public URL."""
        return build_public_url(key, self.bucket, self.region, self.public_base_url)
