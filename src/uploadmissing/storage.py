"""Object storage abstraction for the mirrored bucket.

This module provides:
- Abstract interface for the three calls the sync engine needs
- S3Storage for S3-compatible services (AWS, MinIO, R2, OVH)
- create_storage factory
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING, BinaryIO

from uploadmissing.core.errors import TransportError

if TYPE_CHECKING:
    from typing import Any

    from uploadmissing.core.config import StorageConfig

# Provider-side cap on keys per batch delete
MAX_KEYS_PER_DELETE = 1000


class ObjectStorage(ABC):
    """Abstract interface for the destination bucket."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of the bucket."""

    @abstractmethod
    def iter_pages(self, prefix: str) -> Iterator[list[str]]:
        """Yield the keys under a prefix, one listing page at a time.

        Pages are fetched lazily: page N+1 is requested only once the
        caller asks for it.

        Raises:
            TransportError: If any page request fails.
        """

    @abstractmethod
    def put(self, key: str, body: BinaryIO, content_type: str, acl: str) -> None:
        """Store one object.

        Args:
            key: Full object key.
            body: Readable stream with the object's bytes.
            content_type: MIME type stored with the object.
            acl: Canned ACL applied to the object.

        Raises:
            TransportError: If the request fails.
        """

    @abstractmethod
    def delete_batch(self, keys: list[str]) -> None:
        """Delete up to MAX_KEYS_PER_DELETE objects in one request.

        Raises:
            TransportError: If the request fails or any key was not deleted.
        """


class S3Storage(ObjectStorage):
    """S3-compatible storage (AWS, MinIO, R2, OVH, etc.)."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str | None = None,
    ) -> None:
        """Initialize S3 storage.

        Args:
            bucket: S3 bucket name.
            endpoint_url: Custom endpoint URL (for MinIO, R2, etc.).
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: AWS region.
        """
        import boto3

        self._bucket = bucket
        self._endpoint_url = endpoint_url
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def bucket(self) -> str:
        """Return the bucket name."""
        return self._bucket

    @property
    def location(self) -> str:
        """Return the S3 bucket location."""
        if self._endpoint_url:
            return f"S3: {self._endpoint_url}/{self._bucket}"
        return f"S3: s3://{self._bucket}"

    def iter_pages(self, prefix: str) -> Iterator[list[str]]:
        """Yield keys page by page using the list_objects_v2 paginator."""
        from botocore.exceptions import BotoCoreError, ClientError

        paginator = self._client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=self._bucket, Prefix=prefix)
        try:
            for page in pages:
                yield [obj["Key"] for obj in page.get("Contents", [])]
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Listing s3://{self._bucket}/{prefix} failed: {e}") from e

    def put(self, key: str, body: BinaryIO, content_type: str, acl: str) -> None:
        """Store one object with put_object."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ACL=acl,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Upload of {key} failed: {e}") from e

    def delete_batch(self, keys: list[str]) -> None:
        """Delete a batch of keys with delete_objects."""
        from botocore.exceptions import BotoCoreError, ClientError

        if len(keys) > MAX_KEYS_PER_DELETE:
            raise ValueError(f"At most {MAX_KEYS_PER_DELETE} keys per batch, got {len(keys)}")

        try:
            response = self._client.delete_objects(
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Batch delete of {len(keys)} keys failed: {e}") from e

        errors = response.get("Errors", [])
        if errors:
            first = errors[0]
            raise TransportError(
                f"Batch delete left {len(errors)} keys behind, "
                f"first {first.get('Key')}: {first.get('Code')} {first.get('Message')}"
            )


def create_storage(bucket: str, config: StorageConfig) -> ObjectStorage:
    """Factory function to create storage for a bucket.

    Args:
        bucket: Bucket name.
        config: Connection settings.

    Returns:
        Configured ObjectStorage instance.
    """
    return S3Storage(
        bucket=bucket,
        endpoint_url=config.endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        region=config.region,
    )
