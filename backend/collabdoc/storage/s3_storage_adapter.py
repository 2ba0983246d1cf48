"""S3 Storage Adapter - Implementation of ObjectStoragePort using boto3.

Provides S3-compatible storage operations for AWS S3, MinIO, and other
S3-compatible services.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from .ports import ObjectStoragePort, StorageError
from .storage_config import load_storage_config_from_env

logger = logging.getLogger(__name__)

__all__ = ["S3StorageAdapter", "StorageError", "create_storage_adapter"]


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    Example:
        config = load_storage_config_from_env()
        storage = S3StorageAdapter(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
        )
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        """Initialize S3 storage adapter.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            self.bucket_name = bucket_name
            self.region = region

            logger.info(
                f"Initialized S3 storage adapter: bucket={bucket_name}, "
                f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

    async def put_object(self, key: str, data: bytes, mime_type: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=mime_type,
            )
            logger.info(f"Uploaded object: key={key}, size={len(data)}, mime_type={mime_type}")
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"S3 upload failed: key={key}, error={error_code}, message={e}")
            raise StorageError(f"Failed to upload object: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during upload: {e}")
            raise StorageError(f"Failed to upload object: {e}")

    async def get_object(self, key: str) -> bytes:
        try:
            response = self.s3_client.get_object(
                Bucket=self.bucket_name,
                Key=key,
            )
            body = response["Body"].read()
            logger.debug(f"Retrieved object: key={key}")
            return body

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("NoSuchKey", "404"):
                logger.warning(f"Object not found: key={key}")
                raise FileNotFoundError(f"Object not found: {key}")
            logger.error(f"S3 retrieval failed: key={key}, error={error_code}")
            raise StorageError(f"Failed to retrieve object: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during retrieval: {e}")
            raise StorageError(f"Failed to retrieve object: {e}")

    async def delete_object(self, key: str) -> bool:
        try:
            if not await self.object_exists(key):
                logger.info(f"Object not found for deletion: key={key}")
                return False

            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=key,
            )

            logger.info(f"Deleted object: key={key}")
            return True

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"S3 deletion failed: key={key}, error={error_code}")
            raise StorageError(f"Failed to delete object: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during deletion: {e}")
            raise StorageError(f"Failed to delete object: {e}")

    async def object_exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(
                Bucket=self.bucket_name,
                Key=key,
            )
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                return False
            logger.warning(f"Error checking object existence: key={key}, error={error_code}")
            return False
        except Exception:
            return False

    async def verify_bucket_exists(self) -> bool:
        """Verify that the configured bucket exists.

        Used by the health endpoint.

        Raises:
            StorageError: If bucket check fails or bucket doesn't exist
        """
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "404":
                raise StorageError(
                    f"Bucket '{self.bucket_name}' does not exist. "
                    f"Create it first or update MINIO_BUCKET environment variable."
                )
            raise StorageError(f"Failed to verify bucket: {error_code}")
        except Exception as e:
            raise StorageError(f"Failed to verify bucket: {e}")


def create_storage_adapter() -> S3StorageAdapter:
    """Build an adapter from the MINIO_* environment variables."""
    config = load_storage_config_from_env()
    return S3StorageAdapter(
        endpoint_url=config.endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        bucket_name=config.bucket_name,
        region=config.region,
    )
