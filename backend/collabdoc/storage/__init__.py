"""Object storage for image blobs."""

from .ports import ObjectStoragePort, StorageError
from .s3_storage_adapter import S3StorageAdapter, create_storage_adapter
from .storage_config import StorageConfig, load_storage_config_from_env, validate_storage_config

__all__ = [
    "ObjectStoragePort",
    "StorageError",
    "S3StorageAdapter",
    "create_storage_adapter",
    "StorageConfig",
    "load_storage_config_from_env",
    "validate_storage_config",
]
