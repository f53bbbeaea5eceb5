"""
armodel_db - Object Store package.

Provides:

    - ObjectStoreConfig: backend configuration
    - ObjectStore: protocol describing required interface
    - LocalFSObjectStore: web-servable local directory
    - HTTPBucketObjectStore: external object-storage bucket
"""

from .base import ObjectStoreConfig, ObjectStore
from .local_fs import LocalFSObjectStore
from .http_bucket import HTTPBucketObjectStore

__all__ = [
    "ObjectStore",
    "ObjectStoreConfig",
    "LocalFSObjectStore",
    "HTTPBucketObjectStore",
]
