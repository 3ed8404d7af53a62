"""
mtpx - Path resolution and tree walks for handle-addressed object stores.

Devices speaking MTP expose objects through numeric handles and a
parent/child relation only. mtpx turns slash-separated paths into
handles, walks remote and local trees, and creates directories and
files on the store.

Usage:
    >>> from mtpx import MtpxClient
    >>> from mtpx.stores import MemoryObjectStore
    >>>
    >>> client = MtpxClient(MemoryObjectStore())
    >>> handle = client.makedirs("/Music/Albums")
    >>> client.resolve("/Music/Albums").object_id == handle
    True
"""
from .client import MtpxClient
from .core import (
    MtpxConfig,
    DEFAULT_CONFIG,
    ROOT_HANDLE,
    SIZE_OVERFLOW,
    ObjectFormat,
    ObjectProperty,
    HandleScope,
    MtpxError,
    InvalidPathError,
    ObjectNotFoundError,
    ObjectAccessError,
    ObjectCreateError,
    ListDirectoryError,
    LocalFileError,
    FilePermissionError,
    WalkAbortedError,
    ObjectInfo,
    FileInfo,
    LocalEntry,
    LocalWalkResult,
    ExistsResult,
    ObjectStore,
)
from .core.logging import setup_logging

__version__ = '1.0.0'


__all__ = [
    'MtpxClient',
    'MtpxConfig',
    'DEFAULT_CONFIG',
    'ROOT_HANDLE',
    'SIZE_OVERFLOW',
    'ObjectFormat',
    'ObjectProperty',
    'HandleScope',
    'MtpxError',
    'InvalidPathError',
    'ObjectNotFoundError',
    'ObjectAccessError',
    'ObjectCreateError',
    'ListDirectoryError',
    'LocalFileError',
    'FilePermissionError',
    'WalkAbortedError',
    'ObjectInfo',
    'FileInfo',
    'LocalEntry',
    'LocalWalkResult',
    'ExistsResult',
    'ObjectStore',
    'setup_logging',
]
