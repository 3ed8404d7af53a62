"""
Core engine: path normalization, handle resolution, tree walks and
creation helpers for handle-addressed object stores.
"""
from .config import MtpxConfig, DEFAULT_CONFIG, DEFAULT_EXCLUDED_NAMES
from .constants import ROOT_HANDLE, SIZE_OVERFLOW, ObjectFormat, ObjectProperty, HandleScope
from .exceptions import (
    MtpxError,
    InvalidPathError,
    ObjectNotFoundError,
    ObjectAccessError,
    ObjectCreateError,
    ListDirectoryError,
    LocalFileError,
    FilePermissionError,
    WalkAbortedError,
)
from .models import ObjectInfo, FileInfo, LocalEntry, LocalWalkResult, ExistsResult
from .protocols import ObjectStore, WalkCallback, LocalWalkCallback, ProgressCallback
from .resolver import (
    describe,
    file_exists,
    get_file_size,
    lookup_by_name,
    resolve_handle_or_path,
    resolve_path,
    root_info,
)
from .walker import walk
from .local import walk_local, local_file_info, make_local_directory
from .mutation import (
    make_directory,
    make_directory_path,
    make_file,
    materialize_local,
    delete_object,
)

__all__ = [
    'MtpxConfig', 'DEFAULT_CONFIG', 'DEFAULT_EXCLUDED_NAMES',
    'ROOT_HANDLE', 'SIZE_OVERFLOW', 'ObjectFormat', 'ObjectProperty', 'HandleScope',
    'MtpxError', 'InvalidPathError', 'ObjectNotFoundError', 'ObjectAccessError',
    'ObjectCreateError', 'ListDirectoryError', 'LocalFileError', 'FilePermissionError',
    'WalkAbortedError',
    'ObjectInfo', 'FileInfo', 'LocalEntry', 'LocalWalkResult', 'ExistsResult',
    'ObjectStore', 'WalkCallback', 'LocalWalkCallback', 'ProgressCallback',
    'describe', 'file_exists', 'get_file_size', 'lookup_by_name',
    'resolve_handle_or_path', 'resolve_path', 'root_info',
    'walk', 'walk_local', 'local_file_info', 'make_local_directory',
    'make_directory', 'make_directory_path', 'make_file', 'materialize_local',
    'delete_object',
]
