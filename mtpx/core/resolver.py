"""
Path and handle resolution.

The store has no notion of paths: every segment of a path is found by
scanning the children of the directory resolved so far.
"""
from dataclasses import replace
from typing import Optional

from .config import MtpxConfig, DEFAULT_CONFIG
from .constants import HandleScope, ObjectProperty
from .exceptions import (
    InvalidPathError,
    ObjectAccessError,
    ObjectNotFoundError,
    transport_errors,
)
from .logging import get_logger
from .models import ObjectInfo, FileInfo, ExistsResult
from .protocols import ObjectStore
from . import path as pathutil

logger = get_logger(__name__)


def root_info(config: MtpxConfig = DEFAULT_CONFIG) -> FileInfo:
    """Returns the synthesized descriptor of the storage root."""
    return FileInfo(
        size=config.root_size,
        is_dir=True,
        full_path=pathutil.PATH_SEP,
        object_id=config.root_handle,
    )


def get_file_size(
    store: ObjectStore,
    info: ObjectInfo,
    handle: int,
    config: MtpxConfig = DEFAULT_CONFIG
) -> int:
    """
    Returns the size of an object in bytes.

    The compact size field only holds 32 bits; when it carries the
    overflow sentinel the precise OBJECT_SIZE property is queried.

    Raises:
        ObjectAccessError: If the precise size query fails
    """
    if info.compressed_size != config.size_overflow:
        return info.compressed_size

    with transport_errors(ObjectAccessError, f"failed to read size of handle {handle}", handle=handle):
        return int(store.get_object_property_value(handle, ObjectProperty.OBJECT_SIZE))


def describe(
    store: ObjectStore,
    handle: int,
    parent_path: str = '',
    config: MtpxConfig = DEFAULT_CONFIG
) -> FileInfo:
    """
    Fetches the descriptor of an object.

    Args:
        store: Object store
        handle: Object handle
        parent_path: Path of the containing directory, used to build
            full_path. When unknown, full_path is not canonical.
        config: Engine configuration

    Returns:
        Fresh FileInfo for the object

    Raises:
        ObjectAccessError: If the info record or size cannot be read
    """
    if handle == config.root_handle:
        return root_info(config)

    with transport_errors(ObjectAccessError, f"failed to read object info of handle {handle}", handle=handle):
        info = store.get_object_info(handle)

    size = get_file_size(store, info, handle, config)
    is_dir = info.is_association
    parent = pathutil.normalize(parent_path) if parent_path else ''

    return FileInfo(
        size=size,
        is_dir=is_dir,
        full_path=pathutil.join(parent, info.filename),
        object_id=handle,
        mod_time=info.modification_date,
        name=info.filename,
        extension=pathutil.extension(info.filename, is_dir),
        parent_path=parent,
        parent_id=info.parent_object,
        info=info,
    )


def lookup_by_name(
    store: ObjectStore,
    storage_id: int,
    parent_handle: int,
    name: str,
    parent_path: str = '',
    config: MtpxConfig = DEFAULT_CONFIG
) -> FileInfo:
    """
    Finds the child of a directory with the given name.

    Only the file name property is read for each child; the full
    descriptor is fetched once a name matches.

    Raises:
        ObjectNotFoundError: If no child has that name
        ObjectAccessError: If enumeration or a property read fails
    """
    with transport_errors(ObjectAccessError, f"failed to list children of handle {parent_handle}", handle=parent_handle):
        handles = store.get_object_handles(storage_id, HandleScope.ALL_ASSOCIATIONS, parent_handle)

    for handle in handles:
        with transport_errors(ObjectAccessError, f"failed to read name of handle {handle}", handle=handle):
            child_name = store.get_object_property_value(handle, ObjectProperty.OBJECT_FILE_NAME)

        if child_name != name:
            continue

        file_info = describe(store, handle, parent_path, config)
        if file_info.name == name:
            return file_info

        logger.debug(f"Name property of handle {handle} does not match its info record, skipping")

    raise ObjectNotFoundError(f"file not found: {name}", handle=parent_handle, path=name)


def resolve_path(
    store: ObjectStore,
    storage_id: int,
    full_path: str,
    config: MtpxConfig = DEFAULT_CONFIG
) -> FileInfo:
    """
    Resolves a slash-separated path to a descriptor.

    The returned descriptor's full_path is the normalized input path.

    Raises:
        InvalidPathError: If the path is empty, missing, or goes through a file
        ObjectAccessError: If the store fails while scanning a directory
    """
    if not full_path:
        raise InvalidPathError("invalid path: path cannot be empty", path=full_path)

    normalized = pathutil.normalize(full_path)
    if normalized == pathutil.PATH_SEP:
        return root_info(config)

    segments = pathutil.split(normalized)
    current: Optional[FileInfo] = None
    parent_handle = config.root_handle
    parent_path = pathutil.PATH_SEP
    resolved = 0

    for index, segment in enumerate(segments):
        try:
            current = lookup_by_name(store, storage_id, parent_handle, segment, parent_path, config)
        except ObjectNotFoundError as ex:
            raise InvalidPathError(
                f"path not found: {full_path}\nreason: {ex}", path=full_path
            ) from ex

        logger.debug(f"Resolved segment '{segment}' of {normalized} to handle {current.object_id}")

        # a file cannot have children
        if not current.is_dir and index < len(segments) - 1:
            raise InvalidPathError(f"path not found: {full_path}", handle=current.object_id, path=full_path)

        parent_handle = current.object_id
        parent_path = current.full_path
        resolved += 1

    if resolved < 1 or current is None:
        raise InvalidPathError(f"file not found: {full_path}", path=full_path)

    return replace(current, full_path=normalized)


def resolve_handle_or_path(
    store: ObjectStore,
    storage_id: int,
    handle: int = 0,
    full_path: str = '',
    config: MtpxConfig = DEFAULT_CONFIG
) -> FileInfo:
    """
    Resolves an object from a handle, falling back to a path.

    A non-zero handle is trusted as is and never checked against
    ``full_path``; the path then only seeds the descriptor's full_path
    as the parent path. Prefer handles when known: resolving a path
    scans every directory on the way down.

    Raises:
        InvalidPathError: If neither handle nor path is given, or the path
            does not resolve
        ObjectAccessError: On store failures
    """
    if handle == 0 and not full_path:
        raise InvalidPathError(
            f"invalid path: {full_path}. both handle and path cannot be empty", path=full_path
        )

    if handle == 0:
        return resolve_path(store, storage_id, full_path, config)

    return describe(store, handle, full_path, config)


def file_exists(
    store: ObjectStore,
    storage_id: int,
    handle: int = 0,
    full_path: str = '',
    config: MtpxConfig = DEFAULT_CONFIG
) -> ExistsResult:
    """
    Checks whether an object exists.

    Any resolution failure, store failures included, reads as
    "does not exist".
    """
    try:
        file_info = resolve_handle_or_path(store, storage_id, handle, full_path, config)
    except (InvalidPathError, ObjectAccessError) as ex:
        logger.debug(f"Existence check for {full_path or handle} failed: {ex}")
        return ExistsResult(False, False, 0)

    return ExistsResult(True, file_info.is_dir, file_info.object_id)
