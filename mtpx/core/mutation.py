"""
Creation helpers for remote directories and files, and for local copies
of remote objects.
"""
import os
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .config import MtpxConfig, DEFAULT_CONFIG
from .constants import ObjectFormat
from .exceptions import (
    InvalidPathError,
    LocalFileError,
    ObjectAccessError,
    ObjectCreateError,
    ObjectNotFoundError,
    local_file_error_wrap,
    transport_errors,
)
from .logging import get_logger
from .models import ObjectInfo, FileInfo
from .protocols import ObjectStore, ProgressCallback
from .resolver import lookup_by_name
from . import path as pathutil

logger = get_logger(__name__)

PathLike = Union[str, Path]


@local_file_error_wrap
def _open_local(path: PathLike, mode: str) -> BinaryIO:
    return open(path, mode)


@local_file_error_wrap
def _stat_local(path: PathLike) -> os.stat_result:
    return os.stat(path)


@local_file_error_wrap
def _unlink_local(path: Path) -> None:
    path.unlink(missing_ok=True)


def make_directory(store: ObjectStore, storage_id: int, parent_handle: int, name: str) -> int:
    """
    Creates a directory under ``parent_handle``.

    Returns:
        Handle of the new directory

    Raises:
        ObjectCreateError: If the store rejects the new object
    """
    info = ObjectInfo(
        storage_id=storage_id,
        object_format=ObjectFormat.ASSOCIATION,
        parent_object=parent_handle,
        filename=name,
        compressed_size=0,
        modification_date=datetime.now(),
    )

    with transport_errors(ObjectCreateError, f"failed to create directory {name}", handle=parent_handle, path=name):
        handle = store.send_object_info(storage_id, parent_handle, info)

    logger.debug(f"Created directory '{name}' under handle {parent_handle} as {handle}")
    return handle


def make_directory_path(
    store: ObjectStore,
    storage_id: int,
    full_path: str,
    config: MtpxConfig = DEFAULT_CONFIG
) -> int:
    """
    Creates every missing directory of ``full_path``, like ``mkdir -p``.

    Returns:
        Handle of the last directory of the path (the root handle for "/")

    Raises:
        InvalidPathError: If the path is empty or an existing segment is a file
        ObjectAccessError: If an existing directory cannot be scanned
        ObjectCreateError: If a directory cannot be created
    """
    if not full_path:
        raise InvalidPathError("invalid path: path cannot be empty", path=full_path)

    parent_handle = config.root_handle
    parent_path = pathutil.PATH_SEP

    for segment in pathutil.split(full_path):
        try:
            existing = lookup_by_name(store, storage_id, parent_handle, segment, parent_path, config)
        except ObjectNotFoundError:
            parent_handle = make_directory(store, storage_id, parent_handle, segment)
        else:
            if not existing.is_dir:
                raise InvalidPathError(
                    f"path not found: {full_path}\nreason: {existing.full_path} is a file",
                    handle=existing.object_id, path=full_path
                )
            parent_handle = existing.object_id
        parent_path = pathutil.join(parent_path, segment)

    return parent_handle


def delete_object(store: ObjectStore, handle: int) -> None:
    """
    Deletes an object.

    Raises:
        ObjectAccessError: If the store refuses the deletion
    """
    with transport_errors(ObjectAccessError, f"failed to delete handle {handle}", handle=handle):
        store.delete_object(handle)
    logger.debug(f"Deleted handle {handle}")


def make_file(
    store: ObjectStore,
    storage_id: int,
    info: ObjectInfo,
    source: PathLike,
    overwrite: bool = False,
    progress: Optional[ProgressCallback] = None,
    config: MtpxConfig = DEFAULT_CONFIG
) -> int:
    """
    Creates a file from a local source.

    ``info`` is the template of the new object: at least ``filename``
    and ``parent_object`` must be set. Size and modification time are
    filled in from the local file.

    If the parent already holds an object with that name, its handle is
    returned untouched unless ``overwrite`` is set, in which case it is
    deleted first. An object whose data could not be sent is deleted
    again before the error is raised.

    Args:
        store: Object store
        storage_id: Target storage
        info: Template of the new object
        source: Local file to send
        overwrite: Replace an existing object with the same name
        progress: Called as ``progress(total, sent)`` while sending
        config: Engine configuration

    Returns:
        Handle of the new (or existing) object

    Raises:
        ObjectAccessError: If the parent cannot be scanned or the
            existing object cannot be deleted
        ObjectCreateError: If the object cannot be created or sent
        FilePermissionError: If the local source cannot be read
        LocalFileError: For other local failures
    """
    try:
        existing = lookup_by_name(store, storage_id, info.parent_object, info.filename, config=config)
    except ObjectNotFoundError:
        existing = None

    if existing is not None:
        if not overwrite:
            logger.debug(f"'{info.filename}' already exists as handle {existing.object_id}")
            return existing.object_id
        delete_object(store, existing.object_id)

    st = _stat_local(source)
    size = st.st_size
    template = replace(
        info,
        storage_id=storage_id,
        compressed_size=size if size < config.size_overflow else config.size_overflow,
        modification_date=info.modification_date or datetime.fromtimestamp(st.st_mtime),
    )

    with _open_local(source, 'rb') as fh:
        with transport_errors(ObjectCreateError, f"failed to create file {info.filename}",
                              handle=info.parent_object, path=info.filename):
            handle = store.send_object_info(storage_id, info.parent_object, template)

        def on_chunk_sent(sent: int) -> None:
            if progress is not None:
                progress(size, sent)

        try:
            with transport_errors(ObjectCreateError, f"failed to send file {info.filename}",
                                  handle=handle, path=info.filename):
                store.send_object(fh, size, on_chunk_sent)
        except ObjectCreateError:
            # drop the incomplete object so a retry does not find it by name
            try:
                delete_object(store, handle)
            except ObjectAccessError as ex:
                logger.warning(f"Could not remove incomplete handle {handle}: {ex}")
            raise

    logger.debug(f"Sent {size} bytes of {source} as handle {handle}")
    return handle


def materialize_local(store: ObjectStore, file_info: FileInfo, destination: PathLike) -> Path:
    """
    Writes a remote file to a local path.

    The destination is created (or truncated) and closed on every exit path;
    a partially written destination is removed when the transfer fails.

    Raises:
        InvalidPathError: If ``file_info`` describes a directory
        ObjectAccessError: If the store fails to send the data
        FilePermissionError: If the destination cannot be created
        LocalFileError: For other local failures
    """
    if file_info.is_dir:
        raise InvalidPathError(
            f"cannot copy directory {file_info.full_path} to a file",
            handle=file_info.object_id, path=file_info.full_path
        )

    destination = Path(destination)
    with _open_local(destination, 'wb') as fh:
        try:
            with transport_errors(ObjectAccessError, f"failed to read data of handle {file_info.object_id}",
                                  handle=file_info.object_id, path=file_info.full_path):
                store.get_object(file_info.object_id, fh)
        except ObjectAccessError:
            fh.close()
            try:
                _unlink_local(destination)
            except LocalFileError as ex:
                logger.warning(f"Could not remove partial file {destination}: {ex}")
            raise

    logger.debug(f"Copied handle {file_info.object_id} to {destination}")
    return destination
