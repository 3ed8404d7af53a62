"""
Remote tree walks.

Walks are plain call-stack recursion over handles: nothing about the
tree is kept once a directory has been visited.
"""
from .config import MtpxConfig, DEFAULT_CONFIG
from .constants import HandleScope
from .exceptions import ListDirectoryError, MtpxError, WalkAbortedError, transport_errors
from .logging import get_logger
from .protocols import ObjectStore, WalkCallback
from .resolver import describe, resolve_handle_or_path

logger = get_logger(__name__)


def walk(
    store: ObjectStore,
    storage_id: int,
    handle: int = 0,
    full_path: str = '',
    recursive: bool = True,
    skip_excluded: bool = True,
    visit: WalkCallback = None,
    config: MtpxConfig = DEFAULT_CONFIG
) -> int:
    """
    Walks the children of a directory, depth-first and pre-order.

    ``handle`` and ``full_path`` are both optional but cannot both be
    empty. Use the handle whenever possible: a path has to be resolved
    one segment at a time before the walk can start.

    Children are visited in store order. A child whose descriptor cannot
    be read is skipped and the walk goes on. Raising from ``visit``
    stops the whole walk.

    Args:
        store: Object store
        storage_id: Storage to walk
        handle: Handle of the directory to walk (0 to use full_path)
        full_path: Path of the directory to walk
        recursive: Descend into subdirectories
        skip_excluded: Skip names from config.excluded_names
        visit: Called as ``visit(handle, file_info)`` for every entry
        config: Engine configuration

    Returns:
        Number of entries visited

    Raises:
        InvalidPathError: If the directory cannot be resolved
        ObjectAccessError: If the directory's descriptor cannot be read
        ListDirectoryError: If the directory's children cannot be listed
        WalkAbortedError: If ``visit`` or a nested directory fails; the
            error carries the count visited so far
    """
    anchor = resolve_handle_or_path(store, storage_id, handle, full_path, config)

    # a handle-anchored walk keeps the caller's path, which may not be canonical
    if handle == 0 or anchor.object_id == config.root_handle:
        parent_path = anchor.full_path
    else:
        parent_path = full_path

    return _walk_children(
        store, storage_id, anchor.object_id, parent_path,
        recursive, skip_excluded, visit, config
    )


def _walk_children(
    store: ObjectStore,
    storage_id: int,
    anchor_handle: int,
    parent_path: str,
    recursive: bool,
    skip_excluded: bool,
    visit: WalkCallback,
    config: MtpxConfig
) -> int:
    with transport_errors(ListDirectoryError, f"failed to list directory {parent_path or anchor_handle}",
                          handle=anchor_handle, path=parent_path):
        handles = store.get_object_handles(storage_id, HandleScope.ALL_ASSOCIATIONS, anchor_handle)

    total = 0

    for object_id in handles:
        try:
            file_info = describe(store, object_id, parent_path, config)
        except MtpxError as ex:
            logger.debug(f"Skipping handle {object_id} under {parent_path}: {ex}")
            continue

        if skip_excluded and config.is_excluded(file_info.name):
            continue

        if visit is not None:
            try:
                visit(object_id, file_info)
            except Exception as ex:
                raise WalkAbortedError(ex, total) from ex

        total += 1

        if not recursive or not file_info.is_dir:
            continue

        try:
            total += _walk_children(
                store, storage_id, object_id, file_info.full_path,
                recursive, skip_excluded, visit, config
            )
        except WalkAbortedError as ex:
            raise WalkAbortedError(ex.reason, total + ex.count) from ex.reason
        except MtpxError as ex:
            raise WalkAbortedError(ex, total) from ex

    return total
