"""
MtpxClient - High-level client for one storage of a handle-addressed store.

Example:
    >>> from mtpx import MtpxClient
    >>> from mtpx.stores import DirectoryObjectStore
    >>>
    >>> client = MtpxClient(DirectoryObjectStore("/media/phone-backup"))
    >>> for entry in client.ls("/DCIM"):
    ...     print(entry.full_path, entry.size)
"""
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .core.config import MtpxConfig, DEFAULT_CONFIG
from .core.exceptions import InvalidPathError, ObjectNotFoundError
from .core.logging import get_logger
from .core.models import ObjectInfo, FileInfo, LocalWalkResult, ExistsResult
from .core.protocols import ObjectStore, WalkCallback, LocalWalkCallback, ProgressCallback
from .core import local, mutation, resolver, walker
from .core import path as pathutil

logger = get_logger(__name__)


class MtpxClient:
    """
    High-level client bound to one store and one storage.

    Every call re-reads the store: nothing is cached between calls, so a
    result reflects the store at the time of the call.

    Remote locations are given as a path, or as a handle when one is
    already known (a handle avoids scanning every directory of the path).
    """

    def __init__(
        self,
        store: ObjectStore,
        storage_id: Optional[int] = None,
        config: Optional[MtpxConfig] = None
    ):
        """
        Initialize the client.

        Args:
            store: Object store to operate on
            storage_id: Storage to use (defaults to ``store.storage_id``)
            config: Engine configuration (defaults to DEFAULT_CONFIG)
        """
        if storage_id is None:
            storage_id = getattr(store, 'storage_id', None)
        if storage_id is None:
            raise ValueError("storage_id is required for stores without a default storage")

        self.store = store
        self.storage_id = storage_id
        self.config = config or DEFAULT_CONFIG

    # =========================================================================
    # Lookup
    # =========================================================================

    def stat(self, path: str = '', handle: int = 0) -> FileInfo:
        """Get the descriptor of a path or handle."""
        return resolver.resolve_handle_or_path(self.store, self.storage_id, handle, path, self.config)

    def resolve(self, path: str) -> FileInfo:
        """Resolve a path to its descriptor, with a canonical full_path."""
        return resolver.resolve_path(self.store, self.storage_id, path, self.config)

    def exists(self, path: str = '', handle: int = 0) -> ExistsResult:
        """Check whether a path or handle exists."""
        return resolver.file_exists(self.store, self.storage_id, handle, path, self.config)

    def _directory(self, path: str, handle: int) -> FileInfo:
        file_info = self.stat(path, handle)
        if not file_info.is_dir:
            raise InvalidPathError(
                f"not a directory: {file_info.full_path}",
                handle=file_info.object_id, path=file_info.full_path
            )
        return file_info

    def ls(self, path: str = '/', handle: int = 0, skip_excluded: bool = True) -> List[FileInfo]:
        """List the direct children of a directory."""
        entries: List[FileInfo] = []
        self.walk(
            path, handle,
            recursive=False,
            skip_excluded=skip_excluded,
            visit=lambda _handle, file_info: entries.append(file_info)
        )
        return entries

    # =========================================================================
    # Walks
    # =========================================================================

    def walk(
        self,
        path: str = '',
        handle: int = 0,
        recursive: bool = True,
        skip_excluded: bool = True,
        visit: Optional[WalkCallback] = None
    ) -> int:
        """
        Walk a remote directory.

        Returns:
            Number of visited entries
        """
        total = walker.walk(
            self.store, self.storage_id, handle, path,
            recursive, skip_excluded, visit, self.config
        )
        logger.debug(f"Walked {path or handle}: {total} entries")
        return total

    def walk_local(
        self,
        sources: Iterable[Union[str, Path]],
        visit: Optional[LocalWalkCallback] = None
    ) -> LocalWalkResult:
        """Walk local files and directories."""
        return local.walk_local(sources, visit, self.config)

    # =========================================================================
    # Mutations
    # =========================================================================

    def mkdir(self, name: str, parent: str = '/', parent_handle: int = 0) -> int:
        """
        Create a directory, or return the existing one.

        Args:
            name: Directory name
            parent: Parent directory path
            parent_handle: Parent directory handle (overrides ``parent``)

        Returns:
            Handle of the directory
        """
        parent_info = self._directory(parent, parent_handle)
        try:
            existing = resolver.lookup_by_name(
                self.store, self.storage_id, parent_info.object_id, name,
                parent_info.full_path, self.config
            )
        except ObjectNotFoundError:
            existing = None

        if existing is not None:
            if not existing.is_dir:
                raise InvalidPathError(
                    f"cannot create directory {existing.full_path}: a file with that name exists",
                    handle=existing.object_id, path=existing.full_path
                )
            return existing.object_id

        handle = mutation.make_directory(self.store, self.storage_id, parent_info.object_id, name)
        logger.info(f"Created directory {name} ({handle})")
        return handle

    def makedirs(self, path: str) -> int:
        """Create a directory and every missing parent."""
        return mutation.make_directory_path(self.store, self.storage_id, path, self.config)

    def upload(
        self,
        file_path: Union[str, Path],
        dest: str = '/',
        dest_handle: int = 0,
        name: Optional[str] = None,
        overwrite: bool = False,
        progress_callback: Optional[ProgressCallback] = None
    ) -> int:
        """
        Upload a local file into a remote directory.

        Args:
            file_path: Local file path
            dest: Destination directory path
            dest_handle: Destination directory handle (overrides ``dest``)
            name: Remote name (defaults to the local file name)
            overwrite: Replace an existing object with the same name
            progress_callback: Optional callback(total_bytes, sent_bytes)

        Returns:
            Handle of the uploaded (or already existing) file
        """
        file_path = Path(file_path)
        parent = self._directory(dest, dest_handle)
        info = ObjectInfo(parent_object=parent.object_id, filename=name or file_path.name)

        handle = mutation.make_file(
            self.store, self.storage_id, info, file_path,
            overwrite, progress_callback, self.config
        )
        logger.info(f"Uploaded {file_path} to {pathutil.join(parent.full_path, info.filename)} ({handle})")
        return handle

    def download(
        self,
        path: str = '',
        dest_path: Union[str, Path] = '.',
        handle: int = 0
    ) -> Path:
        """
        Download a remote file.

        Args:
            path: Remote file path
            dest_path: Local destination file or existing directory
            handle: Remote file handle (overrides ``path``)

        Returns:
            Path of the written local file
        """
        file_info = self.stat(path, handle)

        dest = Path(dest_path)
        if dest.is_dir():
            dest = dest / file_info.name

        result = mutation.materialize_local(self.store, file_info, dest)
        logger.info(f"Downloaded {file_info.full_path} to {result}")
        return result

    def delete(self, path: str = '', handle: int = 0) -> None:
        """Delete a remote file or directory."""
        file_info = self.stat(path, handle)
        mutation.delete_object(self.store, file_info.object_id)
        logger.info(f"Deleted {file_info.full_path} ({file_info.object_id})")

    def mkdir_local(self, path: Union[str, Path]) -> Path:
        """Create a local directory and any missing parents."""
        return local.make_local_directory(path, self.config)
