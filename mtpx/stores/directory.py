"""
Local directory exposed as a handle-addressed object store.

Lets the engine (and the CLI) work on a copied device tree, a mounted
backup or any plain directory exactly as it works on a device.
"""
import os
import shutil
import stat
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Union

from ..core.constants import ROOT_HANDLE, SIZE_OVERFLOW, ObjectFormat, ObjectProperty
from ..core.logging import get_logger
from ..core.models import ObjectInfo
from ..core.protocols import ObjectStore

logger = get_logger(__name__)


class DirectoryStoreError(Exception):
    """Raised when a handle or storage id is unknown to the store."""
    pass


class DirectoryObjectStore(ObjectStore):
    """
    Object store backed by a local directory.

    Handles are allocated lazily the first time a path is listed or
    created, and stay stable for the lifetime of the store object.
    Symbolic links inside the directory are not exposed.

    Example:
        >>> store = DirectoryObjectStore('/media/phone-backup')
        >>> store.get_object_handles(store.storage_id, 0, ROOT_HANDLE)
        [1, 2, 3]
    """

    def __init__(
        self,
        root: Union[str, Path],
        storage_id: int = 0x10001,
        chunk_size: int = 1024 * 1024
    ):
        """
        Initialize directory store.

        Args:
            root: Directory acting as the storage root
            storage_id: Id of the single storage this store exposes
            chunk_size: Bytes copied per step when sending or receiving data
        """
        self.root = Path(root).expanduser().absolute()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")

        self.storage_id = storage_id
        self.chunk_size = chunk_size
        self._paths: Dict[int, Path] = {ROOT_HANDLE: self.root}
        self._handles: Dict[Path, int] = {self.root: ROOT_HANDLE}
        self._next_handle = 1
        self._pending: Optional[Path] = None

    def _handle_for(self, path: Path) -> int:
        handle = self._handles.get(path)
        if handle is None:
            handle = self._next_handle
            self._next_handle += 1
            self._handles[path] = handle
            self._paths[handle] = path
        return handle

    def _path_for(self, handle: int) -> Path:
        try:
            return self._paths[handle]
        except KeyError:
            raise DirectoryStoreError(f"invalid object handle {handle}") from None

    def _check_storage(self, storage_id: int) -> None:
        if storage_id != self.storage_id:
            raise DirectoryStoreError(f"invalid storage id 0x{storage_id:x}")

    def _forget(self, path: Path) -> None:
        for known in [p for p in self._handles if p == path or path in p.parents]:
            self._paths.pop(self._handles.pop(known), None)

    def get_object_info(self, handle: int) -> ObjectInfo:
        path = self._path_for(handle)
        st = path.lstat()
        is_dir = stat.S_ISDIR(st.st_mode)
        return ObjectInfo(
            storage_id=self.storage_id,
            object_format=ObjectFormat.ASSOCIATION if is_dir else ObjectFormat.UNDEFINED,
            compressed_size=0 if is_dir else min(st.st_size, SIZE_OVERFLOW),
            parent_object=self._handle_for(path.parent),
            filename=path.name,
            date_created=datetime.fromtimestamp(st.st_ctime),
            modification_date=datetime.fromtimestamp(st.st_mtime),
        )

    def get_object_property_value(self, handle: int, prop: int) -> Any:
        path = self._path_for(handle)
        if prop == ObjectProperty.OBJECT_SIZE:
            return path.lstat().st_size
        if prop == ObjectProperty.OBJECT_FILE_NAME:
            return path.name
        raise DirectoryStoreError(f"unsupported property 0x{prop:04x}")

    def get_object_handles(self, storage_id: int, scope: int, parent_handle: int) -> List[int]:
        self._check_storage(storage_id)
        parent = self._path_for(parent_handle)
        return [
            self._handle_for(parent / name)
            for name in sorted(os.listdir(parent))
            if not (parent / name).is_symlink()
        ]

    def send_object_info(self, storage_id: int, parent_handle: int, info: ObjectInfo) -> int:
        self._check_storage(storage_id)
        path = self._path_for(parent_handle) / info.filename

        if info.is_association:
            path.mkdir()
            self._pending = None
        else:
            path.touch(exist_ok=False)
            self._pending = path

        logger.debug(f"Created {path}")
        return self._handle_for(path)

    def send_object(self, source: BinaryIO, size: int, progress: Callable[[int], Any]) -> None:
        if self._pending is None:
            raise DirectoryStoreError("SendObject without a preceding SendObjectInfo")

        path, self._pending = self._pending, None
        sent = 0
        with open(path, 'wb') as dest:
            while sent < size:
                chunk = source.read(min(self.chunk_size, size - sent))
                if not chunk:
                    raise DirectoryStoreError(f"source ended after {sent} of {size} bytes")
                dest.write(chunk)
                sent += len(chunk)
                progress(sent)

    def get_object(self, handle: int, destination: BinaryIO) -> None:
        with open(self._path_for(handle), 'rb') as src:
            shutil.copyfileobj(src, destination, self.chunk_size)

    def delete_object(self, handle: int) -> None:
        if handle == ROOT_HANDLE:
            raise DirectoryStoreError("cannot delete the storage root")

        path = self._path_for(handle)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        self._forget(path)
