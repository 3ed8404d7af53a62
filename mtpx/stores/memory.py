"""
In-memory object store implementation.

Provides a non-persistent handle-addressed store for testing and for
embedding the engine without a device.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Set, Tuple

from ..core.constants import ROOT_HANDLE, SIZE_OVERFLOW, ObjectFormat, ObjectProperty
from ..core.models import ObjectInfo
from ..core.protocols import ObjectStore


class MemoryStoreError(Exception):
    """Transport-level failure raised by MemoryObjectStore."""
    pass


@dataclass
class _MemoryObject:
    info: ObjectInfo
    size: int = 0
    data: bytes = b''


class MemoryObjectStore(ObjectStore):
    """
    In-memory object store.

    Objects live in a dictionary keyed by handle; handles are allocated
    incrementally starting at 1. Children are listed in creation order.

    Faults can be injected per handle through the ``fail_*`` sets, and
    every store call is recorded in ``calls`` as ``(method, handle)``.

    Example:
        >>> store = MemoryObjectStore()
        >>> music = store.add_directory(ROOT_HANDLE, 'Music')
        >>> song = store.add_file(music, 'song.mp3', b'data')
    """

    def __init__(self, storage_id: int = 0x10001, chunk_size: int = 64 * 1024):
        """
        Initialize memory object store.

        Args:
            storage_id: Id of the single storage this store exposes
            chunk_size: Bytes read per step when receiving object data
        """
        self.storage_id = storage_id
        self.chunk_size = chunk_size
        self._objects: Dict[int, _MemoryObject] = {}
        self._next_handle = 1
        self._pending: Optional[int] = None

        self.fail_info: Set[int] = set()
        self.fail_property: Set[int] = set()
        self.fail_handles: Set[int] = set()
        self.fail_send: bool = False
        self.fail_delete: Set[int] = set()
        self.calls: List[Tuple[str, int]] = []

    def _allocate(self, info: ObjectInfo, size: int = 0, data: bytes = b'') -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._objects[handle] = _MemoryObject(info=info, size=size, data=data)
        return handle

    def _get(self, handle: int) -> _MemoryObject:
        try:
            return self._objects[handle]
        except KeyError:
            raise MemoryStoreError(f"invalid object handle {handle}") from None

    def _check_parent(self, parent_handle: int) -> None:
        if parent_handle != ROOT_HANDLE and not self._get(parent_handle).info.is_association:
            raise MemoryStoreError(f"handle {parent_handle} is not a directory")

    def add_directory(self, parent_handle: int, name: str) -> int:
        """Adds a directory and returns its handle."""
        self._check_parent(parent_handle)
        info = ObjectInfo(
            storage_id=self.storage_id,
            object_format=ObjectFormat.ASSOCIATION,
            parent_object=parent_handle,
            filename=name,
            modification_date=datetime.now(),
        )
        return self._allocate(info)

    def add_file(
        self,
        parent_handle: int,
        name: str,
        data: bytes = b'',
        size: Optional[int] = None
    ) -> int:
        """
        Adds a file and returns its handle.

        ``size`` overrides the reported size (for objects larger than the
        compact size field can hold) without allocating the data.
        """
        self._check_parent(parent_handle)
        size = len(data) if size is None else size
        info = ObjectInfo(
            storage_id=self.storage_id,
            object_format=ObjectFormat.UNDEFINED,
            parent_object=parent_handle,
            filename=name,
            compressed_size=min(size, SIZE_OVERFLOW),
            modification_date=datetime.now(),
        )
        return self._allocate(info, size, data)

    def data(self, handle: int) -> bytes:
        """Returns the stored data of an object."""
        return self._get(handle).data

    def exists(self, handle: int) -> bool:
        return handle in self._objects

    def children(self, parent_handle: int) -> List[int]:
        return [
            handle for handle, obj in self._objects.items()
            if obj.info.parent_object == parent_handle
        ]

    def get_object_info(self, handle: int) -> ObjectInfo:
        self.calls.append(('get_object_info', handle))
        if handle in self.fail_info:
            raise MemoryStoreError(f"GetObjectInfo failed for handle {handle}")
        return replace(self._get(handle).info)

    def get_object_property_value(self, handle: int, prop: int) -> Any:
        self.calls.append(('get_object_property_value', handle))
        if handle in self.fail_property:
            raise MemoryStoreError(f"GetObjectPropValue failed for handle {handle}")
        obj = self._get(handle)
        if prop == ObjectProperty.OBJECT_SIZE:
            return obj.size
        if prop == ObjectProperty.OBJECT_FILE_NAME:
            return obj.info.filename
        raise MemoryStoreError(f"unsupported property 0x{prop:04x}")

    def get_object_handles(self, storage_id: int, scope: int, parent_handle: int) -> List[int]:
        self.calls.append(('get_object_handles', parent_handle))
        if parent_handle in self.fail_handles:
            raise MemoryStoreError(f"GetObjectHandles failed for handle {parent_handle}")
        if storage_id != self.storage_id:
            raise MemoryStoreError(f"invalid storage id 0x{storage_id:x}")
        self._check_parent(parent_handle)
        return self.children(parent_handle)

    def send_object_info(self, storage_id: int, parent_handle: int, info: ObjectInfo) -> int:
        self.calls.append(('send_object_info', parent_handle))
        if self.fail_send:
            raise MemoryStoreError("SendObjectInfo failed")
        if storage_id != self.storage_id:
            raise MemoryStoreError(f"invalid storage id 0x{storage_id:x}")
        self._check_parent(parent_handle)

        record = replace(info, storage_id=storage_id, parent_object=parent_handle)
        if record.is_association:
            record.compressed_size = 0
        handle = self._allocate(record, record.compressed_size)
        self._pending = None if record.is_association else handle
        return handle

    def send_object(self, source: BinaryIO, size: int, progress: Callable[[int], Any]) -> None:
        self.calls.append(('send_object', self._pending or 0))
        if self._pending is None:
            raise MemoryStoreError("SendObject without a preceding SendObjectInfo")

        chunks = []
        sent = 0
        while sent < size:
            chunk = source.read(min(self.chunk_size, size - sent))
            if not chunk:
                raise MemoryStoreError(f"source ended after {sent} of {size} bytes")
            chunks.append(chunk)
            sent += len(chunk)
            progress(sent)

        obj = self._get(self._pending)
        obj.data = b''.join(chunks)
        obj.size = sent
        self._pending = None

    def get_object(self, handle: int, destination: BinaryIO) -> None:
        self.calls.append(('get_object', handle))
        obj = self._get(handle)
        if obj.info.is_association:
            raise MemoryStoreError(f"handle {handle} is a directory")
        destination.write(obj.data)

    def delete_object(self, handle: int) -> None:
        self.calls.append(('delete_object', handle))
        if handle in self.fail_delete:
            raise MemoryStoreError(f"DeleteObject failed for handle {handle}")
        self._get(handle)
        for child in self.children(handle):
            self.delete_object(child)
        del self._objects[handle]
