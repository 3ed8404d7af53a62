"""
Protocol definitions for the object store collaborator.

The engine never talks to a transport directly. Anything that implements
ObjectStore (a USB device session, the in-memory store used in tests, a
local directory exposed as a store) can be resolved and walked.
"""
from typing import Protocol, Any, BinaryIO, Callable, List, runtime_checkable

from .models import ObjectInfo, FileInfo, LocalEntry


WalkCallback = Callable[[int, FileInfo], Any]
LocalWalkCallback = Callable[[LocalEntry], Any]
ProgressCallback = Callable[[int, int], Any]


@runtime_checkable
class ObjectStore(Protocol):
    """
    Protocol for handle-addressed object stores.

    Implementations signal transport failures by raising; the engine
    wraps whatever they raise into its own error kinds.
    """

    def get_object_info(self, handle: int) -> ObjectInfo:
        """
        Fetch the info record of an object.

        Args:
            handle: Object handle

        Returns:
            The object's info record
        """
        ...

    def get_object_property_value(self, handle: int, prop: int) -> Any:
        """
        Fetch a single property of an object.

        Args:
            handle: Object handle
            prop: Property code (see ObjectProperty)

        Returns:
            Property value (int for sizes, str for names)
        """
        ...

    def get_object_handles(self, storage_id: int, scope: int, parent_handle: int) -> List[int]:
        """
        Enumerate the direct children of a directory.

        Args:
            storage_id: Storage the parent belongs to
            scope: Format filter (see HandleScope)
            parent_handle: Directory handle, or ROOT_HANDLE

        Returns:
            Child handles in store order
        """
        ...

    def send_object_info(self, storage_id: int, parent_handle: int, info: ObjectInfo) -> int:
        """
        Create a new object from an info record.

        Args:
            storage_id: Target storage
            parent_handle: Directory receiving the object
            info: Template describing the object

        Returns:
            Handle of the created object
        """
        ...

    def send_object(self, source: BinaryIO, size: int, progress: Callable[[int], Any]) -> None:
        """
        Stream the data of the object created by the last send_object_info.

        Args:
            source: Readable binary stream
            size: Number of bytes to send
            progress: Called with the cumulative number of bytes sent
        """
        ...

    def get_object(self, handle: int, destination: BinaryIO) -> None:
        """
        Stream an object's data into a writable binary stream.

        Args:
            handle: Object handle
            destination: Writable binary stream
        """
        ...

    def delete_object(self, handle: int) -> None:
        """
        Delete an object.

        Args:
            handle: Object handle
        """
        ...
