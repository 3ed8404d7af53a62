"""
Data models for path resolution and tree walks.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Any, NamedTuple, Optional

from .constants import ObjectFormat


@dataclass
class ObjectInfo:
    """
    Info record of a store object.

    Also used as the template passed to send_object_info when creating
    directories and files.

    Attributes:
        storage_id: Storage the object lives in
        object_format: Format code; ASSOCIATION for directories
        protection_status: Write protection flag
        compressed_size: 32-bit size field (SIZE_OVERFLOW when too large)
        parent_object: Handle of the containing directory
        association_type: Association subtype for directories
        filename: Object name
        date_created: Creation time reported by the store
        modification_date: Modification time reported by the store
    """
    storage_id: int = 0
    object_format: int = ObjectFormat.UNDEFINED
    protection_status: int = 0
    compressed_size: int = 0
    parent_object: int = 0
    association_type: int = 0
    filename: str = ''
    date_created: Optional[datetime] = None
    modification_date: Optional[datetime] = None

    @property
    def is_association(self) -> bool:
        """Returns True if the record describes a directory."""
        return self.object_format == ObjectFormat.ASSOCIATION


@dataclass(frozen=True)
class FileInfo:
    """
    Resolved view of a remote object.

    A fresh FileInfo is built for every query and every walk visit;
    nothing caches them.

    Attributes:
        size: Size in bytes (overflow sentinel already resolved)
        is_dir: True for associations
        mod_time: Modification time reported by the store
        name: Object name
        extension: Text after the last dot, empty for directories
        full_path: parent_path joined with name
        parent_path: Normalized path of the containing directory
        parent_id: Handle of the containing directory
        object_id: Handle of the object
        info: Raw info record (None for the synthesized root)
    """
    size: int
    is_dir: bool
    full_path: str
    object_id: int
    mod_time: Optional[datetime] = None
    name: str = ''
    extension: str = ''
    parent_path: str = ''
    parent_id: int = 0
    info: Optional[ObjectInfo] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Converts the descriptor to a dictionary (info record excluded)."""
        result = asdict(self)
        result.pop('info', None)
        return result


@dataclass(frozen=True)
class LocalEntry:
    """
    Local filesystem entry handed to local walk visitors.

    Attributes:
        path: Path of the entry as reached by the walk
        name: Final path component
        is_dir: True for directories
        size: Size in bytes (0 for directories)
        mod_time: Modification time
    """
    path: str
    name: str
    is_dir: bool
    size: int = 0
    mod_time: Optional[datetime] = None


@dataclass
class LocalWalkResult:
    """Totals aggregated by a local walk."""
    file_count: int = 0
    dir_count: int = 0
    total_size: int = 0

    def add(self, entry: LocalEntry) -> None:
        """Accounts for one visited entry."""
        if entry.is_dir:
            self.dir_count += 1
        else:
            self.file_count += 1
            self.total_size += entry.size


class ExistsResult(NamedTuple):
    """Outcome of an existence check."""
    exists: bool
    is_dir: bool
    object_id: int
