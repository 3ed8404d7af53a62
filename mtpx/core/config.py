"""
Engine configuration module.

The reserved handle values, the exclusion set and the local directory
mode live here as one immutable object that is built once and handed to
every component that needs it.
"""
from dataclasses import dataclass, field, replace
from typing import FrozenSet

from .constants import ROOT_HANDLE, SIZE_OVERFLOW


DEFAULT_EXCLUDED_NAMES: FrozenSet[str] = frozenset({
    '.DS_Store',
    '._.DS_Store',
    '.Spotlight-V100',
    '.Trashes',
    '.fseventsd',
    '.TemporaryItems',
    '.DocumentRevisions-V100',
    '.localized',
    'Thumbs.db',
    'desktop.ini',
    '$RECYCLE.BIN',
})


@dataclass(frozen=True)
class MtpxConfig:
    """
    Complete engine configuration.

    Attributes:
        root_handle: Handle standing for the storage root
        size_overflow: Compact size value that requires a precise size query
        root_size: Size reported for the synthesized root descriptor
        excluded_names: OS artifact names skipped by walks (exact match)
        directory_mode: Permission bits for created local directories
    """
    root_handle: int = ROOT_HANDLE
    size_overflow: int = SIZE_OVERFLOW
    root_size: int = 0
    excluded_names: FrozenSet[str] = field(default=DEFAULT_EXCLUDED_NAMES)
    directory_mode: int = 0o755

    def is_excluded(self, name: str) -> bool:
        """Returns True if walks must skip an entry with this name."""
        return name in self.excluded_names

    def with_excluded(self, *names: str) -> 'MtpxConfig':
        """Returns a copy whose exclusion set also contains ``names``."""
        return replace(self, excluded_names=self.excluded_names | frozenset(names))

    @classmethod
    def default(cls) -> 'MtpxConfig':
        """Create default configuration."""
        return cls()


DEFAULT_CONFIG = MtpxConfig.default()
