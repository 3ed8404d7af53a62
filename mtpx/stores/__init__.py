"""
Object store implementations.

Any object following the ObjectStore protocol works with the engine;
these two cover tests and local directories.
"""
from .memory import MemoryObjectStore, MemoryStoreError
from .directory import DirectoryObjectStore, DirectoryStoreError

__all__ = [
    'MemoryObjectStore',
    'MemoryStoreError',
    'DirectoryObjectStore',
    'DirectoryStoreError',
]
