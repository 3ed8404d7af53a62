"""Pytest fixtures for mtpx tests."""
import pytest

from mtpx.core.constants import ROOT_HANDLE
from mtpx.stores import MemoryObjectStore


@pytest.fixture
def store():
    """Returns an empty in-memory store."""
    return MemoryObjectStore()


@pytest.fixture
def tree(store):
    """
    Populates the store with a small device-like tree.

    /
    ├── DCIM/
    │   ├── Camera/
    │   │   ├── IMG_0001.jpg  (4 bytes)
    │   │   └── IMG_0002.jpg  (6 bytes)
    │   └── .DS_Store
    ├── Music/
    │   └── song.mp3          (5 bytes)
    └── notes.txt             (3 bytes)

    Returns a dict of name -> handle.
    """
    handles = {}
    handles['DCIM'] = store.add_directory(ROOT_HANDLE, 'DCIM')
    handles['Camera'] = store.add_directory(handles['DCIM'], 'Camera')
    handles['IMG_0001.jpg'] = store.add_file(handles['Camera'], 'IMG_0001.jpg', b'jpg1')
    handles['IMG_0002.jpg'] = store.add_file(handles['Camera'], 'IMG_0002.jpg', b'jpeg-2')
    handles['.DS_Store'] = store.add_file(handles['DCIM'], '.DS_Store', b'\x00')
    handles['Music'] = store.add_directory(ROOT_HANDLE, 'Music')
    handles['song.mp3'] = store.add_file(handles['Music'], 'song.mp3', b'notes')
    handles['notes.txt'] = store.add_file(ROOT_HANDLE, 'notes.txt', b'abc')
    return handles


@pytest.fixture
def local_tree(tmp_path):
    """
    Creates a local directory tree.

    src/
    ├── a.txt        (3 bytes)
    ├── .DS_Store    (1 byte)
    └── sub/
        └── b.bin    (10 bytes)
    """
    src = tmp_path / 'src'
    (src / 'sub').mkdir(parents=True)
    (src / 'a.txt').write_bytes(b'aaa')
    (src / '.DS_Store').write_bytes(b'x')
    (src / 'sub' / 'b.bin').write_bytes(b'0123456789')
    return src
