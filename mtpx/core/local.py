"""
Local filesystem walks and helpers.

Symbolic links are never followed: a link is neither visited nor counted.
"""
import os
import stat
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Union

from .config import MtpxConfig, DEFAULT_CONFIG
from .exceptions import local_file_error_wrap
from .logging import get_logger
from .models import LocalEntry, LocalWalkResult
from .protocols import LocalWalkCallback

logger = get_logger(__name__)

PathLike = Union[str, Path]


@local_file_error_wrap
def _lstat(path: str) -> os.stat_result:
    return os.lstat(path)


@local_file_error_wrap
def _list_dir(path: str) -> List[str]:
    return sorted(os.listdir(path))


def _entry(path: str, st: os.stat_result) -> LocalEntry:
    is_dir = stat.S_ISDIR(st.st_mode)
    return LocalEntry(
        path=path,
        name=os.path.basename(os.path.normpath(path)),
        is_dir=is_dir,
        size=0 if is_dir else st.st_size,
        mod_time=datetime.fromtimestamp(st.st_mtime),
    )


def local_file_info(path: PathLike) -> LocalEntry:
    """
    Returns the LocalEntry of a path without following links.

    Raises:
        FilePermissionError: If access is denied
        LocalFileError: For any other OS failure
    """
    path = os.fspath(path)
    return _entry(path, _lstat(path))


def walk_local(
    sources: Iterable[PathLike],
    visit: LocalWalkCallback = None,
    config: MtpxConfig = DEFAULT_CONFIG
) -> LocalWalkResult:
    """
    Walks local trees, pre-order, roots included.

    Entries within a directory are visited in name order. Excluded names
    are skipped along with everything below them. Raising from ``visit``
    stops the walk across all remaining sources and propagates unchanged.

    Args:
        sources: Local files or directories to walk
        visit: Called with a LocalEntry for every entry
        config: Engine configuration

    Returns:
        File count, directory count and total file size

    Raises:
        FilePermissionError: If the filesystem denies access
        LocalFileError: For any other OS failure
    """
    result = LocalWalkResult()
    for source in sources:
        _walk_local(os.fspath(source), visit, result, config)
    return result


def _walk_local(path: str, visit: LocalWalkCallback, result: LocalWalkResult, config: MtpxConfig) -> None:
    st = _lstat(path)

    if stat.S_ISLNK(st.st_mode):
        logger.debug(f"Skipping symbolic link {path}")
        return

    entry = _entry(path, st)
    if config.is_excluded(entry.name):
        return

    if visit is not None:
        visit(entry)
    result.add(entry)

    if not entry.is_dir:
        return

    for name in _list_dir(path):
        _walk_local(os.path.join(path, name), visit, result, config)


@local_file_error_wrap
def make_local_directory(path: PathLike, config: MtpxConfig = DEFAULT_CONFIG) -> Path:
    """
    Creates a local directory and any missing parents.

    Raises:
        FilePermissionError: If access is denied
        LocalFileError: For any other OS failure
    """
    path = Path(path)
    path.mkdir(mode=config.directory_mode, parents=True, exist_ok=True)
    return path
