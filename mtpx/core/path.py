"""Path normalization for slash-separated remote paths."""
import re
from typing import List

PATH_SEP = '/'

_REPEATED_SEP = re.compile(r'/{2,}')


def normalize(path: str) -> str:
    """
    Canonicalize a remote path.

    Backslashes become forward slashes, repeated separators collapse,
    the result starts with exactly one slash and has no trailing slash
    unless it is the root.

    Examples:
        >>> normalize('Music\\\\Album/')
        '/Music/Album'
        >>> normalize('')
        '/'
    """
    path = _REPEATED_SEP.sub(PATH_SEP, PATH_SEP + path.replace('\\', PATH_SEP))
    if len(path) > 1:
        path = path.rstrip(PATH_SEP)
    return path


def join(parent: str, name: str) -> str:
    """Joins a parent path and a child name with a single separator."""
    return normalize(f"{parent}{PATH_SEP}{name}")


def split(path: str) -> List[str]:
    """Returns the non-empty segments of a path."""
    return [part for part in normalize(path).split(PATH_SEP) if part]


def is_root(path: str) -> bool:
    return normalize(path) == PATH_SEP


def extension(name: str, is_dir: bool) -> str:
    """Returns the text after the last dot of a file name."""
    if is_dir or '.' not in name:
        return ''
    return name.rsplit('.', 1)[1]
