"""
Exceptions for mtpx path resolution and tree traversal.

Every failure surfaced by the engine is one of the kinds below. Store
implementations may raise anything; the engine wraps those transport
failures into the kind that matches the operation that was running.
"""
import functools
from contextlib import contextmanager
from typing import Optional


class MtpxError(Exception):
    """Base exception for all mtpx errors."""

    def __init__(
        self,
        message: str,
        handle: Optional[int] = None,
        path: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            handle: Object handle involved (if known)
            path: Remote or local path involved (if known)
        """
        self.handle = handle
        self.path = path
        super().__init__(message)


class InvalidPathError(MtpxError):
    """Raised when a path/handle combination is malformed or does not resolve."""
    pass


class ObjectNotFoundError(MtpxError):
    """Raised when a directory has no child with the requested name."""
    pass


class ObjectAccessError(MtpxError):
    """Raised when reading object info, properties or handles fails."""
    pass


class ObjectCreateError(MtpxError):
    """Raised when creating a container or sending an object fails."""
    pass


class ListDirectoryError(MtpxError):
    """Raised when the children of a directory cannot be enumerated."""
    pass


class LocalFileError(MtpxError):
    """Raised for local filesystem failures other than permission issues."""
    pass


class FilePermissionError(LocalFileError):
    """Raised when the local filesystem denies access."""
    pass


class WalkAbortedError(MtpxError):
    """
    Raised when a remote walk stops after it has started visiting entries.

    The original failure is available as ``reason`` (and ``__cause__``);
    ``count`` holds the number of entries visited before the failure,
    nested directories included.
    """

    def __init__(self, reason: BaseException, count: int) -> None:
        """
        Initialize the exception.

        Args:
            reason: Exception raised by the visitor or a nested walk
            count: Entries visited successfully so far
        """
        self.reason = reason
        self.count = count
        super().__init__(
            f"walk aborted after {count} entries: {reason}",
            handle=getattr(reason, 'handle', None),
            path=getattr(reason, 'path', None)
        )


def local_file_error_wrap(cb):
    """Converts local OS errors into LocalFileError/FilePermissionError."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except PermissionError as ex:
            raise FilePermissionError(
                f"permission denied: {ex.filename or ex}", path=ex.filename
            ) from ex
        except OSError as ex:
            raise LocalFileError(
                f"local file error: {ex.__class__.__name__}: {ex}", path=ex.filename
            ) from ex

    return _inner


@contextmanager
def transport_errors(error_cls, message: str, handle: Optional[int] = None, path: Optional[str] = None):
    """
    Wraps store failures raised inside the block into ``error_cls``.

    mtpx errors pass through untouched so an inner translation is never
    overwritten by an outer one.
    """
    try:
        yield
    except MtpxError:
        raise
    except Exception as ex:
        raise error_cls(f"{message}: {ex}", handle=handle, path=path) from ex
