"""Error classification for host address queries."""

import enum
import errno
import socket
from typing import NamedTuple, Optional

# Generic "unknown host" code reported alongside a raw lookup failure.
HOST_ERROR_UNKNOWN = 2

USER_CANCELLED = 3072


class ErrorDomain(enum.IntEnum):
    CUSTOM = -1
    NONE = 0
    POSIX = 1
    OS_STATUS = 2
    NET_SERVICES = 10
    NET_DB = 12


class StreamError(NamedTuple):
    """Raw ``(domain, code)`` pair reported by a resolver backend."""

    domain: int
    code: int

    @property
    def is_empty(self) -> bool:
        return self.domain == 0 and self.code == 0


class IllegalStateError(RuntimeError):
    """A query method was called in a state that does not allow it."""


class HostQueryError(Exception):
    """Base class for errors delivered by a host address query."""

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        super().__init__(message or f"{type(self).__name__} (code {code})")


class POSIXError(HostQueryError):
    pass


class OSStatusError(HostQueryError):
    pass


class NetworkServiceError(HostQueryError):
    pass


class NetworkError(HostQueryError):
    pass


class UnknownHostError(NetworkError):
    """The name lookup failed; ``raw_code`` holds the resolver's failure code.

    This is a ``NetworkError``, so ``except NetworkError`` also catches it.
    Use ``type(err) is NetworkError`` to test for the default bucket alone.
    """

    def __init__(self, raw_code: int):
        self.raw_code = raw_code
        super().__init__(
            HOST_ERROR_UNKNOWN, f"unknown host (lookup failure {raw_code})"
        )


class UserCancelledError(HostQueryError):
    def __init__(self):
        super().__init__(USER_CANCELLED, "cancelled by user")


def translate_stream_error(stream_error: StreamError) -> HostQueryError:
    """Map a raw backend error onto a classified ``HostQueryError``.

    Unrecognised domains fall through to ``NetworkError``.
    """
    domain, code = stream_error
    if domain == ErrorDomain.POSIX:
        return POSIXError(code)
    if domain == ErrorDomain.OS_STATUS:
        return OSStatusError(code)
    if domain == ErrorDomain.NET_SERVICES:
        return NetworkServiceError(code)
    if domain == ErrorDomain.NET_DB:
        return UnknownHostError(code)
    return NetworkError(code)


def stream_error_from_exception(exc: BaseException) -> StreamError:
    """Turn an exception raised by ``socket.getaddrinfo`` into a ``StreamError``."""
    if isinstance(exc, socket.gaierror):
        return StreamError(ErrorDomain.NET_DB, exc.errno or socket.EAI_FAIL)
    if isinstance(exc, UnicodeError):
        # IDNA encoding of the name failed before any lookup happened
        return StreamError(ErrorDomain.NET_DB, socket.EAI_NONAME)
    if isinstance(exc, OSError):
        return StreamError(ErrorDomain.POSIX, exc.errno or errno.EIO)
    return StreamError(ErrorDomain.CUSTOM, errno.EIO)
