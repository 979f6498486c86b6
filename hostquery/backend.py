import enum
import errno
import functools
import logging
import socket
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

from .errors import ErrorDomain, StreamError, stream_error_from_exception
from .executor import run_in_executor

logger = logging.getLogger(__name__)


class HostInfoType(enum.IntEnum):
    ADDRESSES = 0


class AddressRecord(NamedTuple):
    family: int
    sockaddr: Tuple[Any, ...]


HostCallback = Callable[["HostHandle", HostInfoType, Optional[StreamError]], None]


class HostHandle:
    """Per-name handle driven by a query.

    The client callback is invoked on the loop the handle is scheduled on,
    with ``stream_error`` set to ``None`` on success.
    """

    def set_client(self, callback: Optional[HostCallback]) -> bool:
        raise NotImplementedError

    def schedule(self, loop) -> None:
        raise NotImplementedError

    def unschedule(self, loop) -> None:
        raise NotImplementedError

    def start_resolution(self, kind: HostInfoType) -> Tuple[bool, Optional[StreamError]]:
        raise NotImplementedError

    def cancel_resolution(self, kind: HostInfoType) -> None:
        raise NotImplementedError

    def get_addressing(self) -> List[AddressRecord]:
        raise NotImplementedError


class ResolverBackend:
    def create_handle(self, name: str) -> HostHandle:
        raise NotImplementedError


def _unique_addresses(infos) -> List[AddressRecord]:
    seen = set()
    out = []
    for family, _, _, _, sockaddr in infos:
        record = AddressRecord(int(family), tuple(sockaddr))
        if record not in seen:
            seen.add(record)
            out.append(record)
    return out


class SystemHostHandle(HostHandle):
    """Handle that resolves with ``socket.getaddrinfo`` on a worker thread."""

    def __init__(self, backend: "SystemResolverBackend", name: str):
        self.name = name
        self._backend = backend
        self._client: Optional[HostCallback] = None
        self._loop = None
        self._pending: Optional[object] = None
        self._addresses: List[AddressRecord] = []

    def set_client(self, callback):
        self._client = callback
        return True

    def schedule(self, loop):
        self._loop = loop
        self._backend._scheduled.add(self)

    def unschedule(self, loop):
        if self._loop is loop:
            self._loop = None
            self._backend._scheduled.discard(self)

    def start_resolution(self, kind):
        if self._pending is not None:
            return False, StreamError(ErrorDomain.POSIX, errno.EALREADY)
        if self._loop is None:
            return False, StreamError(ErrorDomain.POSIX, errno.EINVAL)
        try:
            self.name.encode("idna")
        except UnicodeError as exc:
            return False, stream_error_from_exception(exc)

        token = object()
        try:
            run_in_executor(
                self._loop,
                socket.getaddrinfo,
                self.name,
                None,
                0,
                socket.SOCK_STREAM,
                callback=functools.partial(self._resolved, token),
                executor=self._backend.executor,
            )
        except RuntimeError:
            return False, StreamError(ErrorDomain.POSIX, errno.ECANCELED)
        self._pending = token
        logger.debug("resolving %r", self.name)
        return True, None

    def _resolved(self, token, infos, exc):
        if self._pending is not token:
            logger.debug("dropping stale result for %r", self.name)
            return
        self._pending = None
        if exc is not None:
            stream_error = stream_error_from_exception(exc)
        else:
            self._addresses = _unique_addresses(infos)
            stream_error = None
        client = self._client
        if client is None or self._loop is None:
            logger.debug("no client for %r, result dropped", self.name)
            return
        client(self, HostInfoType.ADDRESSES, stream_error)

    def cancel_resolution(self, kind):
        self._pending = None

    def get_addressing(self):
        return list(self._addresses)


class SystemResolverBackend(ResolverBackend):
    """Backend built on the operating system resolver.

    Scheduled handles are retained here until unscheduled, which keeps
    them and their clients alive while a lookup is outstanding.
    """

    def __init__(self, executor: Optional[ThreadPoolExecutor] = None):
        self.executor = executor
        self._scheduled = set()

    def create_handle(self, name):
        return SystemHostHandle(self, name)

    @property
    def in_flight(self) -> int:
        return len(self._scheduled)
