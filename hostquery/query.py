"""Asynchronous resolution of a host name to its addresses.

A :class:`HostAddressQuery` is bound to one event loop from :meth:`start`
until it stops. The delegate is told about the outcome exactly once, on
that loop, unless the query is cancelled.
"""

import asyncio
import enum
import logging
import threading
import weakref
from typing import List, Optional

from .backend import AddressRecord, HostInfoType, ResolverBackend, SystemResolverBackend
from .errors import (
    HostQueryError,
    IllegalStateError,
    StreamError,
    UserCancelledError,
    translate_stream_error,
)

logger = logging.getLogger(__name__)

_default_backend: Optional[ResolverBackend] = None


def get_default_backend() -> ResolverBackend:
    global _default_backend
    if _default_backend is None:
        _default_backend = SystemResolverBackend()
    return _default_backend


def _running_loop():
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class QueryState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class HostAddressQueryDelegate:
    def on_success(self, query: "HostAddressQuery", addresses: List[AddressRecord]) -> None:
        pass

    def on_failure(self, query: "HostAddressQuery", error: HostQueryError) -> None:
        pass


class HostAddressQuery:
    """Resolves ``name`` to a list of addresses.

    The delegate is held weakly; if it has gone away by the time the
    query finishes, the notification is dropped.
    """

    def __init__(self, name: str, backend: Optional[ResolverBackend] = None):
        if not isinstance(name, str):
            raise TypeError(f"name must be a str, not {type(name).__name__}")
        if not name:
            raise ValueError("name must not be empty")
        self._name = name
        self._host = (backend or get_default_backend()).create_handle(name)
        self._loop = None
        self._thread_id = None
        self._state = QueryState.IDLE
        self._delegate_ref = None
        self.error: Optional[HostQueryError] = None

    def __repr__(self):
        return f"<HostAddressQuery {self._name!r} {self._state.value}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def loop(self):
        """The loop driving the query; ``None`` unless running."""
        return self._loop

    @property
    def delegate(self) -> Optional[HostAddressQueryDelegate]:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    @delegate.setter
    def delegate(self, value: Optional[HostAddressQueryDelegate]) -> None:
        self._delegate_ref = None if value is None else weakref.ref(value)

    def start(self, loop=None) -> None:
        """Start resolving on *loop* (the running loop by default).

        If the backend refuses the request outright the query stops
        without notifying the delegate and the classified error is raised
        here instead.
        """
        if self._state is not QueryState.IDLE:
            raise IllegalStateError(f"cannot start a query that is {self._state.value}")
        running = _running_loop()
        if loop is None:
            if running is None:
                raise IllegalStateError("no running event loop to start the query on")
            loop = running
        elif running is not loop and (running is not None or loop.is_running()):
            raise IllegalStateError("a query must be started from the loop that drives it")

        # While scheduled, the handle holds the query through this callback.
        if not self._host.set_client(self._host_callback):
            self._state = QueryState.STOPPED
            raise IllegalStateError("backend refused the query callback")
        self._loop = loop
        self._thread_id = threading.get_ident()
        self._state = QueryState.RUNNING
        logger.debug("starting %r", self)

        try:
            self._host.schedule(loop)
            success, stream_error = self._host.start_resolution(HostInfoType.ADDRESSES)
        except Exception:
            self._stop(None, notify=False)
            raise
        if not success:
            error = translate_stream_error(stream_error or StreamError(0, 0))
            self._stop(error, notify=False)
            raise error

    def _host_callback(self, host, kind, stream_error: Optional[StreamError]) -> None:
        if stream_error is None or StreamError(*stream_error).is_empty:
            self._stop(None, notify=True)
        else:
            self._stop(translate_stream_error(stream_error), notify=True)

    def _stop(self, error: Optional[HostQueryError], notify: bool) -> None:
        if self._state is not QueryState.RUNNING:
            raise IllegalStateError(f"cannot stop a query that is {self._state.value}")
        self._check_loop()
        loop = self._loop
        self._loop = None
        self._thread_id = None
        self._state = QueryState.STOPPED
        self.error = error

        self._host.set_client(None)
        self._host.unschedule(loop)
        self._host.cancel_resolution(HostInfoType.ADDRESSES)
        logger.debug("stopped %r error=%r notify=%s", self, error, notify)

        if not notify:
            return
        delegate = self.delegate
        if delegate is None:
            logger.debug("delegate of %r is gone, notification dropped", self)
            return
        if error is not None:
            delegate.on_failure(self, error)
        else:
            delegate.on_success(self, self._host.get_addressing())

    def _check_loop(self) -> None:
        if threading.get_ident() != self._thread_id:
            raise IllegalStateError("query used from a thread other than the one it was started on")
        running = _running_loop()
        if running is not None and running is not self._loop:
            raise IllegalStateError("query used from a loop other than the one it was started on")

    def cancel(self) -> None:
        """Stop the query without telling the delegate; no-op unless running."""
        if self._state is QueryState.RUNNING:
            self._stop(UserCancelledError(), notify=False)

    @property
    def addresses(self) -> List[AddressRecord]:
        """Addresses found so far; empty until the query succeeds."""
        if self._state is not QueryState.STOPPED or self.error is not None:
            return []
        return self._host.get_addressing()
