import asyncio
from typing import List, Optional

from .backend import AddressRecord, ResolverBackend
from .query import HostAddressQuery, HostAddressQueryDelegate


class _FutureDelegate(HostAddressQueryDelegate):
    def __init__(self, fut: asyncio.Future):
        self._fut = fut

    def on_success(self, query, addresses):
        if not self._fut.done():
            self._fut.set_result(addresses)

    def on_failure(self, query, error):
        if not self._fut.done():
            self._fut.set_exception(error)


async def resolve(
    name: str,
    *,
    timeout: Optional[float] = None,
    backend: Optional[ResolverBackend] = None,
) -> List[AddressRecord]:
    """Resolve *name* on the running loop and return its addresses.

    Raises the classified ``HostQueryError`` on failure and ``TimeoutError``
    if *timeout* seconds pass first; in both the timeout and the
    task-cancellation case the query is cancelled.
    """
    loop = asyncio.get_running_loop()
    fut = loop.create_future()
    delegate = _FutureDelegate(fut)
    query = HostAddressQuery(name, backend)
    query.delegate = delegate

    timer = None
    timed_out = False
    if timeout is not None:
        def on_timeout():
            nonlocal timed_out
            timed_out = True
            query.cancel()
            if not fut.done():
                fut.cancel()

        timer = loop.call_later(timeout, on_timeout)

    try:
        query.start(loop)
        return await fut
    except asyncio.CancelledError:
        query.cancel()
        if timed_out:
            raise TimeoutError(f"resolving {name!r} timed out after {timeout}s") from None
        raise
    finally:
        if timer is not None:
            timer.cancel()
